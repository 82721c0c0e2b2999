"""Error types raised while syncing a project's burndown."""


class SyncError(Exception):
    """Base class; `project` is set once the failure is tied to a project."""

    def __init__(self, message, project=None):
        super().__init__(message)
        self.project = project


class ConfigurationError(SyncError):
    """Missing credential, bad settings, or an unknown project name."""


class UpstreamError(SyncError):
    """The Linear API call failed or returned an error envelope."""


class RenderError(SyncError):
    """Writing the worksheet or its chart failed."""

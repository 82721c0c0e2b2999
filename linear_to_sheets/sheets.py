"""
Google Sheets rendering of a project's burndown.

Each customer owns one worksheet named after it. Every refresh wipes that
worksheet and writes, in order: a title, the burndown table, a summary block
and a line chart of the three counters against date.

Layout:
- A1: title
- A3:D3: header, data rows from row 4
- F3:G7: summary
- chart anchored at A9
"""

import datetime
import logging

import gspread

from linear_to_sheets.burndown import summarize
from linear_to_sheets.errors import ConfigurationError

logger = logging.getLogger(__name__)

HEADER = ["Date", "Total Created", "Total Completed", "Remaining"]
HEADER_ROW = 3
FIRST_DATA_ROW = 4
LAST_COLUMN_INDEX = 7  # columns A..G

# Created - blue, Completed - green, Remaining - red (drawn thicker)
SERIES_STYLE = [
    ("#4285F4", 2),
    ("#34A853", 2),
    ("#EA4335", 3),
]
CHART_ANCHOR_ROW = 8  # zero-based, i.e. row 9
CHART_WIDTH = 800
CHART_HEIGHT = 400


def open_spreadsheet(settings):
    try:
        gc = gspread.service_account(filename=settings.service_account_path)
    except FileNotFoundError:
        raise ConfigurationError(
            f"Google service account file not found: {settings.service_account_path}"
        )
    try:
        return gc.open(settings.spreadsheet_name)
    except gspread.exceptions.SpreadsheetNotFound:
        raise ConfigurationError(
            f"Spreadsheet {settings.spreadsheet_name!r} not found or not shared with the service account"
        )


def get_or_create_worksheet(spreadsheet, title):
    try:
        return spreadsheet.worksheet(title)
    except gspread.exceptions.WorksheetNotFound:
        logger.info("Creating worksheet %s", title)
        return spreadsheet.add_worksheet(title=title, rows=1000, cols=26)


def timestamp(moment=None, tz=None):
    return (moment or datetime.datetime.now(tz)).strftime("%Y-%m-%d %H:%M:%S")


def chart_title(project_name):
    return f"{project_name} - GitHub Issue Burndown"


def hex_to_rgb(color):
    color = color.lstrip("#")
    red, green, blue = (int(color[i:i + 2], 16) / 255 for i in (0, 2, 4))
    return {"red": red, "green": green, "blue": blue}


def build_values(project_name, points, refreshed_at=None, tz=None):
    """Value ranges for Worksheet.batch_update."""
    data = [
        {"range": "A1", "values": [[chart_title(project_name)]]},
        {"range": f"A{HEADER_ROW}:D{HEADER_ROW}", "values": [HEADER]},
    ]
    if not points:
        return data

    last_row = FIRST_DATA_ROW + len(points) - 1
    data.append({
        "range": f"A{FIRST_DATA_ROW}:D{last_row}",
        "values": [point.as_row() for point in points],
    })

    totals = summarize(points)
    data.append({"range": "F3", "values": [["Summary:"]]})
    data.append({
        "range": "F4:G7",
        "values": [
            ["Total Issues:", totals["total"]],
            ["Completed:", totals["completed"]],
            ["Remaining:", totals["remaining"]],
            ["Last Updated:", timestamp(refreshed_at, tz)],
        ],
    })
    return data


def build_formats(points):
    """Cell formats for Worksheet.batch_format."""
    formats = [
        {"range": "A1", "format": {"textFormat": {"bold": True, "fontSize": 14}}},
        {"range": f"A{HEADER_ROW}:D{HEADER_ROW}", "format": {"textFormat": {"bold": True}}},
    ]
    if not points:
        return formats

    last_row = FIRST_DATA_ROW + len(points) - 1
    formats.extend([
        {
            "range": f"A{FIRST_DATA_ROW}:A{last_row}",
            "format": {"numberFormat": {"type": "DATE", "pattern": "yyyy-mm-dd"}},
        },
        {"range": "F3:F7", "format": {"textFormat": {"bold": True}}},
        {
            "range": "G7",
            "format": {"numberFormat": {"type": "DATE_TIME", "pattern": "yyyy-mm-dd hh:mm:ss"}},
        },
    ])
    return formats


def column_range(sheet_id, column, rows):
    # Header row included so each series picks up its name
    return {
        "sheetId": sheet_id,
        "startRowIndex": HEADER_ROW - 1,
        "endRowIndex": HEADER_ROW + rows,
        "startColumnIndex": column,
        "endColumnIndex": column + 1,
    }


def build_chart_request(sheet_id, project_name, rows):
    series = []
    for column, (color, width) in enumerate(SERIES_STYLE, start=1):
        series.append({
            "series": {"sourceRange": {"sources": [column_range(sheet_id, column, rows)]}},
            "targetAxis": "LEFT_AXIS",
            "color": hex_to_rgb(color),
            "lineStyle": {"width": width},
        })

    return {
        "addChart": {
            "chart": {
                "spec": {
                    "title": chart_title(project_name),
                    "basicChart": {
                        "chartType": "LINE",
                        "legendPosition": "BOTTOM_LEGEND",
                        "headerCount": 1,
                        "axis": [
                            {"position": "BOTTOM_AXIS", "title": "Date"},
                            {
                                "position": "LEFT_AXIS",
                                "title": "Issue Count",
                                "viewWindowOptions": {"viewWindowMode": "EXPLICIT", "viewWindowMin": 0},
                            },
                        ],
                        "domains": [
                            {"domain": {"sourceRange": {"sources": [column_range(sheet_id, 0, rows)]}}}
                        ],
                        "series": series,
                    },
                },
                "position": {
                    "overlayPosition": {
                        "anchorCell": {
                            "sheetId": sheet_id,
                            "rowIndex": CHART_ANCHOR_ROW,
                            "columnIndex": 0,
                        },
                        "widthPixels": CHART_WIDTH,
                        "heightPixels": CHART_HEIGHT,
                    }
                },
            }
        }
    }


def clear_worksheet(spreadsheet, worksheet):
    """Wipe values and formatting; Worksheet.clear() only drops values."""
    spreadsheet.batch_update({
        "requests": [
            {
                "updateCells": {
                    "range": {"sheetId": worksheet.id},
                    "fields": "userEnteredValue,userEnteredFormat",
                }
            }
        ]
    })


def existing_chart_ids(spreadsheet, sheet_id):
    metadata = spreadsheet.fetch_sheet_metadata(
        params={"fields": "sheets(properties.sheetId,charts.chartId)"}
    )
    for sheet in metadata.get("sheets", []):
        if sheet.get("properties", {}).get("sheetId") == sheet_id:
            return [chart["chartId"] for chart in sheet.get("charts", [])]
    return []


def replace_chart(spreadsheet, worksheet, project_name, rows):
    """Drop every chart on the worksheet, then add a fresh one when there is data."""
    requests = [
        {"deleteEmbeddedObject": {"objectId": chart_id}}
        for chart_id in existing_chart_ids(spreadsheet, worksheet.id)
    ]
    if rows:
        requests.append(build_chart_request(worksheet.id, project_name, rows))
    if requests:
        spreadsheet.batch_update({"requests": requests})


def ensure_rows(worksheet, rows):
    """Grow the grid so `rows` rows fit; writes past the last row are rejected."""
    if rows > worksheet.row_count:
        worksheet.add_rows(rows - worksheet.row_count)


def render_burndown(spreadsheet, project_name, points, refreshed_at=None, tz=None):
    """Overwrite the project's worksheet with `points` and redraw its chart.

    `tz` is the zone the "Last Updated" stamp is written in (None: local time).
    """
    worksheet = get_or_create_worksheet(spreadsheet, project_name)
    ensure_rows(worksheet, FIRST_DATA_ROW + len(points) - 1)

    # Full overwrite, nothing from the previous refresh survives
    clear_worksheet(spreadsheet, worksheet)
    worksheet.batch_update(build_values(project_name, points, refreshed_at, tz), value_input_option="USER_ENTERED")
    worksheet.batch_format(build_formats(points))

    replace_chart(spreadsheet, worksheet, project_name, len(points))
    worksheet.columns_auto_resize(0, LAST_COLUMN_INDEX)

    logger.info("Wrote %d burndown rows to %s", len(points), project_name)
    return worksheet

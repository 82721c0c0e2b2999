from linear_to_sheets.cli import main

if __name__ == "__main__":
    raise SystemExit(main())

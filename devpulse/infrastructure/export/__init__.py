from .csv_report import CSV_HEADERS, build_csv, report_filename

__all__ = ["CSV_HEADERS", "build_csv", "report_filename"]

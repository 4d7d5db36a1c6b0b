from .sheets_recorder import SheetsRecorder

__all__ = ["SheetsRecorder"]

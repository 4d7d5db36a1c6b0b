from .settings import CheckInSettings, LLMSettings, Settings, SheetsSettings, get_settings

__all__ = ["CheckInSettings", "LLMSettings", "Settings", "SheetsSettings", "get_settings"]

from .sheets import GoogleSheetsIntegration, get_sheets_integration

__all__ = [
    "GoogleSheetsIntegration",
    "get_sheets_integration",
]

"""
Google Sheets integration used as a row-oriented database.

One worksheet per entity, first row is the header. gspread is synchronous,
so every call runs in a worker thread to let independent reads overlap.
"""

import asyncio
import json
import logging
from typing import Dict, List, Optional

import gspread
from gspread.utils import rowcol_to_a1
from google.oauth2.service_account import Credentials

from config import settings
from ..database.exceptions import StoreConfigurationError, StoreOperationError

logger = logging.getLogger(__name__)


# ============================================
# SHEET NAME CONSTANTS (must match setup_sheets.py)
# ============================================
SHEET_USERS = "user"
SHEET_CLIENTS = "client"
SHEET_PROJECTS = "project"
SHEET_TASKS = "task"
SHEET_ACTIVITIES = "activity"
SHEET_PROJECT_TYPES = "list"

SHEET_HEADERS: Dict[str, List[str]] = {
    SHEET_USERS: ["id", "username", "name", "email", "password", "role", "team", "status"],
    SHEET_CLIENTS: ["id", "name", "address"],
    SHEET_PROJECTS: [
        "id", "name", "description", "clientID", "teamLeaderId", "teamMemberIds",
        "startDate", "deadline", "status", "priority", "type", "shareToken",
    ],
    SHEET_TASKS: ["id", "name", "description", "projectID", "userID", "status"],
    SHEET_ACTIVITIES: ["id", "activity", "taskID", "projID", "userID", "date", "starttime", "endtime"],
    SHEET_PROJECT_TYPES: ["id", "name"],
}


class GoogleSheetsIntegration:
    """
    Thin async wrapper over one spreadsheet.

    Row numbers handed in and out are 1-based sheet rows; row 1 is always
    the header and is never returned by read_rows() nor deleted.
    """

    SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

    def __init__(
        self,
        credentials_json: Optional[str] = None,
        sheet_id: Optional[str] = None,
    ):
        self.credentials_json = credentials_json if credentials_json is not None else settings.google_credentials_json
        self.sheet_id = sheet_id if sheet_id is not None else settings.google_sheet_id
        self.client: Optional[gspread.Client] = None
        self.spreadsheet: Optional[gspread.Spreadsheet] = None
        self._initialized = False
        self._checked_headers: set = set()
        self._init_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Authorize and open the spreadsheet once per process."""
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:
                return

            if not self.credentials_json or not self.sheet_id:
                raise StoreConfigurationError(
                    "GOOGLE_CREDENTIALS_JSON and GOOGLE_SHEET_ID must be set"
                )

            try:
                creds_data = json.loads(self.credentials_json)
            except json.JSONDecodeError as e:
                raise StoreConfigurationError(f"GOOGLE_CREDENTIALS_JSON is not valid JSON: {e}") from e

            try:
                credentials = Credentials.from_service_account_info(creds_data, scopes=self.SCOPES)
                self.client = await asyncio.to_thread(gspread.authorize, credentials)
                self.spreadsheet = await asyncio.to_thread(self.client.open_by_key, self.sheet_id)
            except Exception as e:
                logger.error(f"Failed to initialize Google Sheets: {e}")
                raise StoreConfigurationError(f"Could not open spreadsheet: {e}") from e

            self._initialized = True
            logger.info(f"Google Sheets connected: {self.spreadsheet.title}")

    async def _worksheet(self, sheet_name: str) -> gspread.Worksheet:
        await self.initialize()
        try:
            return await asyncio.to_thread(self.spreadsheet.worksheet, sheet_name)
        except gspread.WorksheetNotFound as e:
            raise StoreOperationError(f'Sheet "{sheet_name}" could not be found.') from e

    async def ensure_headers(self, sheet_name: str) -> None:
        """Write the header row if it is missing or shorter than expected."""
        if sheet_name in self._checked_headers:
            return

        headers = SHEET_HEADERS[sheet_name]
        worksheet = await self._worksheet(sheet_name)
        current = await asyncio.to_thread(worksheet.row_values, 1)

        if len(current) < len(headers):
            logger.info(f"Writing header row for sheet {sheet_name}")
            await asyncio.to_thread(
                worksheet.update,
                range_name="A1",
                values=[headers],
                value_input_option="USER_ENTERED",
            )

        self._checked_headers.add(sheet_name)

    async def read_values(self, sheet_name: str) -> List[List[str]]:
        """Every row of the sheet, header included."""
        await self.ensure_headers(sheet_name)
        worksheet = await self._worksheet(sheet_name)
        return await asyncio.to_thread(worksheet.get_all_values)

    async def read_rows(self, sheet_name: str) -> List[List[str]]:
        """Data rows only, padded to the header width."""
        width = len(SHEET_HEADERS[sheet_name])
        values = await self.read_values(sheet_name)
        return [row + [""] * (width - len(row)) for row in values[1:]]

    async def read_column(self, sheet_name: str, column: int = 1) -> List[str]:
        """One column (1-based), header included."""
        await self.ensure_headers(sheet_name)
        worksheet = await self._worksheet(sheet_name)
        return await asyncio.to_thread(worksheet.col_values, column)

    async def read_row(self, sheet_name: str, row_number: int) -> List[str]:
        """One row (1-based), padded to the header width."""
        width = len(SHEET_HEADERS[sheet_name])
        worksheet = await self._worksheet(sheet_name)
        row = await asyncio.to_thread(worksheet.row_values, row_number)
        return row + [""] * (width - len(row))

    async def append_row(self, sheet_name: str, values: List[str]) -> None:
        worksheet = await self._worksheet(sheet_name)
        await asyncio.to_thread(
            worksheet.append_row, values, value_input_option="USER_ENTERED"
        )
        logger.debug(f"Appended row {values[0]} to {sheet_name}")

    async def update_row(self, sheet_name: str, row_number: int, values: List[str]) -> None:
        """Overwrite one full row."""
        if row_number <= 1:
            raise StoreOperationError(f"Refusing to overwrite header row of {sheet_name}")

        worksheet = await self._worksheet(sheet_name)
        cell_range = f"A{row_number}:{rowcol_to_a1(row_number, len(values))}"
        await asyncio.to_thread(
            worksheet.update,
            range_name=cell_range,
            values=[values],
            value_input_option="USER_ENTERED",
        )
        logger.debug(f"Updated {sheet_name} row {row_number}")

    async def update_cell(self, sheet_name: str, row_number: int, column: int, value: str) -> None:
        if row_number <= 1:
            raise StoreOperationError(f"Refusing to overwrite header row of {sheet_name}")

        worksheet = await self._worksheet(sheet_name)
        await asyncio.to_thread(worksheet.update_cell, row_number, column, value)

    async def delete_rows(self, rows_by_sheet: Dict[str, List[int]]) -> int:
        """
        Delete rows across sheets in a single batch update.

        Rows are deleted bottom-up so earlier deletions do not shift later
        ones, then the same number of blank rows is appended to each sheet so
        the grid keeps its size.

        Returns:
            Number of rows deleted
        """
        requests = []
        appends = []

        for sheet_name, row_numbers in rows_by_sheet.items():
            targets = sorted({r for r in row_numbers if r > 1}, reverse=True)
            if not targets:
                continue

            worksheet = await self._worksheet(sheet_name)
            for row_number in targets:
                requests.append({
                    "deleteDimension": {
                        "range": {
                            "sheetId": worksheet.id,
                            "dimension": "ROWS",
                            "startIndex": row_number - 1,
                            "endIndex": row_number,
                        }
                    }
                })
            appends.append({
                "appendDimension": {
                    "sheetId": worksheet.id,
                    "dimension": "ROWS",
                    "length": len(targets),
                }
            })

        if not requests:
            return 0

        await asyncio.to_thread(self.spreadsheet.batch_update, {"requests": requests + appends})
        logger.info(f"Deleted {len(requests)} rows across {len(appends)} sheets")
        return len(requests)


# Global instance
sheets_integration = GoogleSheetsIntegration()


def get_sheets_integration() -> GoogleSheetsIntegration:
    """Get the Google Sheets integration instance."""
    return sheets_integration

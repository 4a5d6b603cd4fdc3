"""
Shared plumbing for the sheet-backed repositories.

Every entity lives in its own worksheet with the id in column A. Ids are
assigned as PREFIX-NNN by reading the last row's suffix and adding one.
This is not safe under concurrent creates; two near-simultaneous creates
can compute the same id.
"""

import functools
import logging
from datetime import date, datetime
from typing import Callable, List, Optional, Union

from ...integrations.sheets import (
    GoogleSheetsIntegration,
    get_sheets_integration,
    SHEET_PROJECTS,
)
from ...utils.retry import with_google_api_retry
from ..exceptions import StoreError, StoreOperationError, EntityNotFoundError

logger = logging.getLogger(__name__)


def store_operation(action: str):
    """
    Translate unexpected failures into StoreOperationError.

    Typed store errors pass through untouched. Anything else is logged and
    re-raised as "Could not <action>." with the cause chained.
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except StoreError:
                raise
            except Exception as e:
                logger.error(f"Error trying to {action}: {e}", exc_info=True)
                raise StoreOperationError(f"Could not {action}.") from e
        return wrapper
    return decorator


def split_ids(value: str) -> List[str]:
    """Parse a comma separated id cell."""
    return [part.strip() for part in value.split(",") if part.strip()] if value else []


SHEET_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%Y/%m/%d", "%d.%m.%Y", "%d-%b-%Y", "%b %d, %Y", "%B %d, %Y")
SHEET_TIME_FORMATS = ("%H:%M", "%H:%M:%S", "%I:%M %p", "%I:%M:%S %p")


def sheet_date(value: str) -> Union[date, str]:
    """
    Parse a date cell as Sheets renders it.

    Cells written USER_ENTERED come back in the spreadsheet's locale
    (3/1/2026, 1-Mar-2026, ...). Unrecognized text is returned unchanged.
    """
    text = value.strip()
    for fmt in SHEET_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return text


def sheet_time(value: str) -> str:
    """Normalize a time cell (9:00, 9:00:00, 9:00 AM) to HH:mm; unrecognized text is returned unchanged."""
    text = value.strip()
    for fmt in SHEET_TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt).strftime("%H:%M")
        except ValueError:
            continue
    return text


class SheetRepository:
    """Base repository for one worksheet."""

    sheet_name: str = ""
    id_prefix: str = ""
    id_width: int = 3

    def __init__(self, sheets: Optional[GoogleSheetsIntegration] = None):
        self.sheets = sheets or get_sheets_integration()

    @with_google_api_retry
    async def _rows(self) -> List[List[str]]:
        return await self.sheets.read_rows(self.sheet_name)

    @with_google_api_retry
    async def _id_column(self) -> List[str]:
        return await self.sheets.read_column(self.sheet_name, 1)

    @with_google_api_retry
    async def _project_rows(self) -> List[List[str]]:
        return await self.sheets.read_rows(SHEET_PROJECTS)

    async def next_id(self) -> str:
        """Next id after the last row's numeric suffix."""
        ids = await self._id_column()
        last_number = 0

        if len(ids) > 1:
            last_id = ids[-1]
            if last_id.startswith(f"{self.id_prefix}-"):
                try:
                    last_number = int(last_id.split("-")[1])
                except ValueError:
                    logger.warning(f"Unparseable last id {last_id!r} in {self.sheet_name}")

        return f"{self.id_prefix}-{last_number + 1:0{self.id_width}d}"

    async def find_row_number(self, entity_id: str) -> int:
        """
        Locate an entity's sheet row.

        Raises:
            EntityNotFoundError: if the id is absent or only matches the header
        """
        ids = await self._id_column()
        for index, value in enumerate(ids):
            if index > 0 and value == entity_id:
                return index + 1

        raise EntityNotFoundError(
            f'Item with ID "{entity_id}" not found in sheet "{self.sheet_name}".'
        )

    async def _delete_with_dependents(self, entity_id: str, dependents: dict) -> None:
        """
        Delete one row and every dependent row in one batch.

        Args:
            dependents: {sheet_name: column_index} of the foreign key column
                        (0-based) that must equal entity_id
        """
        row_number = await self.find_row_number(entity_id)
        rows_by_sheet = {self.sheet_name: [row_number]}

        for sheet_name, column in dependents.items():
            rows = await self.sheets.read_values(sheet_name)
            matches = [
                index + 1
                for index, row in enumerate(rows)
                if index > 0 and len(row) > column and row[column] == entity_id
            ]
            if matches:
                rows_by_sheet[sheet_name] = matches

        deleted = await self.sheets.delete_rows(rows_by_sheet)
        logger.info(f"Deleted {entity_id} from {self.sheet_name} ({deleted} rows including dependents)")

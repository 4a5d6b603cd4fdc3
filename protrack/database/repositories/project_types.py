"""Project type list (read-only) over the list sheet."""

import logging
from typing import List

from ...integrations.sheets import SHEET_PROJECT_TYPES
from ...models import ProjectType
from .base import SheetRepository, store_operation

logger = logging.getLogger(__name__)


class ProjectTypeRepository(SheetRepository):
    sheet_name = SHEET_PROJECT_TYPES

    @store_operation("retrieve project type data")
    async def list(self) -> List[ProjectType]:
        types = []
        for row in await self._rows():
            if not row[0] or not row[1]:
                logger.warning(f"Skipping incomplete or malformed project type row: {row}")
                continue
            types.append(ProjectType(id=row[0], name=row[1]))
        return types

"""
Client repository over the client sheet.

Columns: id, name, address
"""

import logging
from typing import Optional, List

from ...integrations.sheets import SHEET_CLIENTS
from ...models import Client, ClientCreate
from ..exceptions import ReferentialConflictError
from .base import SheetRepository, store_operation

logger = logging.getLogger(__name__)


class ClientRepository(SheetRepository):
    """Repository for client operations."""

    sheet_name = SHEET_CLIENTS
    id_prefix = "CLIENT"
    id_width = 3

    @staticmethod
    def _from_row(row: List[str]) -> Optional[Client]:
        if not row[0] or not row[1]:
            logger.warning(f"Skipping incomplete or malformed client row: {row}")
            return None
        return Client(id=row[0], name=row[1], address=row[2])

    @store_operation("retrieve client data")
    async def list(self) -> List[Client]:
        clients = []
        for row in await self._rows():
            client = self._from_row(row)
            if client:
                clients.append(client)
        return clients

    @store_operation("create client")
    async def create(self, data: ClientCreate) -> Client:
        client_id = await self.next_id()
        await self.sheets.append_row(
            self.sheet_name, [client_id, data.name, data.address or ""]
        )

        logger.info(f"Created client {client_id} ({data.name})")
        return Client(id=client_id, name=data.name, address=data.address or "")

    @store_operation("update client")
    async def update(self, client: Client) -> Client:
        row_number = await self.find_row_number(client.id)
        await self.sheets.update_row(
            self.sheet_name, row_number, [client.id, client.name, client.address]
        )

        logger.info(f"Updated client {client.id}")
        return client

    @store_operation("delete client")
    async def delete(self, client_id: str) -> None:
        """
        Delete a client that no project references.

        Raises:
            ReferentialConflictError: if any project belongs to the client
            EntityNotFoundError: if the client does not exist
        """
        for row in await self._project_rows():
            if row[3] == client_id:
                raise ReferentialConflictError(
                    "Cannot delete client. The client is associated with one or more projects."
                )

        await self._delete_with_dependents(client_id, {})

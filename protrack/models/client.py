"""Client data model."""

from .base import CamelModel


class ClientCreate(CamelModel):
    name: str
    address: str = ""


class Client(ClientCreate):
    """A customer that projects are delivered for."""
    id: str

"""Item schemas."""

from pydantic import BaseModel, ConfigDict


class Item(BaseModel):
    """A stored item. Frozen so snapshots handed out by the store stay stable."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str


class CreateItemRequest(BaseModel):
    # Empty strings are accepted; only presence is validated.
    name: str
    description: str

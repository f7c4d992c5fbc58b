"""Item endpoints backed by the in-memory store."""

from fastapi import APIRouter, status

from devserver.api.dependencies import ItemStoreDep
from devserver.models.item import CreateItemRequest, Item

router = APIRouter()


@router.api_route("/items", methods=["GET", "HEAD"])
async def list_items(store: ItemStoreDep) -> list[Item]:
    return store.list()


@router.post("/items", status_code=status.HTTP_201_CREATED)
async def create_item(payload: CreateItemRequest, store: ItemStoreDep) -> Item:
    return store.create(payload.name, payload.description)

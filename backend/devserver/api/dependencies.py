"""API dependencies: shared settings and the item store.

Both are created once in ``create_app`` and kept on ``app.state``.
"""

from typing import Annotated

from fastapi import Depends, Request

from devserver.config import Settings
from devserver.core.item_store import ItemStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_item_store(request: Request) -> ItemStore:
    return request.app.state.item_store


SettingsDep = Annotated[Settings, Depends(get_settings)]
ItemStoreDep = Annotated[ItemStore, Depends(get_item_store)]

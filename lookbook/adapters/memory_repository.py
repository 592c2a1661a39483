"""In-memory implementation of the item repository protocol.

Data lives in a dictionary and is lost when the instance goes away. Used by
tests and local demos in place of the managed platform.
"""

from dataclasses import replace
from datetime import UTC, datetime
from itertools import count
from typing import Any
from uuid import uuid4

from lookbook.ports.repositories import Item, ItemStatus

_EPOCH = datetime.min.replace(tzinfo=UTC)


class MemoryRepository:
    """In-memory ItemRepository.

    Supports the async context manager protocol so it can stand in wherever
    a connected repository is expected.

    Example:
        async with MemoryRepository() as repo:
            item = await repo.add_item("vendor-1", "https://cdn/x.jpg")
            rack = await repo.list_items("vendor-1")
    """

    def __init__(self) -> None:
        self._connected: bool = False
        self._items: dict[str, Item] = {}
        # Order of the latest add or archive; breaks ties between equal timestamps
        self._sequence: dict[str, int] = {}
        self._counter = count()

    async def __aenter__(self) -> "MemoryRepository":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.close()

    async def connect(self) -> None:
        self._connected = True

    async def close(self) -> None:
        self._connected = False

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise RuntimeError("Repository not connected. Call connect() first.")

    def _require(self, item_id: str) -> Item:
        item = self._items.get(item_id)
        if item is None:
            raise KeyError(f"Item not found: {item_id}")
        return item

    async def add_item(self, vendor_id: str, image_url: str) -> Item:
        self._ensure_connected()
        now = datetime.now(UTC)
        item = Item(
            id=str(uuid4()),
            vendor_id=vendor_id,
            image_url=image_url,
            status=ItemStatus.IN_STOCK,
            created_at=now,
            updated_at=now,
        )
        self._items[item.id] = item
        self._sequence[item.id] = next(self._counter)
        return replace(item)

    async def get_item(self, item_id: str) -> Item | None:
        self._ensure_connected()
        item = self._items.get(item_id)
        return replace(item) if item else None

    async def list_items(
        self, vendor_id: str, status: ItemStatus = ItemStatus.IN_STOCK
    ) -> list[Item]:
        self._ensure_connected()
        matching = [
            item
            for item in self._items.values()
            if item.vendor_id == vendor_id and item.status == status
        ]
        if status is ItemStatus.ARCHIVED:
            matching.sort(
                key=lambda i: (i.archived_at or _EPOCH, self._sequence[i.id]),
                reverse=True,
            )
        else:
            matching.sort(
                key=lambda i: (i.created_at or _EPOCH, self._sequence[i.id]),
                reverse=True,
            )
        return [replace(item) for item in matching]

    async def update_item(
        self,
        item_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        size: str | None = None,
        price: float | None = None,
    ) -> Item:
        self._ensure_connected()
        item = self._require(item_id)
        changes: dict[str, Any] = {
            key: value
            for key, value in (
                ("name", name),
                ("description", description),
                ("size", size),
                ("price", price),
            )
            if value is not None
        }
        updated = replace(item, **changes, updated_at=datetime.now(UTC))
        self._items[item_id] = updated
        return replace(updated)

    async def archive_item(self, item_id: str) -> Item:
        self._ensure_connected()
        item = self._require(item_id)
        now = datetime.now(UTC)
        archived = replace(
            item, status=ItemStatus.ARCHIVED, archived_at=now, updated_at=now
        )
        self._items[item_id] = archived
        self._sequence[item_id] = next(self._counter)
        return replace(archived)

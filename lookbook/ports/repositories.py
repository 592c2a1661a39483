"""Repository protocols for rack items.

Storage itself lives on an external managed platform; this module only fixes
the shape of the data and the operations lookbook relies on, so adapters can
be swapped (the in-memory adapter is used for tests and local demos).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

# =============================================================================
# Data Classes
# =============================================================================


class ItemStatus(str, Enum):
    """Lifecycle of an item on the rack."""

    IN_STOCK = "in_stock"
    ARCHIVED = "archived"


@dataclass
class Item:
    """A photographed, cataloged item.

    Attributes:
        id: Stable identifier; the rack uses it as the card key.
        vendor_id: Owner of the item.
        image_url: Public URL of the item photo.
        name: Display name, possibly AI-suggested.
        description: Free-form description.
        size: Clothing size or None.
        price: Asking price or None.
        status: IN_STOCK items appear on the rack, ARCHIVED ones in the archive.
        quantity_available: Units on hand.
        collection_id: Optional grouping.
        created_at: When the item was added.
        updated_at: Last modification time.
        archived_at: When the item was archived, if it was.
    """

    id: str
    vendor_id: str
    image_url: str
    name: str | None = None
    description: str | None = None
    size: str | None = None
    price: float | None = None
    status: ItemStatus = ItemStatus.IN_STOCK
    quantity_available: int = 1
    collection_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    archived_at: datetime | None = None


# =============================================================================
# Repository Protocols
# =============================================================================


class ItemRepository(Protocol):
    """Async protocol for item persistence."""

    async def add_item(self, vendor_id: str, image_url: str) -> Item:
        """Create an in-stock item from an uploaded photo.

        Args:
            vendor_id: Owner of the new item.
            image_url: Public URL of the uploaded photo.

        Returns:
            The created item with id and timestamps set.
        """
        ...

    async def get_item(self, item_id: str) -> Item | None:
        """Fetch one item, or None if it does not exist."""
        ...

    async def list_items(
        self, vendor_id: str, status: ItemStatus = ItemStatus.IN_STOCK
    ) -> list[Item]:
        """List a vendor's items with the given status.

        In-stock items come newest first (by created_at); archived items come
        most recently archived first.
        """
        ...

    async def update_item(
        self,
        item_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        size: str | None = None,
        price: float | None = None,
    ) -> Item:
        """Update display fields; None leaves a field unchanged.

        Raises:
            KeyError: If the item does not exist.
        """
        ...

    async def archive_item(self, item_id: str) -> Item:
        """Move an item off the rack into the archive.

        Raises:
            KeyError: If the item does not exist.
        """
        ...

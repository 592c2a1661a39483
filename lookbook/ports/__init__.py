"""Ports (interfaces) for the application.

Protocol definitions for the boundaries between lookbook and the external
platform that stores items.
"""

from lookbook.ports.repositories import Item, ItemRepository, ItemStatus

__all__ = [
    "Item",
    "ItemRepository",
    "ItemStatus",
]

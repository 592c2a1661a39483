"""Adapters implementing the ports in lookbook.ports."""

from lookbook.adapters.memory_repository import MemoryRepository

__all__ = ["MemoryRepository"]

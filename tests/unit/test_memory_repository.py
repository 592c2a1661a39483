"""Tests for the in-memory item repository."""

import pytest

from lookbook.adapters.memory_repository import MemoryRepository
from lookbook.core.rack_session import RackSession
from lookbook.ports.repositories import ItemStatus


class TestConnection:
    @pytest.mark.asyncio
    async def test_requires_connect(self) -> None:
        repo = MemoryRepository()
        with pytest.raises(RuntimeError, match="not connected"):
            await repo.list_items("vendor-1")

    @pytest.mark.asyncio
    async def test_context_manager_closes(self) -> None:
        async with MemoryRepository() as repo:
            await repo.add_item("vendor-1", "https://cdn.example/a.jpg")
        with pytest.raises(RuntimeError):
            await repo.get_item("anything")


class TestItems:
    @pytest.mark.asyncio
    async def test_add_item_defaults(self, memory_repo: MemoryRepository) -> None:
        item = await memory_repo.add_item("vendor-1", "https://cdn.example/a.jpg")
        assert item.id
        assert item.status is ItemStatus.IN_STOCK
        assert item.quantity_available == 1
        assert item.name is None
        assert item.created_at is not None
        assert item.created_at == item.updated_at

    @pytest.mark.asyncio
    async def test_get_item(self, memory_repo: MemoryRepository) -> None:
        item = await memory_repo.add_item("vendor-1", "https://cdn.example/a.jpg")
        assert await memory_repo.get_item(item.id) == item
        assert await memory_repo.get_item("missing") is None

    @pytest.mark.asyncio
    async def test_returned_items_are_copies(self, memory_repo: MemoryRepository) -> None:
        item = await memory_repo.add_item("vendor-1", "https://cdn.example/a.jpg")
        item.name = "changed locally"
        stored = await memory_repo.get_item(item.id)
        assert stored is not None
        assert stored.name is None

    @pytest.mark.asyncio
    async def test_rack_lists_newest_first(self, memory_repo: MemoryRepository) -> None:
        first = await memory_repo.add_item("vendor-1", "https://cdn.example/1.jpg")
        second = await memory_repo.add_item("vendor-1", "https://cdn.example/2.jpg")
        await memory_repo.add_item("vendor-2", "https://cdn.example/other.jpg")

        rack = await memory_repo.list_items("vendor-1")
        assert [item.id for item in rack] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_update_item(self, memory_repo: MemoryRepository) -> None:
        item = await memory_repo.add_item("vendor-1", "https://cdn.example/a.jpg")
        updated = await memory_repo.update_item(
            item.id, name="Faded Indigo Straight Leg", size="32x30", price=40.0
        )
        assert updated.name == "Faded Indigo Straight Leg"
        assert updated.size == "32x30"
        assert updated.price == 40.0
        assert updated.description is None
        assert updated.updated_at is not None and item.updated_at is not None
        assert updated.updated_at >= item.updated_at

    @pytest.mark.asyncio
    async def test_update_missing_item(self, memory_repo: MemoryRepository) -> None:
        with pytest.raises(KeyError):
            await memory_repo.update_item("missing", name="x")

    @pytest.mark.asyncio
    async def test_archive_moves_item_off_the_rack(
        self, memory_repo: MemoryRepository
    ) -> None:
        keep = await memory_repo.add_item("vendor-1", "https://cdn.example/keep.jpg")
        sold = await memory_repo.add_item("vendor-1", "https://cdn.example/sold.jpg")

        archived = await memory_repo.archive_item(sold.id)
        assert archived.status is ItemStatus.ARCHIVED
        assert archived.archived_at is not None

        rack = await memory_repo.list_items("vendor-1")
        archive = await memory_repo.list_items("vendor-1", ItemStatus.ARCHIVED)
        assert [item.id for item in rack] == [keep.id]
        assert [item.id for item in archive] == [sold.id]

    @pytest.mark.asyncio
    async def test_archive_lists_most_recent_first(
        self, memory_repo: MemoryRepository
    ) -> None:
        a = await memory_repo.add_item("vendor-1", "https://cdn.example/a.jpg")
        b = await memory_repo.add_item("vendor-1", "https://cdn.example/b.jpg")
        await memory_repo.archive_item(b.id)
        await memory_repo.archive_item(a.id)
        archive = await memory_repo.list_items("vendor-1", ItemStatus.ARCHIVED)
        assert [item.id for item in archive] == [a.id, b.id]


class TestRackFromRepository:
    @pytest.mark.asyncio
    async def test_session_shows_in_stock_items(
        self, memory_repo: MemoryRepository, renderer
    ) -> None:
        for n in range(3):
            await memory_repo.add_item("vendor-1", f"https://cdn.example/{n}.jpg")
        archived = await memory_repo.add_item("vendor-1", "https://cdn.example/gone.jpg")
        await memory_repo.archive_item(archived.id)

        session = RackSession(lambda: memory_repo.list_items("vendor-1"), renderer)
        assert await session.refresh() == 3
        session.render_frame()
        assert len(renderer.cards) == 3
        assert all(item.status is ItemStatus.IN_STOCK for _, item, _ in renderer.cards)

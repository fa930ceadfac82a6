"""Tests for NotebookStore and its page operations."""

import pytest

from tonish.data.notebooks import NotebookStore


class TestNotebooks:

    @pytest.mark.asyncio
    async def test_create_and_get_with_pages(self, notebook_store: NotebookStore) -> None:
        notebook = await notebook_store.create({"name": "Ideas", "user_id": 4})
        await notebook_store.create_page({"notebook_id": notebook.id, "title": "First"})
        await notebook_store.create_page({"notebook_id": notebook.id, "title": "Second"})

        fetched = await notebook_store.get(notebook.id)

        assert fetched is not None
        assert fetched.name == "Ideas"
        assert fetched.user_id == 4
        assert [p.title for p in fetched.pages] == ["First", "Second"]

    @pytest.mark.asyncio
    async def test_list_all_attaches_pages(self, notebook_store: NotebookStore) -> None:
        a = await notebook_store.create({"name": "A"})
        b = await notebook_store.create({"name": "B"})
        await notebook_store.create_page({"notebook_id": b.id, "title": "only in B"})

        notebooks = await notebook_store.list_all()

        assert [n.id for n in notebooks] == [a.id, b.id]
        assert notebooks[0].pages == []
        assert [p.title for p in notebooks[1].pages] == ["only in B"]

    @pytest.mark.asyncio
    async def test_update_partial(self, notebook_store: NotebookStore) -> None:
        notebook = await notebook_store.create({"name": "Old", "tags": "x"})
        updated = await notebook_store.update(notebook.id, {"is_pinned": True})

        assert updated is not None
        assert updated.name == "Old"
        assert updated.tags == "x"
        assert updated.is_pinned is True

    @pytest.mark.asyncio
    async def test_delete_removes_pages(self, notebook_store: NotebookStore) -> None:
        notebook = await notebook_store.create({"name": "Temp"})
        page = await notebook_store.create_page({"notebook_id": notebook.id, "title": "p"})

        deleted = await notebook_store.delete(notebook.id)

        assert deleted is not None and len(deleted.pages) == 1
        assert await notebook_store.get(notebook.id) is None
        assert await notebook_store.get_page(page.id) is None

    @pytest.mark.asyncio
    async def test_missing_notebook(self, notebook_store: NotebookStore) -> None:
        assert await notebook_store.get(9) is None
        assert await notebook_store.update(9, {"name": "x"}) is None
        assert await notebook_store.delete(9) is None


class TestPages:

    @pytest.mark.asyncio
    async def test_update_and_delete_page(self, notebook_store: NotebookStore) -> None:
        notebook = await notebook_store.create({"name": "N"})
        page = await notebook_store.create_page(
            {"notebook_id": notebook.id, "title": "Draft", "content": "hello"}
        )

        updated = await notebook_store.update_page(page.id, {"title": "Final"})
        assert updated is not None
        assert updated.title == "Final"
        assert updated.content == "hello"

        assert await notebook_store.delete_page(page.id) is not None
        assert await notebook_store.delete_page(page.id) is None

    @pytest.mark.asyncio
    async def test_search_matches_title_or_content(self, notebook_store: NotebookStore) -> None:
        notebook = await notebook_store.create({"name": "N"})
        by_title = await notebook_store.create_page(
            {"notebook_id": notebook.id, "title": "Python tips"}
        )
        by_content = await notebook_store.create_page(
            {"notebook_id": notebook.id, "title": "Misc", "content": "learn python"}
        )
        await notebook_store.create_page({"notebook_id": notebook.id, "title": "Cooking"})

        found = await notebook_store.search_pages("python")

        assert {p.id for p in found} == {by_title.id, by_content.id}
        assert len(await notebook_store.search_pages("")) == 3

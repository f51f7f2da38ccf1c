"""
Tests for the generic TableService.
"""

import pytest

from backend.services.resource_service import TableService


@pytest.fixture
def table():
    return TableService("events", select="id,title", order=(("start_time", False), ("created_at", True)))


class TestTableService:
    @pytest.mark.asyncio
    async def test_list_page_uses_exact_count_and_range(self, table, supabase_client, pg_result):
        select = supabase_client.table.return_value.select
        ordered = select.return_value.order.return_value.order.return_value
        ordered.range.return_value.execute.return_value = pg_result([{"id": "e1"}], count=42)

        rows, total = await table.list_page(supabase_client, page=3, limit=10)

        assert rows == [{"id": "e1"}]
        assert total == 42
        select.assert_called_once_with("id,title", count="exact")
        ordered.range.assert_called_once_with(20, 29)

    @pytest.mark.asyncio
    async def test_list_applies_filter_hook(self, table, supabase_client, pg_result):
        seen = []

        def apply(query):
            seen.append(query)
            return query

        query = supabase_client.table.return_value.select.return_value
        query.order.return_value.order.return_value.execute.return_value = pg_result([])

        assert await table.list(supabase_client, apply_filters=apply) == []
        assert seen == [query]

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, table, supabase_client, pg_result):
        query = supabase_client.table.return_value.select.return_value
        query.eq.return_value.limit.return_value.execute.return_value = pg_result([])

        assert await table.get(supabase_client, "nope") is None

    @pytest.mark.asyncio
    async def test_create_stamps_timestamps(self, table, supabase_client, pg_result):
        insert = supabase_client.table.return_value.insert
        insert.return_value.execute.return_value = pg_result([{"id": "e1"}])

        created = await table.create(supabase_client, {"title": "Culto"})

        payload = insert.call_args.args[0]
        assert created == {"id": "e1"}
        assert payload["created_at"] == payload["updated_at"]

    @pytest.mark.asyncio
    async def test_create_without_representation_raises(self, table, supabase_client, pg_result):
        supabase_client.table.return_value.insert.return_value.execute.return_value = pg_result([])

        with pytest.raises(Exception, match="no data returned"):
            await table.create(supabase_client, {"title": "Culto"})

    @pytest.mark.asyncio
    async def test_update_missing_row_returns_none(self, table, supabase_client, pg_result):
        update = supabase_client.table.return_value.update
        update.return_value.eq.return_value.execute.return_value = pg_result([])

        assert await table.update(supabase_client, "nope", {"title": "x"}) is None
        assert "updated_at" in update.call_args.args[0]

    @pytest.mark.asyncio
    async def test_delete_reports_whether_a_row_was_removed(self, table, supabase_client, pg_result):
        delete = supabase_client.table.return_value.delete
        delete.return_value.eq.return_value.execute.return_value = pg_result([{"id": "e1"}])

        assert await table.delete(supabase_client, "e1") is True

"""
Tests for rehearsal attendance.

A batch is all-or-nothing: any invalid record means no write at all.
"""

from unittest.mock import MagicMock, patch

import pytest

from backend.services.attendance_service import set_attendance


@pytest.fixture
def mock_supabase(supabase_client):
    with patch("backend.routes.attendance.get_supabase_client") as mock:
        mock.return_value = supabase_client
        yield supabase_client


def _upsert(supabase_client) -> MagicMock:
    return supabase_client.table.return_value.upsert


class TestRecordAttendance:
    def test_valid_batch_is_upserted_once(self, client, as_admin, mock_supabase, pg_result):
        _upsert(mock_supabase).return_value.execute.return_value = pg_result([
            {
                "id": "att-1",
                "rehearsal_id": "reh-1",
                "user_id": "u1",
                "status": "PRESENT",
                "note": None,
                "marked_at": "2025-03-06T22:00:00Z",
                "updated_at": "2025-03-06T22:00:00Z",
            },
            {
                "id": "att-2",
                "rehearsal_id": "reh-1",
                "user_id": "u2",
                "status": "JUSTIFIED",
                "note": "Viagem",
                "marked_at": "2025-03-06T22:00:00Z",
                "updated_at": "2025-03-06T22:00:00Z",
            },
        ])

        response = client.post(
            "/attendance",
            json={
                "rehearsalId": "reh-1",
                "records": [
                    {"userId": "u1", "status": "PRESENT"},
                    {"userId": "u2", "status": "JUSTIFIED", "note": "  Viagem "},
                ],
            },
        )

        assert response.status_code == 200
        records = response.json()["records"]
        assert [r["userId"] for r in records] == ["u1", "u2"]
        assert records[1]["note"] == "Viagem"

        upsert = _upsert(mock_supabase)
        upsert.assert_called_once()
        rows = upsert.call_args.args[0]
        assert upsert.call_args.kwargs["on_conflict"] == "rehearsal_id,user_id"
        assert rows[0]["rehearsal_id"] == "reh-1"
        assert rows[1]["note"] == "Viagem"

    def test_justified_without_note_rejects_whole_batch(self, client, as_admin, mock_supabase):
        response = client.post(
            "/attendance",
            json={
                "rehearsalId": "reh-1",
                "records": [
                    {"userId": "u1", "status": "PRESENT"},
                    {"userId": "u2", "status": "JUSTIFIED", "note": "   "},
                ],
            },
        )

        assert response.status_code == 400
        _upsert(mock_supabase).assert_not_called()

    def test_unknown_status_rejects_batch(self, client, as_admin, mock_supabase):
        response = client.post(
            "/attendance",
            json={"rehearsalId": "reh-1", "records": [{"userId": "u1", "status": "LATE"}]},
        )

        assert response.status_code == 400
        _upsert(mock_supabase).assert_not_called()

    def test_duplicate_member_rejects_batch(self, client, as_admin, mock_supabase):
        response = client.post(
            "/attendance",
            json={
                "rehearsalId": "reh-1",
                "records": [
                    {"userId": "u1", "status": "PRESENT"},
                    {"userId": "u1", "status": "ABSENT"},
                ],
            },
        )

        assert response.status_code == 400
        _upsert(mock_supabase).assert_not_called()

    def test_member_cannot_record(self, client, as_member):
        response = client.post(
            "/attendance",
            json={"rehearsalId": "reh-1", "records": [{"userId": "u1", "status": "PRESENT"}]},
        )
        assert response.status_code == 403


class TestListAttendance:
    def test_embeds_user(self, client, as_admin, mock_supabase, pg_result):
        query = mock_supabase.table.return_value.select.return_value
        query.eq.return_value.order.return_value.execute.return_value = pg_result([
            {
                "id": "att-1",
                "rehearsal_id": "reh-1",
                "user_id": "u1",
                "status": "ABSENT",
                "note": None,
                "marked_at": "2025-03-06T22:00:00Z",
                "updated_at": "2025-03-06T22:00:00Z",
                "user": {"id": "u1", "name": "João", "email": "joao@example.org", "role": "MEMBER"},
            }
        ])

        response = client.get("/attendance?rehearsalId=reh-1")

        assert response.status_code == 200
        record = response.json()["records"][0]
        assert record["user"] == {"id": "u1", "name": "João", "email": "joao@example.org", "role": "MEMBER"}
        query.eq.assert_called_once_with("rehearsal_id", "reh-1")

    def test_member_cannot_read(self, client, as_member):
        response = client.get("/attendance?rehearsalId=reh-1")
        assert response.status_code == 403

    def test_missing_rehearsal_id_returns_400(self, client, as_admin):
        response = client.get("/attendance")
        assert response.status_code == 400


class TestSetAttendanceService:
    @pytest.mark.asyncio
    async def test_service_rejects_justified_without_note(self, supabase_client):
        with pytest.raises(ValueError):
            await set_attendance(
                supabase_client,
                "reh-1",
                [{"user_id": "u1", "status": "JUSTIFIED", "note": None}],
            )
        supabase_client.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_batch_writes_nothing(self, supabase_client):
        assert await set_attendance(supabase_client, "reh-1", []) == []
        supabase_client.table.assert_not_called()

"""Tests for the attendance row store endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from layer_attendance.crud.attendance_log import AttendanceLogStore
from layer_attendance.schemas.attendance import ShiftRecord

PREFIX = "/api/v1/attendance"


def _row(**kw):
    base = {"date": "2024-01-01", "branch": "HQ", "name": "Alice", "scheduled_in": "09:00"}
    base.update(kw)
    return base


# ── Append ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_append_single_row_derives_fields(async_client: AsyncClient):
    resp = await async_client.post(PREFIX, json=_row(actual_in="09:15", actual_out="18:00"))
    assert resp.status_code == 201
    data = resp.json()
    assert data["row_id"] >= 1
    assert data["late_minutes"] == "15"
    assert data["total_minutes"] == "525"
    assert data["overtime_minutes"] == ""
    assert data["memo"] == ""


@pytest.mark.asyncio
async def test_append_batch(async_client: AsyncClient):
    rows = [_row(name="Alice"), _row(name="Bob"), _row(name="Carol", memo="rental 3pm")]
    resp = await async_client.post(PREFIX, json=rows)
    assert resp.status_code == 201
    assert resp.json() == {"success": True, "added": 3, "message": "3 rows added"}

    listed = (await async_client.get(PREFIX)).json()
    assert [r["name"] for r in listed] == ["Alice", "Bob", "Carol"]
    assert listed[2]["memo"] == "rental 3pm"


@pytest.mark.asyncio
async def test_append_empty_batch(async_client: AsyncClient):
    resp = await async_client.post(PREFIX, json=[])
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "added": 0, "message": "No data to add"}
    assert (await async_client.get(PREFIX)).json() == []


@pytest.mark.asyncio
async def test_append_rejects_bad_date(async_client: AsyncClient):
    resp = await async_client.post(PREFIX, json=_row(date="2024/01/01"))
    assert resp.status_code == 422
    resp = await async_client.post(PREFIX, json=_row(date="2024-02-30"))
    assert resp.status_code == 422


# ── List ────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_list_orders_newest_date_first(async_client: AsyncClient):
    await async_client.post(
        PREFIX,
        json=[
            _row(date="2024-01-01", name="Alice"),
            _row(date="2024-01-03", name="Bob"),
            _row(date="2024-01-03", name="Carol"),
            _row(date="2024-01-02", name="Dana"),
        ],
    )
    listed = (await async_client.get(PREFIX)).json()
    assert [(r["date"], r["name"]) for r in listed] == [
        ("2024-01-03", "Bob"),
        ("2024-01-03", "Carol"),
        ("2024-01-02", "Dana"),
        ("2024-01-01", "Alice"),
    ]


@pytest.mark.asyncio
async def test_list_filters(async_client: AsyncClient):
    await async_client.post(
        PREFIX,
        json=[
            _row(date="2024-01-01", name="Alice"),
            _row(date="2024-01-02", name="Alicia"),
            _row(date="2024-01-02", name="Bob"),
        ],
    )
    by_date = (await async_client.get(PREFIX, params={"date": "2024-01-02"})).json()
    assert {r["name"] for r in by_date} == {"Alicia", "Bob"}

    by_name = (await async_client.get(PREFIX, params={"name": "ali"})).json()
    assert {r["name"] for r in by_name} == {"Alice", "Alicia"}

    wildcard = (await async_client.get(PREFIX, params={"name": "%"})).json()
    assert wildcard == []


@pytest.mark.asyncio
async def test_list_rejects_bad_date_filter(async_client: AsyncClient):
    resp = await async_client.get(PREFIX, params={"date": "yesterday"})
    assert resp.status_code == 422


# ── Get / update / delete ───────────────────────────────────────────
@pytest.mark.asyncio
async def test_get_row(async_client: AsyncClient):
    created = (await async_client.post(PREFIX, json=_row())).json()
    resp = await async_client.get(f"{PREFIX}/{created['row_id']}")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Alice"


@pytest.mark.asyncio
async def test_get_missing_row(async_client: AsyncClient):
    resp = await async_client.get(f"{PREFIX}/999")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Row 999 not found", "success": False}


@pytest.mark.asyncio
async def test_update_time_field_rederives(async_client: AsyncClient):
    created = (await async_client.post(PREFIX, json=_row(actual_in="09:05"))).json()
    assert created["late_minutes"] == "5"

    resp = await async_client.put(f"{PREFIX}/{created['row_id']}", json={"actual_in": "09:30"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["actual_in"] == "09:30"
    assert data["late_minutes"] == "30"
    assert data["name"] == "Alice"

    resp = await async_client.put(f"{PREFIX}/{created['row_id']}", json={"actual_in": ""})
    assert resp.json()["late_minutes"] == ""


@pytest.mark.asyncio
async def test_update_keeps_explicit_derived_value(async_client: AsyncClient):
    created = (await async_client.post(PREFIX, json=_row(actual_in="09:05"))).json()
    resp = await async_client.put(
        f"{PREFIX}/{created['row_id']}",
        json={"late_minutes": "0", "memo": "excused"},
    )
    data = resp.json()
    assert data["late_minutes"] == "0"
    assert data["memo"] == "excused"


@pytest.mark.asyncio
async def test_update_missing_row(async_client: AsyncClient):
    resp = await async_client.put(f"{PREFIX}/999", json={"memo": "x"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_row(async_client: AsyncClient):
    created = (await async_client.post(PREFIX, json=_row())).json()
    row_id = created["row_id"]

    resp = await async_client.delete(f"{PREFIX}/{row_id}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": f"Row {row_id} deleted successfully"}

    assert (await async_client.get(f"{PREFIX}/{row_id}")).status_code == 404
    assert (await async_client.delete(f"{PREFIX}/{row_id}")).status_code == 404


# ── Memo tags ───────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_memo_tag_update(async_client: AsyncClient):
    created = (await async_client.post(PREFIX, json=_row(memo="note / 대관 15~17"))).json()
    url = f"{PREFIX}/{created['row_id']}/memo"

    resp = await async_client.put(url, json={"kind": "rental", "value": "18~20"})
    assert resp.status_code == 200
    assert resp.json()["memo"] == "note / 대관: 18~20"

    resp = await async_client.put(url, json={"kind": "part", "value": " 오픈 "})
    assert resp.json()["memo"] == "note / 대관: 18~20 / 파트: 오픈"

    resp = await async_client.put(url, json={"kind": "rental", "value": ""})
    assert resp.json()["memo"] == "note / 파트: 오픈"


@pytest.mark.asyncio
async def test_memo_tag_bad_kind(async_client: AsyncClient):
    created = (await async_client.post(PREFIX, json=_row())).json()
    resp = await async_client.put(f"{PREFIX}/{created['row_id']}/memo", json={"kind": "shift", "value": "x"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_memo_tag_missing_row(async_client: AsyncClient):
    resp = await async_client.put(f"{PREFIX}/999/memo", json={"kind": "part", "value": "x"})
    assert resp.status_code == 404


# ── Store directly ──────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_store_append_many_is_one_batch(db_session):
    store = AttendanceLogStore(db_session)
    rows = await store.append_many(
        [
            ShiftRecord(date="2024-01-01", name="Alice", scheduled_in="9", actual_in="9:20"),
            ShiftRecord(date="2024-01-01", name="Bob", actual_in="9", actual_out="17"),
        ]
    )
    assert [r.late_minutes for r in rows] == ["20", ""]
    assert [r.total_minutes for r in rows] == ["", "480"]
    assert len(await store.list_all()) == 2


@pytest.mark.asyncio
async def test_store_update_and_delete_missing(db_session):
    store = AttendanceLogStore(db_session)
    assert await store.update(42, {"memo": "x"}) is None
    assert await store.delete(42) is False


# ── Failed writes ───────────────────────────────────────────────────
async def _failing_commit(*_args, **_kwargs):
    raise SQLAlchemyError("disk I/O error")


@pytest.mark.asyncio
async def test_store_failed_append_many_leaves_nothing(db_session, monkeypatch):
    store = AttendanceLogStore(db_session)
    monkeypatch.setattr(db_session, "commit", _failing_commit)

    with pytest.raises(SQLAlchemyError):
        await store.append_many(
            [
                ShiftRecord(date="2024-01-01", name="Alice"),
                ShiftRecord(date="2024-01-01", name="Bob"),
            ]
        )

    assert await store.list_all() == []


@pytest.mark.asyncio
async def test_store_failed_update_keeps_old_values(db_session, monkeypatch):
    store = AttendanceLogStore(db_session)
    row = await store.append_one(
        ShiftRecord(date="2024-01-01", name="Alice", scheduled_in="9", actual_in="9:05")
    )
    row_id = row.row_id
    monkeypatch.setattr(db_session, "commit", _failing_commit)

    with pytest.raises(SQLAlchemyError):
        await store.update(row_id, {"actual_in": "9:45", "memo": "late bus"})

    stored = await store.get(row_id)
    assert (stored.actual_in, stored.late_minutes, stored.memo) == ("9:05", "5", "")


@pytest.mark.asyncio
async def test_failed_batch_append_returns_500(async_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(AsyncSession, "commit", _failing_commit)

    resp = await async_client.post(PREFIX, json=[_row(name="Alice"), _row(name="Bob")])
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal database error", "success": False}

    assert (await async_client.get(PREFIX)).json() == []


# ── Field widths ────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_append_rejects_oversized_fields(async_client: AsyncClient):
    assert (await async_client.post(PREFIX, json=_row(name="x" * 101))).status_code == 422
    assert (await async_client.post(PREFIX, json=_row(actual_in="9" * 21))).status_code == 422
    assert (await async_client.post(PREFIX, json=_row(memo="m" * 501))).status_code == 422
    assert (await async_client.post(PREFIX, json=_row(memo="m" * 500))).status_code == 201


@pytest.mark.asyncio
async def test_update_rejects_oversized_fields(async_client: AsyncClient):
    created = (await async_client.post(PREFIX, json=_row())).json()
    url = f"{PREFIX}/{created['row_id']}"

    assert (await async_client.put(url, json={"branch": "b" * 101})).status_code == 422
    assert (await async_client.put(url, json={"late_minutes": "1" * 11})).status_code == 422
    assert (await async_client.get(url)).json()["branch"] == "HQ"


@pytest.mark.asyncio
async def test_memo_tag_rejects_overflowing_memo(async_client: AsyncClient):
    created = (await async_client.post(PREFIX, json=_row(memo="m" * 495))).json()
    url = f"{PREFIX}/{created['row_id']}/memo"

    resp = await async_client.put(url, json={"kind": "rental", "value": "15~17"})
    assert resp.status_code == 422
    assert resp.json()["success"] is False
    assert (await async_client.get(f"{PREFIX}/{created['row_id']}")).json()["memo"] == "m" * 495

import pytest
from sqlalchemy import select

from app.config import NOTE_MAX_LENGTH
from app.models import ConsentEntry


@pytest.mark.anyio("asyncio")
async def test_set_entries_upserts_and_returns_own_ledger(client, make_pair, headers_for, catalog):
    alice, _, relationship = make_pair()
    headers = headers_for(alice)
    url = f"/relationships/{relationship.id}/boundaries"

    response = await client.put(
        url,
        json={
            "entries": [
                {"boundary_id": catalog["Hugs"], "accepted": True, "note": "short ones"},
                {"boundary_id": catalog["Compliments"], "accepted": False},
            ]
        },
        headers=headers,
    )
    assert response.status_code == 200
    entries = {item["boundary_id"]: item for item in response.json()["entries"]}
    assert entries[catalog["Hugs"]]["accepted"] is True
    assert entries[catalog["Hugs"]]["note"] == "short ones"
    assert entries[catalog["Compliments"]]["accepted"] is False

    # Omitting the note keeps the stored one.
    response = await client.put(
        url,
        json={"entries": [{"boundary_id": catalog["Hugs"], "accepted": False}]},
        headers=headers,
    )
    entries = {item["boundary_id"]: item for item in response.json()["entries"]}
    assert entries[catalog["Hugs"]]["accepted"] is False
    assert entries[catalog["Hugs"]]["note"] == "short ones"
    assert len(entries) == 2


@pytest.mark.anyio("asyncio")
async def test_unknown_boundaries_are_skipped(client, db_session, make_pair, headers_for, catalog):
    alice, _, relationship = make_pair()

    response = await client.put(
        f"/relationships/{relationship.id}/boundaries",
        json={
            "entries": [
                {"boundary_id": 999999, "accepted": True},
                {"boundary_id": catalog["Hugs"], "accepted": True},
            ]
        },
        headers=headers_for(alice),
    )
    assert response.status_code == 200
    assert [item["boundary_id"] for item in response.json()["entries"]] == [catalog["Hugs"]]
    assert db_session.scalars(select(ConsentEntry.boundary_id)).all() == [catalog["Hugs"]]


@pytest.mark.anyio("asyncio")
async def test_ledger_read_is_scoped_to_caller(client, db_session, make_pair, headers_for, catalog):
    alice, bob, relationship = make_pair()
    db_session.add(
        ConsentEntry(
            party_id=bob.id,
            relationship_id=relationship.id,
            boundary_id=catalog["Hugs"],
            accepted=True,
            note="bob only",
        )
    )
    db_session.commit()

    response = await client.get(f"/relationships/{relationship.id}/boundaries", headers=headers_for(alice))
    assert response.status_code == 200
    assert response.json()["entries"] == []


@pytest.mark.anyio("asyncio")
async def test_non_member_cannot_touch_ledger(client, make_pair, make_user, headers_for, catalog):
    _, _, relationship = make_pair()
    mallory = make_user("Mallory")
    headers = headers_for(mallory)

    read = await client.get(f"/relationships/{relationship.id}/boundaries", headers=headers)
    write = await client.put(
        f"/relationships/{relationship.id}/boundaries",
        json={"entries": [{"boundary_id": catalog["Hugs"], "accepted": True}]},
        headers=headers,
    )
    note = await client.put(
        f"/relationships/{relationship.id}/boundaries/{catalog['Hugs']}/note",
        json={"note": "hello"},
        headers=headers,
    )
    assert read.status_code == 403
    assert write.status_code == 403
    assert note.status_code == 403
    assert read.json()["error"]["code"] == "RELATIONSHIP_FORBIDDEN"


@pytest.mark.anyio("asyncio")
async def test_note_without_entry_creates_unaccepted_row(client, make_pair, headers_for, catalog):
    alice, _, relationship = make_pair()
    url = f"/relationships/{relationship.id}/boundaries/{catalog['Hand-holding']}/note"

    response = await client.put(url, json={"note": "  only in public  "}, headers=headers_for(alice))
    assert response.status_code == 200
    body = response.json()
    assert body["accepted"] is False
    assert body["note"] == "only in public"


@pytest.mark.anyio("asyncio")
async def test_clear_note_deletes_note_only_row(client, db_session, make_pair, headers_for, catalog):
    alice, _, relationship = make_pair()
    headers = headers_for(alice)
    base = f"/relationships/{relationship.id}/boundaries"

    await client.put(f"{base}/{catalog['Hand-holding']}/note", json={"note": "ask first"}, headers=headers)
    await client.put(
        base,
        json={"entries": [{"boundary_id": catalog["Hugs"], "accepted": True, "note": "brief"}]},
        headers=headers,
    )

    first = await client.delete(f"{base}/{catalog['Hand-holding']}/note", headers=headers)
    second = await client.delete(f"{base}/{catalog['Hugs']}/note", headers=headers)
    missing = await client.delete(f"{base}/{catalog['Compliments']}/note", headers=headers)
    assert (first.status_code, second.status_code, missing.status_code) == (204, 204, 204)

    db_session.expire_all()
    rows = db_session.scalars(select(ConsentEntry).where(ConsentEntry.party_id == alice.id)).all()
    assert [(row.boundary_id, row.accepted, row.note) for row in rows] == [(catalog["Hugs"], True, None)]


@pytest.mark.anyio("asyncio")
async def test_note_validation(client, make_pair, headers_for, catalog):
    alice, _, relationship = make_pair()
    headers = headers_for(alice)
    url = f"/relationships/{relationship.id}/boundaries/{catalog['Hugs']}/note"

    empty = await client.put(url, json={"note": "   "}, headers=headers)
    assert empty.status_code == 422
    assert empty.json()["error"]["code"] == "NOTE_EMPTY"

    too_long = await client.put(url, json={"note": "x" * (NOTE_MAX_LENGTH + 1)}, headers=headers)
    assert too_long.status_code == 422
    assert too_long.json()["error"]["code"] == "NOTE_TOO_LONG"

    unknown = await client.put(
        f"/relationships/{relationship.id}/boundaries/999999/note", json={"note": "hi"}, headers=headers
    )
    assert unknown.status_code == 404
    assert unknown.json()["error"]["code"] == "BOUNDARY_NOT_FOUND"


@pytest.mark.anyio("asyncio")
async def test_membership_is_checked_before_note_content(client, make_pair, make_user, headers_for, catalog):
    _, _, relationship = make_pair()
    mallory = make_user("Mallory")

    response = await client.put(
        f"/relationships/{relationship.id}/boundaries/{catalog['Hugs']}/note",
        json={"note": "   "},
        headers=headers_for(mallory),
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "RELATIONSHIP_FORBIDDEN"

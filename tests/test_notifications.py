import logging

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.models import ConsentEntry, Notification, NotificationKind
from app.schemas.consent import ConsentEntryUpdate
from app.services import consent as consent_service
from app.services import notifications as notification_service


def _set(db_session, party, relationship, boundary_id, accepted):
    consent_service.set_many(
        db_session,
        relationship.id,
        party,
        [ConsentEntryUpdate(boundary_id=boundary_id, accepted=accepted)],
    )


def _boundary_notifications(db_session):
    return db_session.scalars(
        select(Notification)
        .where(Notification.kind.in_([NotificationKind.NEW_COMMON_LIMIT, NotificationKind.LIMIT_REMOVED]))
        .order_by(Notification.id)
    ).all()


@pytest.mark.parametrize(
    ("previous", "current", "other_accepted", "expected"),
    [
        (False, True, True, NotificationKind.NEW_COMMON_LIMIT),
        (True, False, True, NotificationKind.LIMIT_REMOVED),
        (False, True, False, None),
        (True, True, True, None),
        (False, False, True, None),
    ],
)
def test_classify_flip(previous, current, other_accepted, expected):
    assert notification_service.classify_flip(previous, current, other_accepted) is expected


def test_boundary_flips_notify_the_right_parties(db_session, make_pair, catalog):
    alice, bob, relationship = make_pair()
    hugs = catalog["Hugs"]

    _set(db_session, alice, relationship, hugs, True)
    assert _boundary_notifications(db_session) == []

    _set(db_session, bob, relationship, hugs, True)
    created = _boundary_notifications(db_session)
    assert sorted(n.recipient_id for n in created) == sorted([alice.id, bob.id])
    assert all(n.kind is NotificationKind.NEW_COMMON_LIMIT for n in created)
    to_alice = next(n for n in created if n.recipient_id == alice.id)
    assert to_alice.message == 'You and Bob both accept "Hugs".'
    assert to_alice.related_relationship_id == relationship.id

    # Unchanged value: no new notification.
    _set(db_session, bob, relationship, hugs, True)
    assert len(_boundary_notifications(db_session)) == 2

    _set(db_session, alice, relationship, hugs, False)
    removed = _boundary_notifications(db_session)[2:]
    assert [(n.recipient_id, n.kind) for n in removed] == [(bob.id, NotificationKind.LIMIT_REMOVED)]
    assert removed[0].message == '"Hugs" is no longer shared with Alice.'


def test_notification_failure_keeps_ledger_write(db_session, make_pair, catalog, monkeypatch, caplog):
    alice, bob, relationship = make_pair()
    hugs = catalog["Hugs"]
    _set(db_session, alice, relationship, hugs, True)

    def _broken_persist(db, notification):
        raise OperationalError("INSERT INTO notifications", {}, Exception("database is locked"))

    monkeypatch.setattr(notification_service, "_persist", _broken_persist)

    with caplog.at_level(logging.ERROR, logger="app.services.notifications"):
        _set(db_session, bob, relationship, hugs, True)

    entry = db_session.scalars(
        select(ConsentEntry).where(ConsentEntry.party_id == bob.id, ConsentEntry.boundary_id == hugs)
    ).one()
    assert entry.accepted is True
    assert _boundary_notifications(db_session) == []
    assert any(record.getMessage() == "Notification not persisted" for record in caplog.records)


@pytest.mark.anyio("asyncio")
async def test_list_and_mark_read(client, db_session, make_pair, headers_for):
    alice, bob, _ = make_pair()
    headers = headers_for(alice)

    listing = await client.get("/notifications", headers=headers)
    assert listing.status_code == 200
    body = listing.json()
    assert body["count"] == 1
    assert body["unread"] == 1
    notification_id = body["notifications"][0]["id"]
    assert body["notifications"][0]["kind"] == "invitation_accepted"

    foreign = await client.put(f"/notifications/{notification_id}/read", headers=headers_for(bob))
    assert foreign.status_code == 403
    assert foreign.json()["error"]["code"] == "NOTIFICATION_FORBIDDEN"

    marked = await client.put(f"/notifications/{notification_id}/read", headers=headers)
    assert marked.status_code == 200
    assert marked.json()["is_read"] is True

    unread = await client.get("/notifications", params={"unread_only": "true"}, headers=headers)
    assert unread.json()["notifications"] == []
    assert unread.json()["unread"] == 0

    missing = await client.put("/notifications/999999/read", headers=headers)
    assert missing.status_code == 404


@pytest.mark.anyio("asyncio")
async def test_mark_all_read_only_touches_own(client, db_session, make_pair, headers_for, catalog):
    alice, bob, relationship = make_pair()
    _set(db_session, alice, relationship, catalog["Hugs"], True)
    _set(db_session, bob, relationship, catalog["Hugs"], True)

    response = await client.put("/notifications/read-all", headers=headers_for(alice))
    assert response.status_code == 200
    assert response.json()["updated"] == 2

    db_session.expire_all()
    bob_unread = notification_service.count_unread(db_session, bob.id)
    assert bob_unread == 1

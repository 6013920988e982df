import pytest
from sqlalchemy import select

from app.models import AuthSession, Block, ConsentEntry, Notification, NotificationKind, Relationship, User
from app.schemas.consent import ConsentEntryUpdate
from app.services import consent as consent_service
from app.services import relationships as relationship_service


@pytest.mark.anyio("asyncio")
async def test_delete_account_dissolves_and_notifies(client, db_session, make_pair, headers_for, catalog):
    alice, bob, relationship = make_pair()
    consent_service.set_many(
        db_session, relationship.id, alice, [ConsentEntryUpdate(boundary_id=catalog["Hugs"], accepted=True)]
    )
    alice_id = alice.id

    response = await client.delete("/profile", headers=headers_for(alice))
    assert response.status_code == 204

    db_session.expire_all()
    assert db_session.get(User, alice_id) is None
    assert db_session.get(Relationship, relationship.id) is None
    assert db_session.scalars(select(ConsentEntry)).all() == []
    assert db_session.scalars(select(AuthSession).where(AuthSession.user_id == alice_id)).all() == []

    notice = db_session.scalars(
        select(Notification).where(
            Notification.recipient_id == bob.id,
            Notification.kind == NotificationKind.RELATIONSHIP_DELETED,
        )
    ).one()
    assert notice.related_party_id is None
    assert notice.message == "Alice ended your relationship."


@pytest.mark.anyio("asyncio")
async def test_delete_account_clears_blocks(client, db_session, make_pair, headers_for):
    alice, bob, relationship = make_pair()
    relationship_service.block(db_session, relationship.id, bob)

    response = await client.delete("/profile", headers=headers_for(bob))
    assert response.status_code == 204
    assert db_session.scalars(select(Block)).all() == []


@pytest.mark.anyio("asyncio")
async def test_export_contains_only_own_data(client, db_session, make_pair, headers_for, catalog):
    alice, bob, relationship = make_pair()
    consent_service.set_many(
        db_session,
        relationship.id,
        alice,
        [ConsentEntryUpdate(boundary_id=catalog["Hugs"], accepted=True, note="alice note")],
    )
    consent_service.set_many(
        db_session,
        relationship.id,
        bob,
        [ConsentEntryUpdate(boundary_id=catalog["Hugs"], accepted=True, note="bob note")],
    )

    response = await client.get("/profile/export", headers=headers_for(alice))
    assert response.status_code == 200
    body = response.json()
    assert body["profile"]["id"] == alice.id
    assert [entry["note"] for entry in body["consent_entries"]] == ["alice note"]
    assert body["relationships"][0]["partner_id"] == bob.id
    assert body["relationships"][0]["role"] == "initiator"
    assert "bob note" not in response.text
    kinds = {item["kind"] for item in body["notifications"]}
    assert kinds == {"invitation_accepted", "new_common_limit"}


@pytest.mark.anyio("asyncio")
async def test_delete_account_skips_notice_for_declined_invitations(client, db_session, make_user, headers_for):
    alice = make_user("Alice")
    bob = make_user("Bob")
    relationship = relationship_service.invite(db_session, alice)
    relationship_service.decline(db_session, relationship.invitation_token, bob)

    response = await client.delete("/profile", headers=headers_for(alice))
    assert response.status_code == 204
    assert db_session.scalars(select(Notification).where(Notification.recipient_id == bob.id)).all() == []

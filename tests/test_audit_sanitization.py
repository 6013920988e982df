from app.models.audit import AuditLog
from app.utils.audit import actor_for_party, log_audit


def test_audit_log_masks_sensitive_fields(db_session):
    payload = {
        "note": "something private",
        "invitation_token": "abcdefghijklmnop",
        "email": "sensitive@example.com",
        "nested": [{"token": "short"}],
        "boundary_id": 7,
    }

    log_audit(
        db_session,
        actor=actor_for_party(3),
        action="MASK_TEST",
        entity="ConsentEntry",
        entity_id=1,
        data=payload,
    )
    db_session.commit()

    entry = (
        db_session.query(AuditLog)
        .filter(AuditLog.action == "MASK_TEST")
        .order_by(AuditLog.id.desc())
        .first()
    )
    assert entry is not None
    assert entry.actor == "party:3"
    assert entry.data_json["note"] == "***"
    assert entry.data_json["invitation_token"] == "abcd***"
    assert entry.data_json["email"] == "***@example.com"
    assert entry.data_json["nested"][0]["token"] == "***"
    assert entry.data_json["boundary_id"] == 7


def test_relationship_lifecycle_is_audited(db_session, make_pair):
    _, bob, relationship = make_pair()

    actions = [
        row.action
        for row in db_session.query(AuditLog)
        .filter(AuditLog.entity == "Relationship", AuditLog.entity_id == relationship.id)
        .order_by(AuditLog.id)
    ]
    assert actions == ["INVITATION_CREATED", "INVITATION_ACCEPTED"]
    assert (
        db_session.query(AuditLog).filter(AuditLog.action == "INVITATION_ACCEPTED").one().actor
        == f"party:{bob.id}"
    )

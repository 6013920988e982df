"""ORM models package."""
from .audit import AuditLog
from .auth_session import AuthSession
from .base import Base
from .catalog import Boundary, BoundaryCategory, BoundarySubcategory
from .consent import ConsentEntry
from .notification import Notification, NotificationKind
from .relationship import Block, Relationship, RelationshipStatus
from .user import User

__all__ = [
    "AuditLog",
    "AuthSession",
    "Base",
    "Block",
    "Boundary",
    "BoundaryCategory",
    "BoundarySubcategory",
    "ConsentEntry",
    "Notification",
    "NotificationKind",
    "Relationship",
    "RelationshipStatus",
    "User",
]

"""Schema package exports."""
from .catalog import BoundaryCategoryRead, BoundaryRead, BoundarySubcategoryRead
from .consent import ConsentEntriesUpdate, ConsentEntryRead, ConsentEntryUpdate, LedgerRead, NoteUpdate
from .matches import CommonBoundariesRead, CommonBoundaryRead
from .notification import NotificationList, NotificationRead, ReadAllResult
from .profile import AccountExport, ProfileRead
from .relationship import (
    BlockRead,
    InvitationCreated,
    InvitationDecision,
    InvitationRead,
    RelationshipRead,
)

__all__ = [
    "AccountExport",
    "BlockRead",
    "BoundaryCategoryRead",
    "BoundaryRead",
    "BoundarySubcategoryRead",
    "CommonBoundariesRead",
    "CommonBoundaryRead",
    "ConsentEntriesUpdate",
    "ConsentEntryRead",
    "ConsentEntryUpdate",
    "InvitationCreated",
    "InvitationDecision",
    "InvitationRead",
    "LedgerRead",
    "NoteUpdate",
    "NotificationList",
    "NotificationRead",
    "ProfileRead",
    "ReadAllResult",
    "RelationshipRead",
]

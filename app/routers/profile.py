"""Profile endpoints backing the account deletion hook and data export."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.user import User
from app.schemas.profile import AccountExport
from app.security import require_party
from app.services import accounts as account_service

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/export", response_model=AccountExport)
def export_profile(db: Session = Depends(get_db), party: User = Depends(require_party)) -> AccountExport:
    """Download everything stored about the caller."""

    return account_service.export_account(db, party)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_profile(db: Session = Depends(get_db), party: User = Depends(require_party)) -> Response:
    """Delete the caller's account and dissolve all their relationships."""

    account_service.delete_account(db, party)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

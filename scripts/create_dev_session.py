"""Create a local user and print a bearer token for manual API calls."""
from sqlalchemy import select

from app.db import get_sessionmaker, init_engine
from app.models.user import User
from app.services.sessions import issue_session


def main() -> None:
    init_engine()
    SessionLocal = get_sessionmaker()
    db = SessionLocal()

    email = "dev@noslimites.local"

    try:
        user = db.scalars(select(User).where(User.email == email)).first()
        if user is None:
            user = User(email=email, display_name="Dev")
            db.add(user)
            db.commit()
            db.refresh(user)

        raw_token = issue_session(db, user)

        print("==========================================")
        print("Session created")
        print("Use this token in your Authorization header:")
        print(f"    Authorization: Bearer {raw_token}")
        print(f"(user id: {user.id}, email: {user.email})")
        print("==========================================")
    finally:
        db.close()


if __name__ == "__main__":
    main()

"""Test configuration."""
import os
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path
from uuid import uuid4

from alembic import command
from alembic.config import Config
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine, event, select
from sqlalchemy.orm import Session, sessionmaker

# --- Default environment for the test run
os.environ.setdefault("DATABASE_URL", "sqlite:///./noslimites_test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("NL_ENV", "test")

from app.main import app  # noqa: E402
from app.db import get_db  # noqa: E402
from app.models import Boundary, Relationship, User  # noqa: E402
from app.services import relationships as relationship_service  # noqa: E402
from app.services.catalog import seed_catalog  # noqa: E402
from app.services.sessions import issue_session  # noqa: E402

DB_PATH = Path("./noslimites_test.db")

TEST_CATALOG = [
    {
        "name": "Friendly contact",
        "description": "Warm, friendly interactions",
        "icon": "F",
        "subcategories": [
            {"name": "Physical", "boundaries": ["Hugs", "Hand-holding"]},
        ],
    },
    {
        "name": "Conversation",
        "description": None,
        "icon": "C",
        "subcategories": [
            {"name": "Verbal", "boundaries": ["Compliments", "Personal messages"]},
        ],
    },
]


def _run_migrations() -> None:
    cfg = Config(str(Path(__file__).resolve().parents[1] / "alembic.ini"))
    cfg.set_main_option("script_location", str(Path(__file__).resolve().parents[1] / "alembic"))
    cfg.set_main_option("sqlalchemy.url", os.environ["DATABASE_URL"])
    command.upgrade(cfg, "head")


# --- (1) Fresh database file for the session
if DB_PATH.exists():
    DB_PATH.unlink()

engine = create_engine(
    os.environ["DATABASE_URL"],
    connect_args={"check_same_thread": False},
    future=True,
)


# pysqlite needs these hooks for SAVEPOINT to behave.
@event.listens_for(engine, "connect")
def _sqlite_autocommit_driver(dbapi_connection, connection_record) -> None:
    dbapi_connection.isolation_level = None


@event.listens_for(engine, "begin")
def _sqlite_explicit_begin(conn) -> None:
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True,
    expire_on_commit=False,
    join_transaction_mode="create_savepoint",
)

# --- (2) Schema comes from Alembic only
_run_migrations()


@pytest.fixture
def db_session() -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture(autouse=True)
def override_db_dependency(db_session: Session) -> Iterator[None]:
    def _get_db() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    def _factory(display_name: str = "Alice") -> User:
        user = User(
            email=f"{display_name.lower()}-{uuid4().hex[:8]}@example.com",
            display_name=display_name,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _factory


@pytest.fixture
def headers_for(db_session: Session) -> Callable[[User], dict[str, str]]:
    """Return an Authorization header for a fresh session of ``user``."""

    def _factory(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {issue_session(db_session, user)}"}

    return _factory


@pytest.fixture
def catalog(db_session: Session) -> dict[str, int]:
    """Seed a small catalog and return boundary ids keyed by name."""

    seed_catalog(db_session, TEST_CATALOG)
    rows = db_session.execute(select(Boundary.name, Boundary.id)).all()
    return {name: boundary_id for name, boundary_id in rows}


@pytest.fixture
def make_pair(db_session: Session, make_user: Callable[..., User]) -> Callable[..., tuple[User, User, Relationship]]:
    """Factory creating two users joined by an accepted relationship."""

    def _factory(initiator_name: str = "Alice", responder_name: str = "Bob") -> tuple[User, User, Relationship]:
        initiator = make_user(initiator_name)
        responder = make_user(responder_name)
        relationship = relationship_service.invite(db_session, initiator)
        relationship = relationship_service.accept(db_session, relationship.invitation_token, responder)
        return initiator, responder, relationship

    return _factory

from __future__ import annotations

import sys
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from pos_reporting.core.config import Settings
from pos_reporting.db.session import get_engine
from pos_reporting.main import create_application
from pos_reporting.models import Base, PosOrder

JWT_SECRET = "test-signing-secret"


def make_token(
    *,
    subject: str = "cashier@example.com",
    name: str | None = "Front Cashier",
    expires_in: timedelta = timedelta(minutes=5),
    secret: str = JWT_SECRET,
) -> str:
    now = datetime.now(UTC)
    payload: dict[str, object] = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    if name is not None:
        payload["name"] = name
    return jwt.encode(payload, secret, algorithm="HS256")


def add_order(
    session: Session,
    *,
    order_id: int,
    placed_at: datetime | None,
    total: str | None = "100.00",
    tax: str | None = "8.00",
    state: str = "paid",
    name: str | None = None,
) -> PosOrder:
    order = PosOrder(
        id=order_id,
        name=name if name is not None else f"Shop/{order_id:04d}",
        date_order=placed_at,
        amount_total=Decimal(total) if total is not None else None,
        amount_tax=Decimal(tax) if tax is not None else None,
        state=state,
    )
    session.add(order)
    return order


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret=JWT_SECRET,
        auth_enabled=True,
        enable_metrics=True,
        enable_tracing=False,
    )


@pytest.fixture()
def db_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(db_engine: Engine) -> Iterator[Session]:
    session = Session(bind=db_engine)
    yield session
    session.close()


@pytest.fixture()
def sample_orders(db_session: Session) -> list[PosOrder]:
    orders = [
        add_order(db_session, order_id=3, placed_at=datetime(2024, 3, 2, 18, 45, 0, 999000), total="45.5", tax="3.64"),
        add_order(db_session, order_id=1, placed_at=datetime(2024, 3, 1, 9, 15, 30, 250000), state="done"),
        add_order(db_session, order_id=2, placed_at=datetime(2024, 3, 1, 12, 0), total="19.99", tax="1.6", state="invoiced"),
        add_order(db_session, order_id=4, placed_at=datetime(2024, 3, 1, 13, 0), state="draft"),
        add_order(db_session, order_id=5, placed_at=datetime(2024, 3, 4, 8, 0)),
        add_order(db_session, order_id=6, placed_at=datetime(2024, 2, 29, 23, 59, 59)),
    ]
    db_session.commit()
    return orders


@pytest.fixture()
def client(settings: Settings, db_engine: Engine) -> Iterator[TestClient]:
    application = create_application(settings)
    application.dependency_overrides[get_engine] = lambda: db_engine

    with TestClient(application) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}"}

"""
Pytest configuration and fixtures for settlewise tests.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from decimal import Decimal
from typing import Dict, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from settlewise.db.database import Base, get_db
from settlewise.main import app
from settlewise.utils.settlement import compute_net_balances


def make_participants(*ids: str) -> List[Dict]:
    return [{"id": participant_id, "name": f"Name {participant_id}"} for participant_id in ids]


@pytest.fixture
def three_participants():
    """Participants A, B and C."""
    return make_participants("A", "B", "C")


@pytest.fixture
def sample_transactions():
    """Pairwise debts among A, B, C and D."""
    return [
        {"id": "t1", "from": "B", "to": "A", "amount": Decimal("40")},
        {"id": "t2", "from": "C", "to": "A", "amount": Decimal("25")},
        {"id": "t3", "from": "C", "to": "B", "amount": Decimal("15")},
        {"id": "t4", "from": "D", "to": "C", "amount": Decimal("10")},
        {"id": "t5", "from": "A", "to": "D", "amount": Decimal("5")},
    ]


@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """API client using the in-memory database."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def verify_settlement_reproduces_balances(
    participants: List[Dict],
    balances: Dict[str, Decimal],
    settlements: List[Dict]
) -> None:
    """
    Helper to verify a settlement reproduces the original net balances.

    Applying the settlement transactions to an all-zero starting point must
    give every creditor their exact surplus and every debtor their exact deficit.
    """
    settled = compute_net_balances(participants, settlements)
    for participant_id, balance in balances.items():
        assert settled[participant_id] == balance, \
            f"Participant {participant_id} not settled: expected={balance}, " \
            f"got={settled[participant_id]}"

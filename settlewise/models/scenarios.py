import enum
import uuid
from sqlalchemy.sql import func
from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, Boolean, DECIMAL, Integer
from sqlalchemy.orm import relationship
from settlewise.db.database import Base


class TransactionKind(str, enum.Enum):
    original = "original"
    settlement = "settlement"


class Scenario(Base):
    __tablename__ = "scenarios"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), unique=True, nullable=False)
    seed = Column(Integer, nullable=True)  # Set for generated scenarios only
    is_solved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    participants = relationship(
        "ScenarioParticipant",
        order_by="ScenarioParticipant.position",
        cascade="all, delete-orphan",
    )
    transactions = relationship(
        "ScenarioTransaction",
        order_by="ScenarioTransaction.position",
        cascade="all, delete-orphan",
    )


class ScenarioParticipant(Base):
    __tablename__ = "scenario_participants"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), unique=True, nullable=False)
    scenario_id = Column(String, ForeignKey("scenarios.id", ondelete="CASCADE"), nullable=False, index=True)
    participant_id = Column(String(100), nullable=False)
    name = Column(String(100), nullable=False)
    position = Column(Integer, nullable=False)  # Heap payloads index participants by this order


class ScenarioTransaction(Base):
    __tablename__ = "scenario_transactions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), unique=True, nullable=False)
    scenario_id = Column(String, ForeignKey("scenarios.id", ondelete="CASCADE"), nullable=False, index=True)
    transaction_id = Column(String(200), nullable=False)
    from_participant_id = Column(String(100), nullable=False)
    to_participant_id = Column(String(100), nullable=False)
    amount = Column(DECIMAL(10, 2), nullable=False)
    kind = Column(Enum(TransactionKind), nullable=False, default=TransactionKind.original, index=True)
    position = Column(Integer, nullable=False)

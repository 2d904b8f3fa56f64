from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from settlewise.schemas.settlement_schema import ParticipantBalance, TransactionOut, SettlementSummary


class ScenarioGenerate(BaseModel):
    seed: Optional[int] = None
    num_participants: Optional[int] = Field(None, ge=2, le=50)


class ScenarioOut(BaseModel):
    id: str
    seed: Optional[int] = None
    is_solved: bool
    created_at: datetime
    participants: List[ParticipantBalance]
    original_transactions: List[TransactionOut]
    settlement_transactions: List[TransactionOut] = []
    summary: Optional[SettlementSummary] = None

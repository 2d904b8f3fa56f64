from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from typing import List
from decimal import Decimal


class ParticipantBase(BaseModel):
    id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)


class ParticipantIn(ParticipantBase):
    pass


class ParticipantBalance(ParticipantBase):
    balance: Decimal
    status: str


class TransactionBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, max_length=200)
    from_id: str = Field(..., alias="from")
    to_id: str = Field(..., alias="to")
    amount: Decimal = Field(..., gt=0)


class TransactionIn(TransactionBase):
    amount: Decimal = Field(..., gt=0, decimal_places=2)

    @model_validator(mode="after")
    def check_distinct_ends(self):
        if self.from_id == self.to_id:
            raise ValueError("Transaction source and destination must differ")
        return self


class TransactionOut(TransactionBase):
    pass


class SettlementInput(BaseModel):
    participants: List[ParticipantIn]
    transactions: List[TransactionIn] = []

    @field_validator("participants")
    @classmethod
    def check_unique_ids(cls, participants: List[ParticipantIn]) -> List[ParticipantIn]:
        ids = [participant.id for participant in participants]
        if len(ids) != len(set(ids)):
            raise ValueError("Participant ids must be unique")
        return participants


class SettlementSummary(BaseModel):
    original_count: int
    optimized_count: int
    reduction_percent: int


class SettlementResult(BaseModel):
    participants: List[ParticipantBalance]
    original_transactions: List[TransactionOut]
    settlement_transactions: List[TransactionOut]
    summary: SettlementSummary


class DetailedSettlementResult(SettlementResult):
    logs: List[str]

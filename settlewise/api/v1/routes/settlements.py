from fastapi import APIRouter
from typing import List
from settlewise.services.settlement_service import calculate_participant_balances, settle
from settlewise.schemas.settlement_schema import (
    SettlementInput, ParticipantBalance, SettlementResult, DetailedSettlementResult
)

router = APIRouter(prefix="/settlements", tags=["settlements"])


@router.post("/balances", response_model=List[ParticipantBalance])
def get_net_balances(data: SettlementInput):
    """Net balance of every participant"""
    return calculate_participant_balances(data)


@router.post("/solve", response_model=SettlementResult)
def solve(data: SettlementInput):
    """Reduce the given debts to a smaller settlement"""
    return settle(data)


@router.post("/solve/detailed", response_model=DetailedSettlementResult)
def solve_detailed(data: SettlementInput):
    """Solve and include the step-by-step matching log"""
    return settle(data, detailed=True)

import logging
from decimal import Decimal
from fastapi import HTTPException
from typing import Dict, List, Tuple
from settlewise.schemas.settlement_schema import (
    SettlementInput, ParticipantBalance, TransactionOut, SettlementSummary,
    SettlementResult, DetailedSettlementResult
)
from settlewise.utils.exceptions import SettlementError
from settlewise.utils.settlement import (
    compute_net_balances, solve_settlement, solve_settlement_detailed,
    summarize_settlement, participant_status
)

logger = logging.getLogger(__name__)


def to_core_input(data: SettlementInput) -> Tuple[List[Dict], List[Dict]]:
    """Convert request models to the plain dicts the settlement module works on"""
    participants = [participant.model_dump() for participant in data.participants]
    transactions = [transaction.model_dump(by_alias=True) for transaction in data.transactions]
    return participants, transactions


def build_participant_balances(participants: List[Dict], balances: Dict[str, Decimal]) -> List[ParticipantBalance]:
    return [
        ParticipantBalance(
            id=participant["id"],
            name=participant["name"],
            balance=balances[participant["id"]],
            status=participant_status(balances[participant["id"]])
        )
        for participant in participants
    ]


def build_transactions(transactions: List[Dict]) -> List[TransactionOut]:
    return [TransactionOut.model_validate(transaction) for transaction in transactions]


def calculate_participant_balances(data: SettlementInput) -> List[ParticipantBalance]:
    """Net balance and status of every participant"""
    participants, transactions = to_core_input(data)
    try:
        balances = compute_net_balances(participants, transactions)
    except SettlementError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return build_participant_balances(participants, balances)


def settle(data: SettlementInput, detailed: bool = False) -> SettlementResult:
    """
    Compute net balances and a reduced settlement for the given debts.

    Args:
        data: Participants and their pairwise transactions
        detailed: Also return the solver's step-by-step logs

    Returns:
        SettlementResult (or DetailedSettlementResult when detailed=True)

    Raises:
        HTTPException(400): If the input references unknown participants,
            holds invalid amounts, or cannot balance
    """
    participants, transactions = to_core_input(data)

    try:
        balances = compute_net_balances(participants, transactions)
        if detailed:
            settlements, logs = solve_settlement_detailed(participants, balances)
        else:
            settlements = solve_settlement(participants, balances)
    except SettlementError as e:
        logger.warning(f"Rejected settlement input: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    result = dict(
        participants=build_participant_balances(participants, balances),
        original_transactions=build_transactions(transactions),
        settlement_transactions=build_transactions(settlements),
        summary=SettlementSummary(**summarize_settlement(transactions, settlements))
    )

    if detailed:
        return DetailedSettlementResult(**result, logs=logs)
    return SettlementResult(**result)

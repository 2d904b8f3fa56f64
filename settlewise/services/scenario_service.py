import logging
import random
from datetime import datetime
from fastapi import HTTPException
from sqlalchemy.orm import Session
from typing import Dict, List, Optional, Tuple
from settlewise.models.scenarios import Scenario, ScenarioParticipant, ScenarioTransaction, TransactionKind
from settlewise.schemas.scenario_schema import ScenarioGenerate, ScenarioOut
from settlewise.schemas.settlement_schema import SettlementInput, SettlementSummary
from settlewise.services.settlement_service import (
    to_core_input, build_participant_balances, build_transactions
)
from settlewise.utils.exceptions import SettlementError
from settlewise.utils.scenario_generator import generate_scenario
from settlewise.utils.settlement import compute_net_balances, solve_settlement, summarize_settlement

logger = logging.getLogger(__name__)


def _store_transactions(scenario: Scenario, transactions: List[Dict], kind: TransactionKind):
    for position, transaction in enumerate(transactions):
        scenario.transactions.append(ScenarioTransaction(
            transaction_id=transaction["id"],
            from_participant_id=transaction["from"],
            to_participant_id=transaction["to"],
            amount=transaction["amount"],
            kind=kind,
            position=position
        ))


def _create_scenario(db: Session, participants: List[Dict], transactions: List[Dict], seed: Optional[int] = None) -> Scenario:
    scenario = Scenario(seed=seed, is_solved=False)
    for position, participant in enumerate(participants):
        scenario.participants.append(ScenarioParticipant(
            participant_id=participant["id"],
            name=participant["name"],
            position=position
        ))
    _store_transactions(scenario, transactions, TransactionKind.original)

    db.add(scenario)
    db.commit()
    db.refresh(scenario)
    logger.info(f"Created scenario {scenario.id} with {len(participants)} participants "
                f"and {len(transactions)} transactions")
    return scenario


def create_random_scenario(db: Session, params: ScenarioGenerate) -> Scenario:
    """Generate and store a random scenario"""
    seed = params.seed if params.seed is not None else random.randrange(2 ** 31)
    participants, transactions = generate_scenario(random.Random(seed), params.num_participants)
    return _create_scenario(db, participants, transactions, seed=seed)


def create_custom_scenario(db: Session, data: SettlementInput) -> Scenario:
    """Store a user-supplied scenario after checking it aggregates cleanly"""
    participants, transactions = to_core_input(data)
    try:
        compute_net_balances(participants, transactions)
    except SettlementError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _create_scenario(db, participants, transactions)


def get_scenario(db: Session, scenario_id: str) -> Optional[Scenario]:
    """Get a scenario by ID"""
    return db.query(Scenario).filter(Scenario.id == scenario_id).first()


def get_scenario_or_404(db: Session, scenario_id: str) -> Scenario:
    scenario = get_scenario(db, scenario_id)
    if not scenario:
        raise HTTPException(status_code=404, detail="Scenario not found")
    return scenario


def scenario_data(scenario: Scenario) -> Tuple[List[Dict], List[Dict], List[Dict]]:
    """Participants, original transactions and settlement transactions as plain dicts"""
    participants = [
        {"id": participant.participant_id, "name": participant.name}
        for participant in scenario.participants
    ]
    original, settlements = [], []
    for transaction in scenario.transactions:
        entry = {
            "id": transaction.transaction_id,
            "from": transaction.from_participant_id,
            "to": transaction.to_participant_id,
            "amount": transaction.amount
        }
        if transaction.kind == TransactionKind.settlement:
            settlements.append(entry)
        else:
            original.append(entry)
    return participants, original, settlements


def build_scenario_view(scenario: Scenario) -> ScenarioOut:
    """Scenario with balances recomputed from its original transactions"""
    participants, original, settlements = scenario_data(scenario)
    balances = compute_net_balances(participants, original)

    summary = None
    if scenario.is_solved:
        summary = SettlementSummary(**summarize_settlement(original, settlements))

    return ScenarioOut(
        id=scenario.id,
        seed=scenario.seed,
        is_solved=scenario.is_solved,
        created_at=scenario.created_at,
        participants=build_participant_balances(participants, balances),
        original_transactions=build_transactions(original),
        settlement_transactions=build_transactions(settlements),
        summary=summary
    )


def solve_scenario(db: Session, scenario_id: str) -> Scenario:
    """Solve a stored scenario and keep its settlement transactions"""
    scenario = get_scenario_or_404(db, scenario_id)
    if scenario.is_solved:
        raise HTTPException(status_code=409, detail="Scenario is already solved")

    participants, original, _ = scenario_data(scenario)
    try:
        balances = compute_net_balances(participants, original)
        settlements = solve_settlement(participants, balances)
    except SettlementError as e:
        logger.error(f"Scenario {scenario_id} cannot be settled: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    _store_transactions(scenario, settlements, TransactionKind.settlement)
    scenario.is_solved = True
    db.commit()
    db.refresh(scenario)
    logger.info(f"Solved scenario {scenario_id}: {len(original)} transactions reduced to {len(settlements)}")
    return scenario


def delete_scenario(db: Session, scenario_id: str):
    """Clear a scenario with all its participants and transactions"""
    scenario = get_scenario_or_404(db, scenario_id)
    db.delete(scenario)
    db.commit()
    logger.info(f"Cleared scenario {scenario_id}")


def delete_expired_scenarios(db: Session, cutoff_time: datetime) -> int:
    """Delete scenarios created before cutoff_time, returning how many were removed"""
    expired = db.query(Scenario).filter(Scenario.created_at < cutoff_time).all()
    for scenario in expired:
        db.delete(scenario)
    if expired:
        db.commit()
    return len(expired)

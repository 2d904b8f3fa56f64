from fastapi import APIRouter, Depends, Response
from typing import Optional
from sqlalchemy.orm import Session
from settlewise.db.database import get_db
from settlewise.services.scenario_service import (
    create_random_scenario, create_custom_scenario, get_scenario_or_404,
    solve_scenario, delete_scenario, build_scenario_view
)
from settlewise.schemas.scenario_schema import ScenarioGenerate, ScenarioOut
from settlewise.schemas.settlement_schema import SettlementInput

router = APIRouter(prefix="/scenarios", tags=["scenarios"])


@router.post("/", response_model=ScenarioOut, status_code=201)
def generate_new_scenario(
    params: Optional[ScenarioGenerate] = None,
    db: Session = Depends(get_db)
):
    """Generate a random scenario"""
    return build_scenario_view(create_random_scenario(db, params or ScenarioGenerate()))


@router.post("/custom", response_model=ScenarioOut, status_code=201)
def create_new_custom_scenario(
    data: SettlementInput,
    db: Session = Depends(get_db)
):
    """Store a scenario from user-supplied participants and transactions"""
    return build_scenario_view(create_custom_scenario(db, data))


@router.get("/{scenario_id}", response_model=ScenarioOut)
def get_scenario_details(
    scenario_id: str,
    db: Session = Depends(get_db)
):
    """Get a scenario with its current balances"""
    return build_scenario_view(get_scenario_or_404(db, scenario_id))


@router.post("/{scenario_id}/solve", response_model=ScenarioOut)
def solve_existing_scenario(
    scenario_id: str,
    db: Session = Depends(get_db)
):
    """Solve a scenario and keep the settlement transactions"""
    return build_scenario_view(solve_scenario(db, scenario_id))


@router.delete("/{scenario_id}", status_code=204)
def clear_scenario(
    scenario_id: str,
    db: Session = Depends(get_db)
):
    """Clear a scenario"""
    delete_scenario(db, scenario_id)
    return Response(status_code=204)

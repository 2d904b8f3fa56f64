"""
Tests for the scenario service and the scenario cleanup manager.
"""

import pytest
from datetime import datetime
from decimal import Decimal
from fastapi import HTTPException

from settlewise.models.scenarios import Scenario
from settlewise.schemas.scenario_schema import ScenarioGenerate
from settlewise.schemas.settlement_schema import SettlementInput
from settlewise.services.scenario_cleanup import ScenarioCleanupManager
from settlewise.services.scenario_service import (
    build_scenario_view,
    create_custom_scenario,
    create_random_scenario,
    delete_expired_scenarios,
    delete_scenario,
    get_scenario,
    solve_scenario,
)


@pytest.fixture
def custom_input():
    return SettlementInput.model_validate({
        "participants": [
            {"id": "A", "name": "Alice"},
            {"id": "B", "name": "Bob"},
            {"id": "C", "name": "Carol"},
        ],
        "transactions": [
            {"id": "t1", "from": "C", "to": "A", "amount": "30"},
            {"id": "t2", "from": "C", "to": "B", "amount": "20"},
            {"id": "t3", "from": "B", "to": "A", "amount": "5"},
        ],
    })


@pytest.mark.unit
class TestCreateScenario:

    def test_random_scenario_is_reproducible(self, db_session):
        first = build_scenario_view(create_random_scenario(db_session, ScenarioGenerate(seed=3)))
        second = build_scenario_view(create_random_scenario(db_session, ScenarioGenerate(seed=3)))

        assert first.id != second.id
        assert first.seed == second.seed == 3
        assert first.participants == second.participants
        assert first.original_transactions == second.original_transactions

    def test_random_scenario_without_seed_records_one(self, db_session):
        scenario = create_random_scenario(db_session, ScenarioGenerate(num_participants=4))
        assert scenario.seed is not None
        assert len(scenario.participants) == 4

    def test_custom_scenario_view(self, db_session, custom_input):
        view = build_scenario_view(create_custom_scenario(db_session, custom_input))

        balances = {p.id: p.balance for p in view.participants}
        statuses = {p.id: p.status for p in view.participants}
        assert balances == {"A": Decimal("35"), "B": Decimal("15"), "C": Decimal("-50")}
        assert statuses == {"A": "Creditor", "B": "Creditor", "C": "Debtor"}
        assert [p.name for p in view.participants] == ["Alice", "Bob", "Carol"]
        assert len(view.original_transactions) == 3
        assert view.settlement_transactions == []
        assert view.is_solved is False
        assert view.summary is None

    def test_custom_scenario_with_unknown_participant(self, db_session):
        data = SettlementInput.model_validate({
            "participants": [{"id": "A", "name": "Alice"}],
            "transactions": [{"id": "t1", "from": "A", "to": "Z", "amount": "5"}],
        })
        with pytest.raises(HTTPException) as excinfo:
            create_custom_scenario(db_session, data)
        assert excinfo.value.status_code == 400
        assert db_session.query(Scenario).count() == 0


@pytest.mark.unit
class TestSolveScenario:

    def test_solve_stores_settlement(self, db_session, custom_input):
        scenario = create_custom_scenario(db_session, custom_input)

        view = build_scenario_view(solve_scenario(db_session, scenario.id))

        assert view.is_solved is True
        settled = [(t.from_id, t.to_id, t.amount) for t in view.settlement_transactions]
        assert settled == [("C", "A", Decimal("35.00")), ("C", "B", Decimal("15.00"))]
        assert view.summary.original_count == 3
        assert view.summary.optimized_count == 2
        assert view.summary.reduction_percent == 33
        # Net positions are still derived from the original debts
        assert {p.id: p.balance for p in view.participants}["C"] == Decimal("-50")

    def test_solve_twice_conflicts(self, db_session, custom_input):
        scenario = create_custom_scenario(db_session, custom_input)
        solve_scenario(db_session, scenario.id)

        with pytest.raises(HTTPException) as excinfo:
            solve_scenario(db_session, scenario.id)
        assert excinfo.value.status_code == 409

    def test_solve_missing_scenario(self, db_session):
        with pytest.raises(HTTPException) as excinfo:
            solve_scenario(db_session, "missing")
        assert excinfo.value.status_code == 404

    @pytest.mark.parametrize("seed", range(5))
    def test_solve_random_scenario(self, db_session, seed):
        scenario = create_random_scenario(db_session, ScenarioGenerate(seed=seed))
        view = build_scenario_view(solve_scenario(db_session, scenario.id))

        totals = {p.id: Decimal("0") for p in view.participants}
        for transaction in view.settlement_transactions:
            totals[transaction.from_id] -= transaction.amount
            totals[transaction.to_id] += transaction.amount
        for participant in view.participants:
            assert totals[participant.id] == participant.balance


@pytest.mark.unit
class TestDeleteScenario:

    def test_delete(self, db_session, custom_input):
        scenario = create_custom_scenario(db_session, custom_input)
        scenario_id = scenario.id

        delete_scenario(db_session, scenario_id)

        assert get_scenario(db_session, scenario_id) is None

    def test_delete_missing(self, db_session):
        with pytest.raises(HTTPException) as excinfo:
            delete_scenario(db_session, "missing")
        assert excinfo.value.status_code == 404

    def test_delete_expired(self, db_session, custom_input):
        old = Scenario(is_solved=False, created_at=datetime(2000, 1, 1))
        db_session.add(old)
        db_session.commit()
        fresh = create_custom_scenario(db_session, custom_input)

        removed = delete_expired_scenarios(db_session, datetime(2010, 1, 1))

        assert removed == 1
        assert get_scenario(db_session, old.id) is None
        assert get_scenario(db_session, fresh.id) is not None


class TestScenarioCleanupManager:

    def test_cleanup_removes_only_expired(self, session_factory):
        db = session_factory()
        db.add(Scenario(id="old", is_solved=False, created_at=datetime(2000, 1, 1)))
        db.add(Scenario(id="new", is_solved=False))
        db.commit()
        db.close()

        manager = ScenarioCleanupManager(session_factory=session_factory, ttl_minutes=60)
        assert manager.cleanup_expired_scenarios() == 1

        db = session_factory()
        assert [scenario.id for scenario in db.query(Scenario).all()] == ["new"]
        db.close()

    def test_start_and_stop(self, session_factory):
        manager = ScenarioCleanupManager(session_factory=session_factory, cleanup_interval=3600)

        manager.start_cleanup()
        assert manager.is_running

        manager.stop_cleanup()
        assert not manager.is_running

"""
Example Module for the Settlement Solver

Worked examples of net balance aggregation and greedy two-heap settlement.

Run this module directly to see the algorithm in action:
    python -m settlewise.utils.settlement_example
"""

import random
from decimal import Decimal
from typing import Dict, List
from settlewise.utils.scenario_generator import generate_scenario
from settlewise.utils.settlement import (
    compute_net_balances,
    participant_status,
    solve_settlement_detailed,
    summarize_settlement
)


def print_scenario(title: str, participants: List[Dict], transactions: List[Dict]):
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)

    names = {participant["id"]: participant["name"] for participant in participants}

    print("\nTransactions:")
    if not transactions:
        print("  (none)")
    for i, transaction in enumerate(transactions, 1):
        print(f"  {i}. {names[transaction['from']]} → {names[transaction['to']]}: "
              f"{transaction['amount']}")

    balances = compute_net_balances(participants, transactions)

    print("\nNet Balances (received - paid):")
    for participant_id, balance in balances.items():
        sign = "+" if balance > 0 else ""
        print(f"  {names[participant_id]}: {sign}{balance} ({participant_status(balance)})")

    settlements, logs = solve_settlement_detailed(participants, balances)

    print("\nDetailed Workflow:")
    print("\n".join(logs))

    print("\nSettlement:")
    if settlements:
        for i, settlement in enumerate(settlements, 1):
            print(f"  {i}. {names[settlement['from']]} → {names[settlement['to']]}: "
                  f"{settlement['amount']}")
    else:
        print("  No settlements needed (all balances are zero)")

    summary = summarize_settlement(transactions, settlements)
    print(f"\nOriginal transactions: {summary['original_count']}")
    print(f"Optimized transactions: {summary['optimized_count']}")
    print(f"Reduction: {summary['reduction_percent']}%")
    print("=" * 70)


def run_example_two_creditors():
    """One debtor settles with two creditors."""
    participants = [{"id": p, "name": p} for p in ("A", "B", "C")]
    transactions = [
        {"id": "t1", "from": "C", "to": "A", "amount": Decimal("30")},
        {"id": "t2", "from": "C", "to": "B", "amount": Decimal("20")},
    ]
    print_scenario("Example 1: One Debtor, Two Creditors", participants, transactions)


def run_example_chain():
    """A chain of debts collapses into a single transfer."""
    participants = [{"id": p, "name": p} for p in ("A", "B", "C", "D")]
    transactions = [
        {"id": "t1", "from": "A", "to": "B", "amount": Decimal("40")},
        {"id": "t2", "from": "B", "to": "C", "amount": Decimal("40")},
        {"id": "t3", "from": "C", "to": "D", "amount": Decimal("40")},
    ]
    print_scenario("Example 2: Debt Chain", participants, transactions)


def run_example_cycle():
    """A cycle of equal debts needs no transfers at all."""
    participants = [{"id": p, "name": p} for p in ("A", "B", "C")]
    transactions = [
        {"id": "t1", "from": "A", "to": "B", "amount": Decimal("25")},
        {"id": "t2", "from": "B", "to": "C", "amount": Decimal("25")},
        {"id": "t3", "from": "C", "to": "A", "amount": Decimal("25")},
    ]
    print_scenario("Example 3: Debt Cycle", participants, transactions)


def run_example_random(seed: int = 42):
    """A generated scenario."""
    participants, transactions = generate_scenario(random.Random(seed))
    print_scenario(f"Example 4: Random Scenario (seed={seed})", participants, transactions)


def main():
    print("\n" + "=" * 70)
    print("SETTLEMENT SOLVER - EXAMPLES")
    print("=" * 70)

    run_example_two_creditors()
    run_example_chain()
    run_example_cycle()
    run_example_random()

    print("\n" + "=" * 70)
    print("All examples completed!")
    print("=" * 70 + "\n")


if __name__ == "__main__":
    main()

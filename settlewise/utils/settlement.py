"""
Settlement Algorithm Module

This module reduces a list of pairwise debts to net balances and then produces
a smaller list of transfers that settles every balance.

The algorithm works by:
1. Summing each participant's incoming minus outgoing amounts (net balance)
2. Putting creditors (positive balance) and debtors (negative balance) into
   two separate max-heaps keyed by the absolute amount
3. Repeatedly matching the largest creditor with the largest debtor and
   transferring the smaller of the two amounts
4. Re-inserting whichever side still has an unsettled remainder

Each step settles at least one participant, so the result never has more
than (non-zero participants - 1) transfers. It is not guaranteed to be the
true minimum, which is a subset-partitioning problem.

Time Complexity: O(n log n) for n participants with non-zero balance
Space Complexity: O(n)

Example Usage:
    from settlewise.utils.settlement import compute_net_balances, solve_settlement

    participants = [{"id": "A", "name": "Alice"}, {"id": "B", "name": "Bob"}]
    transactions = [{"id": "t1", "from": "B", "to": "A", "amount": Decimal("10")}]

    balances = compute_net_balances(participants, transactions)
    settlements = solve_settlement(participants, balances)

    # Result: [{"id": "solved-B-A", "from": "B", "to": "A", "amount": Decimal("10.00")}]
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from settlewise.utils.binary_heap import BinaryHeap
from settlewise.utils.exceptions import (
    ImbalancedBalancesError,
    InvalidTransactionError,
    SettlementError,
    UnknownParticipantError,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def round_decimal(value: Decimal, precision: Decimal = Decimal("0.01")) -> Decimal:
    """
    Round a Decimal value to the specified precision.

    Example:
        >>> round_decimal(Decimal("43.333333"))
        Decimal('43.33')
    """
    return value.quantize(precision)


def validate_balance_sum(balances: Dict[str, Decimal], tolerance: Decimal = ZERO) -> None:
    """
    Validate that the sum of all balances is zero.

    Every debit in a closed group has a matching credit, so a vector that does
    not sum to zero cannot be settled completely.

    Args:
        balances: Dictionary mapping participant_id to net balance
        tolerance: Maximum allowed deviation from zero (default: exact)

    Raises:
        ImbalancedBalancesError: If the sum of balances exceeds the tolerance
    """
    total = sum(balances.values(), ZERO)
    if abs(total) > tolerance:
        raise ImbalancedBalancesError(
            f"Balances not zero-sum: total={total}, tolerance={tolerance}. "
            f"A settlement would leave money unaccounted for."
        )


def compute_net_balances(
    participants: List[Dict],
    transactions: List[Dict]
) -> Dict[str, Decimal]:
    """
    Calculate the net balance of every participant from a list of transactions.

    balance[p] = sum(amount where to == p) - sum(amount where from == p)
    - Positive balance: participant is owed money (creditor)
    - Negative balance: participant owes money (debtor)

    Args:
        participants: List of {"id": str, "name": str}
        transactions: List of {"id": str, "from": str, "to": str, "amount": Decimal}

    Returns:
        Dictionary mapping participant_id -> net balance, in participant order.
        Participants without transactions have a zero balance.

    Raises:
        UnknownParticipantError: If a transaction names an unknown participant
        InvalidTransactionError: If an amount is not positive, not in whole
            cents, or from == to

    Example:
        >>> participants = [{"id": "A", "name": "A"}, {"id": "B", "name": "B"}]
        >>> compute_net_balances(participants, [{"id": "t", "from": "B", "to": "A", "amount": 10}])
        {'A': Decimal('10.00'), 'B': Decimal('-10.00')}
    """
    balances: Dict[str, Decimal] = {participant["id"]: ZERO for participant in participants}

    for transaction in transactions:
        source = transaction["from"]
        target = transaction["to"]
        amount = Decimal(str(transaction["amount"]))
        transaction_id = transaction.get("id", "unknown")

        for participant_id in (source, target):
            if participant_id not in balances:
                raise UnknownParticipantError(participant_id, f"transaction {transaction_id}")

        if amount <= ZERO:
            raise InvalidTransactionError(
                f"Transaction amount must be positive, got {amount}. "
                f"Transaction: {transaction_id}"
            )
        if source == target:
            raise InvalidTransactionError(
                f"Transaction source and destination must differ. "
                f"Transaction: {transaction_id}"
            )
        if amount != round_decimal(amount):
            raise InvalidTransactionError(
                f"Transaction amount must be in whole cents, got {amount}. "
                f"Transaction: {transaction_id}"
            )

        balances[target] += amount
        balances[source] -= amount

    return {participant_id: round_decimal(balance) for participant_id, balance in balances.items()}


def participant_status(balance: Decimal) -> str:
    """Label a balance as Creditor, Debtor or Settled"""
    if balance > ZERO:
        return "Creditor"
    if balance < ZERO:
        return "Debtor"
    return "Settled"


def _settle(
    participants: List[Dict],
    balances: Dict[str, Decimal],
    logs: Optional[List[str]] = None
) -> List[Dict]:
    index_of = {participant["id"]: index for index, participant in enumerate(participants)}
    if len(index_of) != len(participants):
        raise SettlementError("Participant ids must be unique")

    balances = {participant_id: Decimal(str(balance)) for participant_id, balance in balances.items()}
    for participant_id in balances:
        if participant_id not in index_of:
            raise UnknownParticipantError(participant_id, "balance vector")

    validate_balance_sum(balances)

    creditors_heap = BinaryHeap()
    debtors_heap = BinaryHeap()

    for index, participant in enumerate(participants):
        balance = balances.get(participant["id"], ZERO)
        if balance > ZERO:
            creditors_heap.insert((balance, index))
        elif balance < ZERO:
            debtors_heap.insert((-balance, index))

    if logs is not None:
        logs.append(f"Creditors (to receive): {len(creditors_heap)}")
        logs.append(f"Debtors (to pay): {len(debtors_heap)}")
        logs.append("")

    settlements = []
    step = 0

    while not creditors_heap.is_empty() and not debtors_heap.is_empty():
        step += 1
        credit_amount, creditor_index = creditors_heap.extract_max()
        debt_amount, debtor_index = debtors_heap.extract_max()

        creditor_id = participants[creditor_index]["id"]
        debtor_id = participants[debtor_index]["id"]
        amount = min(credit_amount, debt_amount)

        settlements.append({
            "id": f"solved-{debtor_id}-{creditor_id}",
            "from": debtor_id,
            "to": creditor_id,
            "amount": round_decimal(amount),
        })
        logger.debug(f"Step {step}: {debtor_id} pays {creditor_id} {amount}")

        if logs is not None:
            logs.append(f"Step {step}: Matching {debtor_id} (debt: {debt_amount}) "
                        f"with {creditor_id} (credit: {credit_amount})")
            logs.append(f"  → Transaction: {debtor_id} pays {creditor_id} {round_decimal(amount)}")

        if credit_amount > debt_amount:
            creditors_heap.insert((credit_amount - amount, creditor_index))
            if logs is not None:
                logs.append(f"  {debtor_id} fully settled, {creditor_id} still owed {credit_amount - amount}")
        elif debt_amount > credit_amount:
            debtors_heap.insert((debt_amount - amount, debtor_index))
            if logs is not None:
                logs.append(f"  {creditor_id} fully settled, {debtor_id} still owes {debt_amount - amount}")
        elif logs is not None:
            logs.append(f"  {debtor_id} and {creditor_id} both fully settled")

        if logs is not None:
            logs.append("")

    logger.info(f"Settled {len(participants)} participants with {len(settlements)} transactions")
    return settlements


def solve_settlement(participants: List[Dict], balances: Dict[str, Decimal]) -> List[Dict]:
    """
    Produce a reduced list of transfers that settles every net balance.

    Greedy two-heap matching: the largest creditor is always paired with the
    largest debtor, the smaller amount is transferred, and the remainder of
    the larger side goes back into its heap. Zero balances never enter a heap.

    Args:
        participants: List of {"id": str, "name": str}; heap payloads are
            indexes into this list
        balances: Dictionary mapping participant_id -> net balance. Missing
            participants are treated as settled.

    Returns:
        New list of settlement transactions:
        [{"id": str, "from": debtor_id, "to": creditor_id, "amount": Decimal}, ...]

    Raises:
        UnknownParticipantError: If balances name a participant not in participants
        ImbalancedBalancesError: If balances don't sum to zero

    Example:
        >>> participants = [{"id": p, "name": p} for p in "ABC"]
        >>> balances = {"A": Decimal("30"), "B": Decimal("20"), "C": Decimal("-50")}
        >>> [(s["from"], s["to"], s["amount"]) for s in solve_settlement(participants, balances)]
        [('C', 'A', Decimal('30.00')), ('C', 'B', Decimal('20.00'))]
    """
    return _settle(participants, balances)


def solve_settlement_detailed(
    participants: List[Dict],
    balances: Dict[str, Decimal]
) -> Tuple[List[Dict], List[str]]:
    """
    Solve a settlement and describe every matching step.

    Same algorithm as solve_settlement(), but also returns human-readable logs
    of each extraction and remainder, for visualizing the algorithm.

    Returns:
        Tuple of (settlements_list, detailed_logs_list)
    """
    logs = []
    logs.append("=" * 60)
    logs.append("Settlement Solver - Detailed Workflow")
    logs.append("=" * 60)
    logs.append(f"Initial balances: {balances}")
    logs.append("")

    try:
        settlements = _settle(participants, balances, logs)
    except ImbalancedBalancesError as e:
        logs.append(f"✗ Balance validation failed: {e}")
        raise

    logs.append("-" * 60)
    logs.append(f"Total settlements: {len(settlements)}")
    logs.append("=" * 60)

    return settlements, logs


def summarize_settlement(original_transactions: List[Dict], settlement_transactions: List[Dict]) -> Dict:
    """
    Compare the original transaction count with the settlement count.

    Returns:
        {"original_count": int, "optimized_count": int, "reduction_percent": int}
    """
    original_count = len(original_transactions)
    optimized_count = len(settlement_transactions)

    if original_count == 0:
        reduction_percent = 0
    else:
        reduction_percent = round((1 - optimized_count / original_count) * 100)

    return {
        "original_count": original_count,
        "optimized_count": optimized_count,
        "reduction_percent": reduction_percent,
    }

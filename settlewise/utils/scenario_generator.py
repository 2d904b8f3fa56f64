"""
Random scenario generation for demonstrating the settlement solver.

Creates a handful of participants and, for every pair of them, flips a coin
to decide whether one owes the other a random whole amount.
"""

import os
import random
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

MIN_PARTICIPANTS = int(os.getenv("SCENARIO_MIN_PARTICIPANTS", "2"))
MAX_PARTICIPANTS = int(os.getenv("SCENARIO_MAX_PARTICIPANTS", "9"))
MAX_AMOUNT = int(os.getenv("SCENARIO_MAX_AMOUNT", "100"))
EDGE_PROBABILITY = float(os.getenv("SCENARIO_EDGE_PROBABILITY", "0.5"))


def participant_id(index: int) -> str:
    return f"person-{index}"


def generate_participants(count: int) -> List[Dict]:
    """Create participants person-0 .. person-(count-1) named Person 1 .. Person count"""
    return [{"id": participant_id(i), "name": f"Person {i + 1}"} for i in range(count)]


def generate_scenario(
    rng: Optional[random.Random] = None,
    num_participants: Optional[int] = None
) -> Tuple[List[Dict], List[Dict]]:
    """
    Generate a random set of participants and pairwise transactions.

    Args:
        rng: Random source; pass random.Random(seed) for a reproducible scenario
        num_participants: Fixed participant count (default: random between
            SCENARIO_MIN_PARTICIPANTS and SCENARIO_MAX_PARTICIPANTS)

    Returns:
        Tuple of (participants, transactions) in the same dict shapes the
        settlement module consumes

    Raises:
        ValueError: If fewer than two participants are requested
    """
    rng = rng or random.Random()

    if num_participants is None:
        num_participants = rng.randint(MIN_PARTICIPANTS, MAX_PARTICIPANTS)
    if num_participants < 2:
        raise ValueError(f"A scenario needs at least 2 participants, got {num_participants}")

    participants = generate_participants(num_participants)
    transactions = []

    for i in range(num_participants):
        for j in range(i + 1, num_participants):
            if rng.random() >= EDGE_PROBABILITY:
                continue

            amount = Decimal(rng.randint(1, MAX_AMOUNT))
            source, target = (i, j) if rng.random() < 0.5 else (j, i)
            transactions.append({
                "id": f"trans-{source}-{target}",
                "from": participant_id(source),
                "to": participant_id(target),
                "amount": amount,
            })

    return participants, transactions

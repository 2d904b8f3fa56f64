class EmptyHeapError(IndexError):
    """Raised when extracting from an empty heap"""


class SettlementError(ValueError):
    """Base class for invalid settlement input"""


class UnknownParticipantError(SettlementError):
    """A transaction or balance references a participant that does not exist"""

    def __init__(self, participant_id: str, context: str = "transaction"):
        self.participant_id = participant_id
        super().__init__(f"Unknown participant '{participant_id}' referenced by {context}")


class InvalidTransactionError(SettlementError):
    """A transaction has a non-positive amount or pays itself"""


class ImbalancedBalancesError(SettlementError):
    """Net balances do not sum to zero"""

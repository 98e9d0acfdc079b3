"""
Hotness engine errors.
"""


class HotnessError(Exception):
    """Base class for hotness engine errors."""


class TerritoryNotFoundError(HotnessError):
    """Raised when the target territory does not exist."""

    def __init__(self, territory_id: str):
        self.territory_id = territory_id
        super().__init__(f"Territory with ID {territory_id} not found")


class NotVotableError(HotnessError):
    """Raised when the target territory has no votable record."""

    def __init__(self, territory_id: str):
        self.territory_id = territory_id
        super().__init__(f"Territory with ID {territory_id} not found or is not votable")


class TransientStoreError(HotnessError):
    """A store failure while processing one territory during the daily pass."""

    def __init__(self, territory_id: str, cause: BaseException):
        self.territory_id = territory_id
        self.cause = cause
        super().__init__(f"Store failure for territory {territory_id}: {cause}")


class PropositionsClosedError(HotnessError):
    """Raised when a proposition targets a decision past its proposition phase."""

    def __init__(self, decision_id: str):
        self.decision_id = decision_id
        super().__init__(f"Propositions submission is not allowed at this time for decision {decision_id}")

"""
Shared Enums

Application-wide enums used across multiple modules.
"""
from enum import Enum


class DecisionStatus(str, Enum):
    """Lifecycle phase of a decision."""
    # Citizens submit and vote propositions; hotness is tracked
    SUGGEST_AND_VOTE_PROPOSAL = "SUGGEST_AND_VOTE_PROPOSAL"
    # Featured: the decision is put to the vote of the whole territory
    GENERAL_VOTE = "GENERAL_VOTE"
    DECIDED = "DECIDED"
    CANCELLED = "CANCELLED"


class InternalEvent(str, Enum):
    """Names of the signals exchanged on the in-process signal bus."""
    # Emitted once after a daily decay pass that processed at least one territory
    TERRITORY_FEATURED_DECISIONS_TRIGGER_UPDATE = "territory.featuredDecisionsTriggerUpdate"
    # Emitted when a decision has been scheduled for general vote
    DECISION_NEW_DECISION_TO_BE_FEATURED = "decision.newDecisionToBeFeatured"
    # Emitted when a scheduled decision enters its general vote
    DECISION_NEW_FEATURED_DECISION = "decision.newFeaturedDecision"


class JobName(str, Enum):
    """Scheduler job identifiers."""
    UPDATE_TERRITORIES_FEATURED_DECISION_TRIGGER = "update_territories_featured_decision_trigger"
    CHECK_DECISION_HOTNESS = "check_decision_hotness"
    MOVE_DECISIONS_TO_FEATURED = "move_decisions_to_featured"

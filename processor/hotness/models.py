"""
Data models for the hotness module.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class TerritoryDecayResult:
    """Outcome of recomputing one territory's trigger."""
    territory_id: str
    name: str
    previous_trigger: float
    new_trigger: Optional[int]
    days_passed: Optional[float] = None
    decay_factor: Optional[float] = None
    skipped_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.new_trigger is None


@dataclass
class HotnessPassResult:
    """Result of a daily decay pass over all votable territories."""
    processed: List[TerritoryDecayResult] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)  # territory_id -> error
    signal_emitted: bool = False

    @property
    def territory_count(self) -> int:
        return len(self.processed) + len(self.failures)

    def to_dict(self) -> dict:
        return {
            "territory_count": self.territory_count,
            "updated": [r.territory_id for r in self.processed if not r.skipped],
            "skipped": [r.territory_id for r in self.processed if r.skipped],
            "failures": dict(self.failures),
            "signal_emitted": self.signal_emitted,
        }

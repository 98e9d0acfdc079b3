"""
Territory Repository

Handles all database operations for territories, their votable state and
the featured decision trigger history.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update

from database.models import Territory, VotableTerritory, TerritoryTriggerHistory
from .base import BaseRepository


@dataclass
class VotableTerritoryView:
    """Projection of a votable territory: id, name and voting fields only."""
    id: str
    name: str
    votable_decisions: bool
    current_featured_decision_trigger: float
    latest_featured_decision_trigger: Optional[float]
    latest_featured_decision_date: Optional[int]
    chatroom_id: Optional[str] = None


class TerritoryRepository(BaseRepository[Territory]):
    """Repository for territory operations."""

    model = Territory

    # ============================================
    # TERRITORIES
    # ============================================

    async def create_territory(
        self,
        territory_id: str,
        name: str,
        shortname: str = None,
        official_code: str = None,
        active: bool = True,
    ) -> Territory:
        """Create a new territory."""
        territory = Territory(
            id=territory_id,
            name=name,
            shortname=shortname,
            official_code=official_code,
            active=active,
            registered_users_count=0,
        )
        return await self.add(territory)

    # ============================================
    # VOTABLE TERRITORIES
    # ============================================

    async def get_votable(self, territory_id: str) -> Optional[VotableTerritory]:
        """Get the votable record of a territory, if any."""
        return await self.session.get(VotableTerritory, territory_id)

    async def create_votable(
        self,
        territory_id: str,
        default_trigger: float,
    ) -> VotableTerritory:
        """
        Create (or reset) the votable record of a territory.

        Anchors are left unset: the trigger does not decay until the
        first featuring.
        """
        votable = VotableTerritory(
            territory_id=territory_id,
            votable_decisions=True,
            current_featured_decision_trigger=default_trigger,
            latest_featured_decision_trigger=None,
            latest_featured_decision_date=None,
        )
        return await self.merge(votable)

    @staticmethod
    def _votable_view_query():
        """Territory id and name joined with the voting fields."""
        return (
            select(
                Territory.id,
                Territory.name,
                VotableTerritory.votable_decisions,
                VotableTerritory.current_featured_decision_trigger,
                VotableTerritory.latest_featured_decision_trigger,
                VotableTerritory.latest_featured_decision_date,
                VotableTerritory.chatroom_id,
            )
            .join(VotableTerritory, VotableTerritory.territory_id == Territory.id)
        )

    async def find_votable_territories(self) -> List[VotableTerritoryView]:
        """
        Get every territory that has a votable record.

        Only id, name and the voting fields are loaded.
        """
        stmt = self._votable_view_query().order_by(Territory.id)
        result = await self.session.execute(stmt)
        return [VotableTerritoryView(*row) for row in result.all()]

    async def get_votable_view(self, territory_id: str) -> Optional[VotableTerritoryView]:
        """Voting projection of one territory, None without a votable record."""
        stmt = self._votable_view_query().where(Territory.id == territory_id)
        row = (await self.session.execute(stmt)).first()
        return VotableTerritoryView(*row) if row is not None else None

    async def conditional_update_trigger(
        self,
        territory_id: str,
        fields: Dict[str, Any],
        *conditions,
    ) -> int:
        """
        Update voting fields of a territory in place.

        The update only matches an existing votable record, plus any extra
        SQLAlchemy conditions given.

        Args:
            territory_id: Territory ID
            fields: Column name -> new value on VotableTerritory
            *conditions: Extra WHERE clauses

        Returns:
            Number of matched rows (0 means the update was a no-op)
        """
        stmt = (
            update(VotableTerritory)
            .where(VotableTerritory.territory_id == territory_id, *conditions)
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    # ============================================
    # TRIGGER HISTORY
    # ============================================

    async def add_trigger_history(
        self,
        territory_id: str,
        featured_at: int,
        trigger: float,
    ) -> TerritoryTriggerHistory:
        """Record the trigger value reached at a featuring instant."""
        entry = TerritoryTriggerHistory(
            territory_id=territory_id,
            featured_at=featured_at,
            trigger=trigger,
        )
        return await self.merge(entry)

    async def get_trigger_history(self, territory_id: str) -> Dict[int, float]:
        """Featuring instant (epoch ms) -> trigger, oldest first."""
        stmt = (
            select(TerritoryTriggerHistory.featured_at, TerritoryTriggerHistory.trigger)
            .where(TerritoryTriggerHistory.territory_id == territory_id)
            .order_by(TerritoryTriggerHistory.featured_at)
        )
        result = await self.session.execute(stmt)
        return {featured_at: trigger for featured_at, trigger in result.all()}

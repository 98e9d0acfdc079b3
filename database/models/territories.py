"""
Territory Models

Territories form the platform's administrative hierarchy (polling
station, city, region, country). A territory where decisions can be
proposed and voted carries a VotableTerritory record holding its
featured decision trigger (hotness threshold).
"""
from typing import Optional, List, Dict

from sqlalchemy import String, Float, Integer, BigInteger, Boolean, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class Territory(Base, TimestampMixin):
    """
    A geographic or administrative unit.

    Territories are archived (active=False), never deleted.
    """
    __tablename__ = "territories"

    # Primary key
    id: Mapped[str] = mapped_column(String(50), primary_key=True)

    # Basic info
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    shortname: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)  # e.g. "PACA"
    official_code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)  # e.g. INSEE code

    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    registered_users_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    votable_territory: Mapped[Optional["VotableTerritory"]] = relationship(
        "VotableTerritory",
        back_populates="territory",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class VotableTerritory(Base):
    """
    Voting state of a territory.

    current_featured_decision_trigger is the hotness score a decision must
    reach to be featured. It is doubled after each featuring and decays
    daily from the (latest trigger, latest date) anchor.
    """
    __tablename__ = "votable_territories"

    territory_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("territories.id", ondelete="CASCADE"),
        primary_key=True
    )

    votable_decisions: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Hotness threshold, always > 0
    current_featured_decision_trigger: Mapped[float] = mapped_column(Float, default=10, nullable=False)

    # Decay anchor: trigger value and instant (epoch ms) of the latest featuring
    latest_featured_decision_trigger: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    latest_featured_decision_date: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    # Owned by the chat subsystem
    chatroom_id: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # Relationships
    territory: Mapped["Territory"] = relationship("Territory", back_populates="votable_territory")
    trigger_history: Mapped[List["TerritoryTriggerHistory"]] = relationship(
        "TerritoryTriggerHistory",
        back_populates="votable_territory",
        cascade="all, delete-orphan",
        order_by="TerritoryTriggerHistory.featured_at",
        lazy="selectin",
    )

    @property
    def trigger_history_map(self) -> Dict[int, float]:
        """Featuring instant (epoch ms) -> trigger value, oldest first."""
        return {h.featured_at: h.trigger for h in self.trigger_history}


class TerritoryTriggerHistory(Base):
    """
    Append-only audit trail of trigger values at each featuring event.

    Keyed by (territory_id, featured_at); two resets within the same
    millisecond keep the last value.
    """
    __tablename__ = "territory_trigger_history"

    territory_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("votable_territories.territory_id", ondelete="CASCADE"),
        primary_key=True
    )
    featured_at: Mapped[int] = mapped_column(BigInteger, primary_key=True)

    trigger: Mapped[float] = mapped_column(Float, nullable=False)

    # Relationships
    votable_territory: Mapped["VotableTerritory"] = relationship(
        "VotableTerritory",
        back_populates="trigger_history"
    )

    __table_args__ = (
        Index('idx_trigger_history_territory', 'territory_id', 'featured_at'),
    )

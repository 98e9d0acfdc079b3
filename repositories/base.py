"""
Base Repository

Async lookups and writes shared by the territory and decision repositories.
Repositories never commit: the caller's session scope owns the transaction.
"""
from datetime import datetime
from typing import TypeVar, Generic, Optional, Type, Any
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from database.models.base import Base


ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Repository bound to one session and one model.

    Example:
        class DecisionRepository(BaseRepository[Decision]):
            model = Decision
    """

    model: Type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    # ============================================
    # READ OPERATIONS
    # ============================================

    async def get(self, entity_id: Any) -> Optional[ModelT]:
        """Load by primary key (tuple for composite keys), None if missing."""
        return await self.session.get(self.model, entity_id)

    async def exists(self, entity_id: Any) -> bool:
        return await self.get(entity_id) is not None

    # ============================================
    # WRITE OPERATIONS
    # ============================================

    async def add(self, entity: ModelT) -> ModelT:
        """Insert a new row and flush so defaults are populated."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def merge(self, entity: ModelT) -> ModelT:
        """
        Insert or overwrite a row by primary key (last write wins).

        Returns:
            The persistent instance held by the session
        """
        merged = await self.session.merge(entity)
        await self.session.flush()
        return merged

    @staticmethod
    def generate_id(prefix: str = "") -> str:
        """
        Build a sortable unique ID: <prefix>_<YYYYmmddHHMMSS>_<12 hex chars>.
        """
        unique_part = uuid.uuid4().hex[:12]
        timestamp = datetime.now().strftime('%Y%m%d%H%M%S')
        base_id = f"{timestamp}_{unique_part}"
        return f"{prefix}_{base_id}" if prefix else base_id

"""
Base repository for feature repositories.

Usage:
    class CourseRepository(BaseRepository[Course]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, Course)

        async def get_by_external_id(self, external_id: str) -> Course | None:
            return await self.get_by(external_id=external_id)
"""

from typing import Any, TypeVar, Generic, Type
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Lookups and bulk deletes over one model.

    Methods never commit; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    async def get_by_id(self, id: int) -> T | None:
        """Get entity by primary key, None if not found."""
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def get_by(self, **kwargs) -> T | None:
        """
        Get single entity by arbitrary field values.

        Args:
            **kwargs: Field name-value pairs to filter by

        Returns:
            Matching entity or None
        """
        query = select(self.model)
        for key, value in kwargs.items():
            query = query.where(getattr(self.model, key) == value)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def delete_where(self, model: Type[Any] | None = None, **kwargs) -> None:
        """
        Bulk DELETE rows of `model` (default: the repository model).

        Issued as a single statement, so ORM cascades do not apply.
        """
        model = model or self.model
        statement = delete(model)
        for key, value in kwargs.items():
            statement = statement.where(getattr(model, key) == value)
        await self.db.execute(statement)

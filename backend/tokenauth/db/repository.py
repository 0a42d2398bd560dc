"""
SQLAlchemy implementation of the user repository.
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tokenauth.db.models import User
from tokenauth.services.auth.repository import UserRecord


def _to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        password_hash=user.password_hash,
        is_active=user.is_active,
        token_version=user.token_version or 0,
    )


class SqlAlchemyUserRepository:
    """Reads users and bumps token versions through an async session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def find_by_identifier(self, identifier: str) -> UserRecord | None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(User).where(User.identifier == identifier)
            )
            user = result.scalar_one_or_none()
            return _to_record(user) if user else None

    async def find_by_id(self, user_id: str) -> UserRecord | None:
        async with self.session_factory() as session:
            user = await session.get(User, user_id)
            return _to_record(user) if user else None

    async def increment_token_version(self, user_id: str) -> int | None:
        async with self.session_factory() as session:
            # Single UPDATE so concurrent bumps never lose an increment
            result = await session.execute(
                update(User)
                .where(User.id == user_id)
                .values(token_version=User.token_version + 1)
            )
            if result.rowcount == 0:
                await session.rollback()
                return None

            version = await session.scalar(
                select(User.token_version).where(User.id == user_id)
            )
            await session.commit()
            return version

    async def create_user(
        self,
        identifier: str,
        password_hash: str,
        is_active: bool = True,
    ) -> UserRecord:
        async with self.session_factory() as session:
            user = User(
                identifier=identifier,
                password_hash=password_hash,
                is_active=is_active,
            )
            session.add(user)
            await session.commit()
            return _to_record(user)

"""
Create a user account, or revoke a user's refresh tokens.

Run with:
    python -m scripts.seed_users alice@example.com 'correct horse'
    python -m scripts.seed_users alice@example.com --revoke
"""

import argparse
import asyncio
from getpass import getpass

from sqlalchemy import select

from tokenauth.core.config import get_settings
from tokenauth.db.models import User
from tokenauth.db.repository import SqlAlchemyUserRepository
from tokenauth.db.session import close_db, create_session_factory, engine_from_settings, init_db
from tokenauth.services.auth import BcryptPasswordHasher


async def seed(identifier: str, password: str | None, revoke: bool) -> None:
    engine = engine_from_settings(get_settings())
    await init_db(engine)
    session_factory = create_session_factory(engine)
    repository = SqlAlchemyUserRepository(session_factory)

    try:
        async with session_factory() as session:
            result = await session.execute(
                select(User).where(User.identifier == identifier)
            )
            existing = result.scalar_one_or_none()

        if revoke:
            if not existing:
                print(f"No such user: {identifier}")
                return
            version = await repository.increment_token_version(existing.id)
            print(f"Revoked: {identifier} (token version now {version})")
            return

        if existing:
            print(f"Exists: {identifier}")
            return

        password = password or getpass("Password: ")
        record = await repository.create_user(identifier, BcryptPasswordHasher().hash(password))
        print(f"Added: {identifier} ({record.id})")
    finally:
        await close_db(engine)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("identifier")
    parser.add_argument("password", nargs="?")
    parser.add_argument("--revoke", action="store_true", help="invalidate all refresh tokens")
    args = parser.parse_args()
    asyncio.run(seed(args.identifier, args.password, args.revoke))


if __name__ == "__main__":
    main()

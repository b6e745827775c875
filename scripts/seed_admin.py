"""
Seed the first ADMIN (or, with --superadmin, SUPERADMIN) account.

Run once after `alembic upgrade head`. Re-running is safe: an existing account
with the seed email is promoted to the requested role and its password is reset to
SEED_ADMIN_PASSWORD.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to Python path so the src package imports from any directory
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select  # noqa: E402
from src.core.config import get_settings  # noqa: E402
from src.domain.services.auth_service import hash_password  # noqa: E402
from src.infrastructure.db.models import UserModel, UserRole, UserStatus  # noqa: E402
from src.infrastructure.db.session import dispose_engine, get_session_factory  # noqa: E402


async def seed_admin(role: UserRole = UserRole.ADMIN) -> UserModel:
    settings = get_settings()
    email = settings.seed_admin_email.lower()

    async with get_session_factory()() as session:
        user = await session.scalar(select(UserModel).where(UserModel.email == email))
        if user is None:
            user = UserModel(
                email=email,
                first_name="Admin",
                last_name="User",
                password_hash=hash_password(settings.seed_admin_password),
            )
            session.add(user)
        else:
            user.password_hash = hash_password(settings.seed_admin_password)
            user.deleted_at = None

        user.role = role
        user.status = UserStatus.ACTIVE
        await session.commit()
        await session.refresh(user)
        return user


async def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the initial admin account.")
    parser.add_argument(
        "--superadmin",
        action="store_true",
        help="grant SUPERADMIN instead of ADMIN (the API never grants it)",
    )
    args = parser.parse_args()

    role = UserRole.SUPERADMIN if args.superadmin else UserRole.ADMIN
    try:
        user = await seed_admin(role)
    finally:
        await dispose_engine()
    print(f"Seeded {user.role.value} {user.email} ({user.id})")


if __name__ == "__main__":
    asyncio.run(main())

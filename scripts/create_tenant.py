# scripts/create_tenant.py
"""
Create a tenant account (user) from the command line.

Usage:
  python -m scripts.create_tenant --email owner@example.com --password secret --subdomain labodega --name "La Bodega"
"""
import argparse
import asyncio
import sys

from fastapi_users.password import PasswordHelper
from sqlalchemy.future import select

from menuboard.db import async_session
from menuboard.models.user import User


async def create_tenant(email: str, password: str, subdomain: str, name: str) -> None:
    async with async_session() as session:
        result = await session.execute(
            select(User).where((User.email == email) | (User.subdomain == subdomain))
        )
        if result.scalars().first():
            print(f"⚠️  A user with email '{email}' or subdomain '{subdomain}' already exists. Skipping.")
            return

        user = User(
            email=email,
            hashed_password=PasswordHelper().hash(password),
            name=name,
            subdomain=subdomain.lower(),
            is_active=True,
            is_verified=True,
            is_superuser=False,
            active=True,
        )
        session.add(user)
        await session.commit()
        print(f"✅ Created tenant {user.id}: {name} ({subdomain})")


def main():
    parser = argparse.ArgumentParser(description="Create a tenant account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--subdomain", required=True)
    parser.add_argument("--name", default="")
    args = parser.parse_args()

    if sys.platform.startswith("win"):
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(create_tenant(args.email, args.password, args.subdomain, args.name or args.subdomain))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Create an API user.

There is no sign-up endpoint; admins and runners are created with this tool.

Usage:
    python tools/create_user.py alice --role admin
    python tools/create_user.py bob --password s3cret
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys

from runrun.auth import create_user, get_user_by_username
from runrun.database import get_db_context, init_db
from runrun.models import UserRole


async def _create(username: str, password: str, role: UserRole) -> int:
    await init_db()
    async with get_db_context() as db:
        if await get_user_by_username(db, username):
            print(f"Error: user {username!r} already exists")
            return 1
        user = await create_user(db, username, password, role)
        print(f"Created {role.value} {user.username} ({user.id})")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an API user")
    parser.add_argument("username", help="Login name")
    parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.RUNNER.value,
        help="User role (default: runner)",
    )
    parser.add_argument("--password", help="Password (prompted if omitted)")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("Error: empty password")
        return 1

    return asyncio.run(_create(args.username, password, UserRole(args.role)))


if __name__ == "__main__":
    sys.exit(main())

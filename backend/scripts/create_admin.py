#!/usr/bin/env python3
import argparse
import asyncio
import getpass

from clubhub.database import database
from clubhub.sql.admins import create_admin, get_admin_by_username, update_admin_password


async def async_main() -> None:
    parser = argparse.ArgumentParser(description="Create an admin account or reset its password.")
    parser.add_argument("username", type=str)
    parser.add_argument("--email", type=str, default=None)
    parser.add_argument(
        "--password", type=str, default=None, help="Prompted for when omitted"
    )
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters")

    await database.connect()
    try:
        existing = await get_admin_by_username(args.username)
        if existing is None:
            admin = await create_admin(args.username, password, args.email)
            print(f"Created admin '{admin.username}' (id={admin.id})")
        else:
            await update_admin_password(existing.id, password)
            print(f"Reset password of admin '{existing.username}'")
    finally:
        await database.disconnect()


if __name__ == "__main__":
    asyncio.run(async_main())

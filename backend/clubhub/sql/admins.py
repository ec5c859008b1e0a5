from heliclockter import datetime_utc

from clubhub.database import database
from clubhub.models.db.admin import AdminInDB, AdminInsertable, AdminPublic
from clubhub.schema import admins
from clubhub.utils.db import fetch_one_parsed
from clubhub.utils.id_types import AdminId
from clubhub.utils.security import hash_password
from clubhub.utils.types import assert_some


async def get_admin_by_username(username: str) -> AdminInDB | None:
    return await fetch_one_parsed(
        database, AdminInDB, admins.select().where(admins.c.username == username)
    )


async def get_admin_by_id(admin_id: AdminId) -> AdminPublic | None:
    return await fetch_one_parsed(
        database, AdminPublic, admins.select().where(admins.c.id == admin_id)
    )


async def create_admin(username: str, password: str, email: str | None = None) -> AdminPublic:
    new_id = await database.execute(
        query=admins.insert(),
        values=AdminInsertable(
            username=username,
            email=email,
            password_hash=hash_password(password),
            created=datetime_utc.now(),
        ).model_dump(),
    )
    return assert_some(await get_admin_by_id(AdminId(new_id)))


async def update_admin_password(admin_id: AdminId, password: str) -> None:
    await database.execute(
        query=admins.update().where(admins.c.id == admin_id),
        values={"password_hash": hash_password(password)},
    )


async def ensure_admin(username: str, password: str, email: str | None = None) -> bool:
    """Create the admin account when it does not exist yet. Returns whether one was created."""
    if await get_admin_by_username(username) is not None:
        return False

    await create_admin(username, password, email)
    return True

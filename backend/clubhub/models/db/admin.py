from heliclockter import datetime_utc
from pydantic import BaseModel

from clubhub.models.db.shared import BaseModelORM
from clubhub.utils.id_types import AdminId


class AdminBase(BaseModelORM):
    username: str
    email: str | None = None
    created: datetime_utc


class AdminInsertable(AdminBase):
    password_hash: str


class AdminInDB(AdminBase):
    id: AdminId
    password_hash: str


class AdminPublic(AdminBase):
    id: AdminId


class AdminCredentials(BaseModel):
    username: str
    password: str

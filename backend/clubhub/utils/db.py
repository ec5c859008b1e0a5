from typing import Any, TypeVar

from databases import Database
from databases.interfaces import Record
from pydantic import BaseModel

BaseModelT = TypeVar("BaseModelT", bound=BaseModel)


def record_to_dict(record: Record) -> dict[str, Any]:
    return dict(record._mapping)


async def fetch_one_parsed(
    database: Database, model: type[BaseModelT], query: str, values: dict[str, Any] | None = None
) -> BaseModelT | None:
    record = await database.fetch_one(query=query, values=values)
    return model.model_validate(record_to_dict(record)) if record is not None else None


async def fetch_all_parsed(
    database: Database, model: type[BaseModelT], query: str, values: dict[str, Any] | None = None
) -> list[BaseModelT]:
    records = await database.fetch_all(query=query, values=values)
    return [model.model_validate(record_to_dict(record)) for record in records]

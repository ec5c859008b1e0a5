from fastapi import Query
from pydantic import BaseModel

MAX_PAGE_SIZE = 100


class Pagination(BaseModel):
    page: int = Query(default=1, ge=1)
    page_size: int = Query(default=10, ge=1, le=MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


class PaginationPublic(Pagination):
    page_size: int = Query(default=20, ge=1, le=MAX_PAGE_SIZE)

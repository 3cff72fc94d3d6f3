"""
Full text search capability

A Searcher returns the identifiers of the matching records, most relevant first.
The composer restricts the query to these identifiers and keeps their order.
"""
from typing import Any, List, Optional, Sequence
from sqlalchemy import case, or_

import forgequery
from .config import get_int_config


class Searcher:
    """
    Search capability interface
    """

    def search(self, term: str) -> List[Any]:
        raise NotImplementedError


class ColumnSearcher(Searcher):
    """
    Case insensitive substring search over model columns.
    Rows where the first column starts with the term rank first, ties are ordered by primary key.

    :param model: SQLAlchemy model class
    :param columns: names of the searched columns
    :param primary_key: name of the identifier column
    :param limit: maximum number of ids, defaults to the SEARCH_LIMIT config
    """

    def __init__(self, model: type, columns: Sequence[str], primary_key: str = "id", limit: Optional[int] = None) -> None:
        if not columns:
            raise ValueError("ColumnSearcher needs at least one column")
        self.model = model
        self.columns = tuple(columns)
        self.primary_key = primary_key
        self.limit = limit

    def search(self, term: str) -> List[Any]:
        term = term.strip()
        if not term:
            return []
        limit = self.limit if self.limit is not None else get_int_config("SEARCH_LIMIT")
        pk = getattr(self.model, self.primary_key)
        columns = [getattr(self.model, name) for name in self.columns]
        prefix_rank = case((columns[0].ilike(f"{term}%"), 0), else_=1)

        query = (
            forgequery.DB.session.query(pk)
            .filter(or_(*(column.ilike(f"%{term}%") for column in columns)))
            .order_by(prefix_rank, pk)
            .limit(limit)
        )
        result = [row[0] for row in query.all()]
        forgequery.log.debug(f"Search {self.model.__name__} for '{term}': {len(result)} hit(s)")
        return result

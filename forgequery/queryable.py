# -*- coding: utf-8 -*-
"""
    queryable.py: the data query the composer builds on

    Queryable wraps a SQLAlchemy ORM query for one model class. Every builder method returns
    a new Queryable, the wrapped query is generative so the previous instance is never changed.
"""
import math
from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Optional, Sequence, Tuple
import sqlalchemy
from sqlalchemy import case, false
from sqlalchemy.orm import Query, joinedload, load_only

import forgequery
from .errors import GenericError, NotFoundError, ValidationError

ASC = "asc"
DESC = "desc"


@dataclass(frozen=True)
class Page:
    """
    One page of results with the length aware pagination metadata
    """

    items: List[Any]
    current_page: int
    per_page: int
    total: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    def meta(self) -> dict:
        return {
            "current_page": self.current_page,
            "last_page": self.last_page,
            "per_page": self.per_page,
            "total": self.total,
        }


@dataclass(frozen=True)
class Queryable:
    """
    :param model: SQLAlchemy model class
    :param query: the ORM query for `model`
    :param fields: names of the projected fields (empty: all columns are loaded)
    :param relations: eager loaded relation paths
    """

    model: type
    query: Query
    fields: Tuple[str, ...] = ()
    relations: Tuple[str, ...] = ()

    @classmethod
    def for_model(cls, model: type) -> "Queryable":
        return cls(model, forgequery.DB.session.query(model))

    def _with_query(self, query: Query, **changes) -> "Queryable":
        return replace(self, query=query, **changes)

    def column(self, name: str):
        """
        :param name: model attribute name
        :return: the instrumented attribute
        """
        attr = getattr(self.model, name, None)
        if attr is None or not hasattr(attr, "property"):
            raise GenericError(f"{self.model.__name__} has no attribute {name}")
        return attr

    #
    # Filtering
    #
    def where(self, *criteria) -> "Queryable":
        return self._with_query(self.query.filter(*criteria))

    def where_equals(self, field: str, value: Any) -> "Queryable":
        return self.where(self.column(field) == value)

    def where_in(self, field: str, values: Iterable[Any]) -> "Queryable":
        return self.where(self.column(field).in_(list(values)))

    def where_like(self, field: str, term: str) -> "Queryable":
        return self.where(self.column(field).like(f"%{term}%"))

    def where_between(self, field: str, start: Any, end: Any) -> "Queryable":
        return self.where(self.column(field).between(start, end))

    def where_null(self, field: str) -> "Queryable":
        return self.where(self.column(field).is_(None))

    def where_not_null(self, field: str) -> "Queryable":
        return self.where(self.column(field).is_not(None))

    def where_false(self) -> "Queryable":
        """
        :return: a Queryable that matches no rows
        """
        return self.where(false())

    #
    # Loading
    #
    def with_relations(self, paths: Sequence[str]) -> "Queryable":
        """
        Joined load the dotted relation paths, eg. "resolved_dependencies.mod"
        See: https://docs.sqlalchemy.org/en/20/orm/queryguide/relationships.html

        :param paths: relation paths
        """
        query = self.query
        for path in paths:
            current_cls = self.model
            options = None
            for rel_name in path.split("."):
                rel = getattr(current_cls, rel_name, None)
                if rel is None or not isinstance(getattr(rel, "property", None), sqlalchemy.orm.RelationshipProperty):
                    raise GenericError(f"Invalid relationship : {current_cls.__name__}.{rel_name}")
                options = options.joinedload(rel) if options else joinedload(rel)
                current_cls = rel.property.mapper.class_
            query = query.options(options)
        return self._with_query(query, relations=self.relations + tuple(paths))

    def select_fields(self, fields: Sequence[str]) -> "Queryable":
        """
        Only load the given columns, the primary key is always loaded by SQLAlchemy

        :param fields: column names
        """
        if not fields:
            return self
        columns = [self.column(name) for name in fields]
        return self._with_query(self.query.options(load_only(*columns)), fields=tuple(fields))

    #
    # Ordering
    #
    def order_by(self, field: str, direction: str = ASC) -> "Queryable":
        column = self.column(field)
        return self._with_query(self.query.order_by(column.desc() if direction == DESC else column.asc()))

    def order_by_empty_first(self, field: str) -> "Queryable":
        """
        Order the rows where `field` is an empty string before the others
        """
        return self._with_query(self.query.order_by(case((self.column(field) == "", 0), else_=1)))

    def order_by_rank(self, field: str, values: Sequence[Any]) -> "Queryable":
        """
        Replace the ordering by the position of `field` in `values`
        """
        ranking = case({value: position for position, value in enumerate(values)}, value=self.column(field))
        return self._with_query(self.query.order_by(None).order_by(ranking))

    def clear_order(self) -> "Queryable":
        return self._with_query(self.query.order_by(None))

    #
    # Execution
    #
    def execute(self) -> List[Any]:
        return self.query.all()

    def count(self) -> int:
        return self.query.order_by(None).count()

    def paginate(self, per_page: int, page: int = 1) -> Page:
        """
        this is where the query is executed, hence it's the bottleneck of the queries

        :param per_page: page size
        :param page: 1-based page number
        :return: Page
        """
        per_page = max(per_page, 1)
        page = max(page, 1)
        try:
            total = self.count()
            items = self.query.offset((page - 1) * per_page).limit(per_page).all()
        except OverflowError:
            raise ValidationError("Pagination Overflow Error")
        except sqlalchemy.exc.SQLAlchemyError as exc:
            raise GenericError(f"{exc}")
        return Page(items=items, current_page=page, per_page=per_page, total=total)

    def find_or_fail(self, object_id: Any, field: str = "id") -> Any:
        """
        :param object_id: primary key value
        :return: the single matching instance
        :raises NotFoundError: when no row matches
        """
        instance: Optional[Any] = self.where_equals(field, object_id).query.first()
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} with {field} {object_id} not found")
        return instance

# Query composition
#
# The request parameters are validated against the QuerySpecification whitelists and
# applied to the base query in a fixed order:
#
#   filters -> includes -> fields -> sorts -> search
#
# Each step takes the Queryable produced by the previous step and returns the next one.
# A step validates all of its parameters before it applies any of them.
#
from dataclasses import replace
from typing import Any, Iterable, List, Mapping, Optional, Tuple

import forgequery
from .errors import InvalidQuery
from .config import get_int_config
from .queryable import ASC, DESC, Page, Queryable
from .request import QueryParams
from .specification import QuerySpecification, unique


def _csv(values: Iterable[str]) -> str:
    return ", ".join(values)


def _non_empty(values: Optional[Iterable[str]]) -> List[str]:
    return [value for value in values or () if value]


def parse_sort(token: str) -> Tuple[str, str]:
    """
    The sort order for each sort field is ascending unless it is prefixed with a minus

    :param token: sort token, eg. "-created_at"
    :return: field name, direction
    """
    if token.startswith("-"):
        return token[1:], DESC
    return token, ASC


def apply_filters(spec: QuerySpecification, params: QueryParams, query: Queryable) -> Queryable:
    filters = {name: value for name, value in params.filters.items() if name and value not in (None, "")}
    if not filters:
        return query

    invalid = [name for name in filters if name not in spec.allowed_filters]
    if invalid:
        raise InvalidQuery(f"Invalid filter(s): {_csv(invalid)}. Valid filters are: {_csv(spec.allowed_filters)}")

    for name, value in filters.items():
        forgequery.log.debug(f"Applying filter {name}={value}")
        query = spec.allowed_filters[name](query, value)
    return query


def apply_includes(spec: QuerySpecification, params: QueryParams, query: Queryable) -> Queryable:
    includes = unique(_non_empty(params.includes))
    if not includes:
        return query

    allowed = spec.allowed_includes
    invalid = [name for name in includes if name not in allowed]
    if invalid:
        raise InvalidQuery(f"Invalid include(s): {_csv(invalid)}. Valid includes are: {_csv(allowed.names)}")

    relations: List[str] = []
    for name in includes:
        relations.extend(allowed.expand(name))
    forgequery.log.debug(f"Including relations {relations}")
    return query.with_relations(unique(relations))


def projected_fields(spec: QuerySpecification, requested: Optional[Iterable[str]]) -> Tuple[str, ...]:
    """
    :param spec: QuerySpecification
    :param requested: field names requested by the client
    :return: the storage fields to select
    """
    fields = unique(_non_empty(requested))
    required = unique(_non_empty(spec.required_fields))
    dynamic = spec.dynamic_attributes

    if not fields:
        return unique(spec.allowed_fields + required)

    valid = unique(spec.allowed_fields + tuple(dynamic))
    invalid = [name for name in fields if name not in required and name not in valid]
    if invalid:
        raise InvalidQuery(f"Invalid field(s): {_csv(invalid)}. Valid fields are: {_csv(valid)}")

    dependencies: List[str] = []
    for name in fields:
        dependencies.extend(dynamic.get(name, ()))
    storage_fields = [name for name in fields if name not in dynamic]
    return unique(required + tuple(storage_fields) + tuple(dependencies))


def apply_fields(spec: QuerySpecification, params: QueryParams, query: Queryable) -> Queryable:
    fields = projected_fields(spec, params.fields)
    forgequery.log.debug(f"Selecting fields {fields}")
    return query.select_fields(fields)


def _order(spec: QuerySpecification, query: Queryable, name: str, direction: str) -> Queryable:
    override = spec.sort_overrides.get(name)
    if override is not None:
        return override(query, direction)
    return query.order_by(name, direction)


def apply_sorts(spec: QuerySpecification, params: QueryParams, query: Queryable) -> Queryable:
    sorts = _non_empty(params.sorts)
    if not sorts:
        for name, direction in map(parse_sort, spec.default_sorts):
            query = _order(spec, query, name, direction)
        return query

    invalid = [token for token in sorts if parse_sort(token)[0] not in spec.allowed_sorts]
    if invalid:
        raise InvalidQuery(f"Invalid sort parameter(s): {_csv(invalid)}. Valid sorts are: {_csv(spec.allowed_sorts)}")

    for name, direction in map(parse_sort, sorts):
        forgequery.log.debug(f"Sorting by {name} {direction}")
        query = _order(spec, query, name, direction)
    return query


def apply_search(spec: QuerySpecification, params: QueryParams, query: Queryable) -> Queryable:
    term = (params.search or "").strip()
    if not term:
        return query

    if not spec.searchable:
        forgequery.log.debug(f"Search ignored, {query.model.__name__} is not searchable")
        return query

    ids = spec.searcher.search(term)
    if not ids:
        return query.where_false()
    return query.where_in(spec.primary_key, ids).order_by_rank(spec.primary_key, ids)


STEPS = (apply_filters, apply_includes, apply_fields, apply_sorts, apply_search)


class QueryComposer:
    """
    Compose the query for one request:

        composer = QueryComposer(mod_specification()).with_filters({"name": "raid"}).with_sorts(["-created_at"])
        page = composer.paginate(per_page=12)

    A composer is created per request, it should not be reused after it raised an error.
    """

    def __init__(self, specification: QuerySpecification, params: Optional[QueryParams] = None) -> None:
        self.specification = specification
        self.params = params if params is not None else QueryParams()

    def with_filters(self, filters: Optional[Mapping[str, str]]) -> "QueryComposer":
        self.params = replace(self.params, filters=dict(filters or {}))
        return self

    def with_includes(self, includes: Optional[Iterable[str]]) -> "QueryComposer":
        self.params = replace(self.params, includes=_non_empty(includes))
        return self

    def with_fields(self, fields: Optional[Iterable[str]]) -> "QueryComposer":
        self.params = replace(self.params, fields=list(fields or ()))
        return self

    def with_sorts(self, sorts: Optional[Iterable[str]]) -> "QueryComposer":
        self.params = replace(self.params, sorts=list(sorts or ()))
        return self

    def with_search(self, search: Optional[str]) -> "QueryComposer":
        self.params = replace(self.params, search=search or None)
        return self

    def apply(self) -> Queryable:
        """
        :return: the composed Queryable
        :raises InvalidQuery: when a parameter isn't allowed for the resource
        """
        query = self.specification.base_query(self.params)
        for step in STEPS:
            query = step(self.specification, self.params, query)
        return query

    def get(self) -> List[Any]:
        return self.apply().execute()

    def paginate(self, per_page: Optional[int] = None, page: int = 1) -> Page:
        """
        :param per_page: page size, defaults to DEFAULT_PAGE_SIZE and is capped at MAX_PAGE_SIZE
        :param page: 1-based page number
        """
        if per_page is None:
            per_page = get_int_config("DEFAULT_PAGE_SIZE")
        per_page = min(max(per_page, 1), get_int_config("MAX_PAGE_SIZE"))
        return self.apply().paginate(per_page, page)

    def find_or_fail(self, object_id: Any) -> Any:
        return self.apply().find_or_fail(object_id, self.specification.primary_key)


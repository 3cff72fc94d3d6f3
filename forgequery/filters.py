"""
Filter input parsing and filter function factories

A filter function takes the Queryable and the raw request value and returns the filtered Queryable.
Empty values leave the Queryable unchanged.
"""
import re
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple, Union

import forgequery
from .errors import InvalidQuery
from .queryable import Queryable
from .constraints import satisfied_by

TRUTHY = ("1", "true", "yes", "on")
INTEGER_RE = re.compile(r"-?\d+", re.ASCII)


def parse_boolean_input(value: str) -> bool:
    """
    :param value: "1", "true", "yes", "on" (case insensitive) are True, anything else is False
    """
    return value.strip().lower() in TRUTHY


def parse_comma_separated_input(value: str, cast: Optional[Callable] = None) -> List[Union[int, str]]:
    """
    :param value: eg. "4, 7,12"
    :param cast: optional callable applied to every item, eg. `int`
    :return: the non-empty, stripped items
    """
    items = [item.strip() for item in value.split(",")]
    items = [item for item in items if item]
    if cast is not None:
        items = [cast(item) for item in items]
    return items


def parse_range_input(value: str) -> Optional[Tuple[str, str]]:
    """
    :param value: "start,end"
    :return: (start, end) or None when the value doesn't hold exactly two endpoints
    """
    endpoints = [item.strip() for item in value.split(",")]
    if len(endpoints) != 2 or not all(endpoints):
        return None
    return endpoints[0], endpoints[1]


def parse_datetime_input(value: str) -> datetime:
    """
    :param value: ISO 8601 date or datetime, eg. "2025-01-01" or "2025-01-01T12:00:00"
    """
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        raise InvalidQuery(f"Invalid date: {value}")


def _int_list(value: str) -> List[int]:
    items = parse_comma_separated_input(value)
    numbers = [int(item) for item in items if INTEGER_RE.fullmatch(item)]
    if len(numbers) != len(items):
        forgequery.log.debug(f"Ignoring non numeric values in '{value}'")
    return numbers


def in_filter(field: str, cast: Optional[Callable] = int):
    """
    Filter on a comma separated list of values

    :param field: filtered field
    :param cast: `int` (non numeric items are dropped), None keeps the strings
    """

    def apply(query: Queryable, value: Optional[str]) -> Queryable:
        if not value:
            return query
        values = _int_list(value) if cast is int else parse_comma_separated_input(value, cast)
        return query.where_in(field, values)

    return apply


def fuzzy_filter(field: str):
    """
    Substring match
    """

    def apply(query: Queryable, value: Optional[str]) -> Queryable:
        if not value:
            return query
        return query.where_like(field, value)

    return apply


def boolean_filter(field: str):
    def apply(query: Queryable, value: Optional[str]) -> Queryable:
        if not value:
            return query
        return query.where_equals(field, parse_boolean_input(value))

    return apply


def null_filter(field: str):
    """
    A true value keeps the rows where `field` is set, a false value the rows where it isn't
    """

    def apply(query: Queryable, value: Optional[str]) -> Queryable:
        if not value:
            return query
        if parse_boolean_input(value):
            return query.where_not_null(field)
        return query.where_null(field)

    return apply


def between_filter(field: str, cast: Optional[Callable] = None):
    """
    Filter on a "start,end" range, both endpoints are inclusive

    :param cast: optional callable applied to both endpoints
    """

    def apply(query: Queryable, value: Optional[str]) -> Queryable:
        if not value:
            return query
        endpoints = parse_range_input(value)
        if endpoints is None:
            forgequery.log.debug(f"Ignoring invalid range '{value}' for {field}")
            return query
        if cast is not None:
            endpoints = tuple(cast(endpoint) for endpoint in endpoints)
        return query.where_between(field, *endpoints)

    return apply


def date_between_filter(field: str):
    return between_filter(field, parse_datetime_input)


def semver_filter(field: str, load_versions: Callable[[], Sequence[str]]):
    """
    Filter on the versions that satisfy a constraint, eg. "^3.8.0"

    :param field: version field
    :param load_versions: returns the current valid versions, called on every use because the set grows over time
    """

    def apply(query: Queryable, value: Optional[str]) -> Queryable:
        if not value:
            return query
        return query.where_in(field, satisfied_by(load_versions(), value))

    return apply

"""
Request argument parsing

The query string of a resource request is parsed into QueryParams:
- filter[<name>]=<value>
- include=<name>,<name>
- fields=<name>,<name>
- sort=<name>,-<name>
- query=<search terms>
- page=<number>, per_page=<size>
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional
from flask import Request
from werkzeug.utils import cached_property
from .config import get_int_config

FILTER_ARG_RE = re.compile(r"^filter\[([^\]]*)\]$")


@dataclass(frozen=True)
class QueryParams:
    """
    The untrusted parameters of one query operation
    """

    filters: Dict[str, str] = field(default_factory=dict)
    includes: List[str] = field(default_factory=list)
    fields: List[str] = field(default_factory=list)
    sorts: List[str] = field(default_factory=list)
    search: Optional[str] = None

    def has_filter(self, name: str) -> bool:
        """
        :param name: filter name
        :return: whether the filter has been supplied with a value
        """
        return bool(self.filters.get(name))


def split_csv(value: Optional[str]) -> List[str]:
    """
    :param value: comma separated string
    :return: list of the (stripped) values, empty values are kept so the composer can drop them
    """
    if not value:
        return []
    return [item.strip() for item in value.split(",")]


def parse_query_args(args: Mapping[str, str]) -> QueryParams:
    """
    :param args: request arguments (eg. flask `request.args`)
    :return: QueryParams
    """
    filters = {}
    for arg, val in args.items():
        filter_attr = FILTER_ARG_RE.search(arg)
        if filter_attr:
            filters[filter_attr.group(1)] = val

    return QueryParams(
        filters=filters,
        includes=split_csv(args.get("include")),
        fields=split_csv(args.get("fields")),
        sorts=split_csv(args.get("sort")),
        search=args.get("query") or None,
    )


# pylint: disable=too-many-ancestors
class ForgeQueryRequest(Request):
    """
    Flask request class exposing the parsed query arguments
    """

    @cached_property
    def query_params(self) -> QueryParams:
        return parse_query_args(self.args)

    @property
    def page(self) -> int:
        """
        :return: the requested page number, 1-based
        """
        page = self.args.get("page", 1, type=int)
        return page if page > 0 else 1

    @property
    def per_page(self) -> int:
        """
        :return: the requested page size, clamped to [1, MAX_PAGE_SIZE]
        """
        per_page = self.args.get("per_page", get_int_config("DEFAULT_PAGE_SIZE"), type=int)
        return min(max(per_page, 1), get_int_config("MAX_PAGE_SIZE"))

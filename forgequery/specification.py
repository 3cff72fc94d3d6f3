"""
QuerySpecification: what a client may request from one resource type

A specification is plain configuration, the QueryComposer interprets it.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple, Union

from .queryable import Queryable
from .request import QueryParams
from .search import Searcher

FilterFn = Callable[[Queryable, Optional[str]], Queryable]
SortFn = Callable[[Queryable, str], Queryable]
BaseQueryFn = Callable[[QueryParams], Queryable]


def unique(values: Iterable[str]) -> Tuple[str, ...]:
    """
    :return: the values without duplicates, in their original order
    """
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True)
class FlatIncludes:
    """
    Includes whose public names are the relation paths
    """

    names: Tuple[str, ...] = ()

    def __contains__(self, name: str) -> bool:
        return name in self.names

    def expand(self, name: str) -> Tuple[str, ...]:
        return (name,)


@dataclass(frozen=True)
class ExpandingIncludes:
    """
    Includes mapping a public name to one or more relation paths,
    eg. {"dependencies": ("resolved_dependencies", "resolved_dependencies.mod")}
    """

    paths: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self.paths)

    def __contains__(self, name: str) -> bool:
        return name in self.paths

    def expand(self, name: str) -> Tuple[str, ...]:
        return self.paths[name]


Includes = Union[FlatIncludes, ExpandingIncludes]


def make_includes(includes: Any) -> Includes:
    """
    :param includes: a collection of names or a mapping of names to a path or a list of paths
    :return: the Includes variant
    """
    if isinstance(includes, (FlatIncludes, ExpandingIncludes)):
        return includes
    if isinstance(includes, Mapping):
        paths = {}
        for name, rel_paths in includes.items():
            paths[name] = (rel_paths,) if isinstance(rel_paths, str) else tuple(rel_paths)
        return ExpandingIncludes(paths)
    return FlatIncludes(unique(includes or ()))


@dataclass(frozen=True)
class QuerySpecification:
    """
    :param base_query: returns the starting Queryable, scoped to the resource visibility rules
    :param allowed_filters: filter name -> filter function
    :param allowed_includes: FlatIncludes, ExpandingIncludes or anything `make_includes` accepts
    :param allowed_fields: fields that can be selected
    :param required_fields: fields that are always selected, these are not validated
    :param dynamic_attributes: computed attribute -> the fields it is computed from
    :param allowed_sorts: fields that can be sorted on
    :param sort_overrides: sort name -> function replacing the single column ordering
    :param default_sorts: sort tokens used when the request has none
    :param searcher: search capability, None if the resource isn't searchable
    :param primary_key: identity field
    """

    base_query: BaseQueryFn
    allowed_filters: Mapping[str, FilterFn] = field(default_factory=dict)
    allowed_includes: Includes = field(default_factory=FlatIncludes)
    allowed_fields: Tuple[str, ...] = ()
    required_fields: Tuple[str, ...] = ()
    dynamic_attributes: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    allowed_sorts: Tuple[str, ...] = ()
    sort_overrides: Mapping[str, SortFn] = field(default_factory=dict)
    default_sorts: Tuple[str, ...] = ()
    searcher: Optional[Searcher] = None
    primary_key: str = "id"

    def __post_init__(self):
        # normalize the collections once, they're never re-inspected
        object.__setattr__(self, "allowed_includes", make_includes(self.allowed_includes))
        object.__setattr__(self, "allowed_fields", unique(self.allowed_fields))
        object.__setattr__(self, "required_fields", unique(self.required_fields))
        object.__setattr__(self, "allowed_sorts", unique(self.allowed_sorts))
        object.__setattr__(self, "default_sorts", tuple(self.default_sorts))
        object.__setattr__(
            self, "dynamic_attributes", {name: unique(deps) for name, deps in self.dynamic_attributes.items()}
        )

    @property
    def searchable(self) -> bool:
        return self.searcher is not None

# flake8: noqa: F401
#
# The query composition is independent of the bindings, applications can define their own
# QuerySpecification for any SQLAlchemy model
#
from .forgequery_init import DB, log, ForgeQuery, ForgeQueryRequest
from .errors import JsonapiError, ValidationError, GenericError, NotFoundError, InvalidQuery
from .request import QueryParams, parse_query_args
from .queryable import Queryable, Page, ASC, DESC
from .search import Searcher, ColumnSearcher
from .specification import QuerySpecification, FlatIncludes, ExpandingIncludes, make_includes
from .composer import QueryComposer
from .version import Version, InvalidVersionNumber
from .constraints import satisfied_by
from .bindings import (
    version_sort,
    mod_specification,
    mod_version_specification,
    spt_version_specification,
    addon_specification,
    addon_version_specification,
)
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    #
    "ForgeQuery",
    "ForgeQueryRequest",
    "DB",
    "log",
    # composition:
    "QueryComposer",
    "QuerySpecification",
    "QueryParams",
    "parse_query_args",
    "Queryable",
    "Page",
    "FlatIncludes",
    "ExpandingIncludes",
    "make_includes",
    # search:
    "Searcher",
    "ColumnSearcher",
    # versions:
    "Version",
    "InvalidVersionNumber",
    "satisfied_by",
    # bindings:
    "version_sort",
    "mod_specification",
    "mod_version_specification",
    "spt_version_specification",
    "addon_specification",
    "addon_version_specification",
    # Errors:
    "JsonapiError",
    "ValidationError",
    "GenericError",
    "NotFoundError",
    "InvalidQuery",
)

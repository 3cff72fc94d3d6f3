# -*- coding: utf-8 -*-
"""
    bindings.py: the query specifications of the API resources

    Every binding returns a new QuerySpecification, the specifications that depend on a parent
    resource (mod versions, addon versions) take the parent id.
"""
#
# pylint: disable=line-too-long
from typing import Optional, Sequence

from sqlalchemy import and_, not_

from .constraints import satisfied_by
from .errors import NotFoundError
from .filters import (
    boolean_filter,
    date_between_filter,
    fuzzy_filter,
    in_filter,
    null_filter,
    parse_boolean_input,
    semver_filter,
)
from .forgequery_init import DB as db
from .models import Addon, AddonVersion, Mod, ModVersion, SptVersion, utcnow
from .queryable import Queryable
from .request import QueryParams
from .search import ColumnSearcher
from .specification import QuerySpecification


def version_sort(prefix: str = "version"):
    """
    Semantic versions can't be ordered by their string, order by the stored components instead:
    major, minor, patch, releases before pre-releases, labels

    :param prefix: prefix of the component columns, eg. "version" -> version_major, ...
    """

    def apply(query: Queryable, direction: str) -> Queryable:
        return (
            query.order_by(f"{prefix}_major", direction)
            .order_by(f"{prefix}_minor", direction)
            .order_by(f"{prefix}_patch", direction)
            .order_by_empty_first(f"{prefix}_labels")
            .order_by(f"{prefix}_labels", direction)
        )

    return apply


def spt_version_criteria(compatible_versions: Optional[Sequence[str]] = None):
    """
    :param compatible_versions: optional SPT version strings the version must be compatible with
    :return: criteria for ModVersion: linked to at least one valid (compatible) SPT version
    """
    criteria = [SptVersion.version.is_not(None), SptVersion.version != "0.0.0"]
    if compatible_versions is not None:
        criteria.append(SptVersion.version.in_(list(compatible_versions)))
    return ModVersion.spt_versions.any(and_(*criteria))


def published_criteria(model: type):
    return and_(model.disabled.is_(False), model.published_at.is_not(None), model.published_at <= utcnow())


#
# Mods
#
MOD_FIELDS = (
    "id",
    "hub_id",
    "guid",
    "name",
    "slug",
    "teaser",
    "description",
    "thumbnail",
    "downloads",
    "source_code_link",
    "featured",
    "contains_ads",
    "contains_ai_content",
    "published_at",
    "created_at",
    "updated_at",
)

MOD_SORTS = ("id", "name", "slug", "downloads", "featured", "contains_ads", "contains_ai_content", "created_at", "updated_at", "published_at")


def mod_spt_condition(compatible_versions: Optional[Sequence[str]] = None):
    """
    :return: criteria for Mod: at least one enabled version compatible with a valid SPT version
    """
    return Mod.versions.any(and_(ModVersion.disabled.is_(False), spt_version_criteria(compatible_versions)))


def _mod_base_query(params: QueryParams) -> Queryable:
    query = Queryable.for_model(Mod).where(published_criteria(Mod))
    # the spt_version filter applies its own compatibility condition
    if not params.has_filter("spt_version"):
        query = query.where(mod_spt_condition())
    return query


def _mod_spt_version_filter(query: Queryable, value: Optional[str]) -> Queryable:
    if not value:
        return query
    compatible_versions = satisfied_by(SptVersion.all_valid_versions(), value)
    return query.where(mod_spt_condition(compatible_versions))


def _mod_fika_filter(query: Queryable, value: Optional[str]) -> Queryable:
    if not value:
        return query
    has_compatible_version = Mod.versions.any(and_(ModVersion.disabled.is_(False), ModVersion.fika_compatibility == "compatible"))
    if parse_boolean_input(value):
        return query.where(has_compatible_version)
    return query.where(not_(has_compatible_version))


def mod_specification() -> QuerySpecification:
    return QuerySpecification(
        base_query=_mod_base_query,
        allowed_filters={
            "id": in_filter("id"),
            "hub_id": in_filter("hub_id"),
            "guid": in_filter("guid", cast=None),
            "name": fuzzy_filter("name"),
            "slug": fuzzy_filter("slug"),
            "teaser": fuzzy_filter("teaser"),
            "source_code_link": fuzzy_filter("source_code_link"),
            "featured": boolean_filter("featured"),
            "contains_ads": boolean_filter("contains_ads"),
            "contains_ai_content": boolean_filter("contains_ai_content"),
            "created_between": date_between_filter("created_at"),
            "updated_between": date_between_filter("updated_at"),
            "published_between": date_between_filter("published_at"),
            "spt_version": _mod_spt_version_filter,
            "fika_compatibility": _mod_fika_filter,
        },
        allowed_includes=("owner", "authors", "versions", "license"),
        allowed_fields=MOD_FIELDS,
        required_fields=("id", "owner_id", "license_id"),
        dynamic_attributes={"detail_url": ("slug",)},
        allowed_sorts=MOD_SORTS,
        searcher=ColumnSearcher(Mod, ("name", "slug", "teaser")),
    )


#
# Mod versions
#
MOD_VERSION_FIELDS = (
    "id",
    "hub_id",
    "version",
    "description",
    "link",
    "content_length",
    "spt_version_constraint",
    "downloads",
    "fika_compatibility",
    "published_at",
    "created_at",
    "updated_at",
)


def mod_version_specification(mod_id: int) -> QuerySpecification:
    """
    :param mod_id: id of the mod whose versions are queried
    """

    def base_query(params: QueryParams) -> Queryable:
        has_visible_versions = (
            db.session.query(ModVersion.id)
            .filter(ModVersion.mod_id == mod_id, published_criteria(ModVersion), spt_version_criteria())
            .first()
        )
        if has_visible_versions is None:
            raise NotFoundError(f"Mod {mod_id} has no visible versions")

        query = Queryable.for_model(ModVersion).where(ModVersion.mod_id == mod_id, published_criteria(ModVersion))
        if not params.has_filter("spt_version"):
            query = query.where(spt_version_criteria())
        return query

    def spt_version_filter(query: Queryable, value: Optional[str]) -> Queryable:
        if not value:
            return query
        compatible_versions = satisfied_by(SptVersion.all_valid_versions(), value)
        return query.where(spt_version_criteria(compatible_versions))

    return QuerySpecification(
        base_query=base_query,
        allowed_filters={
            "id": in_filter("id"),
            "hub_id": in_filter("hub_id"),
            "version": semver_filter("version", lambda: ModVersion.version_numbers(mod_id)),
            "description": fuzzy_filter("description"),
            "link": fuzzy_filter("link"),
            "published_between": date_between_filter("published_at"),
            "created_between": date_between_filter("created_at"),
            "updated_between": date_between_filter("updated_at"),
            "spt_version": spt_version_filter,
            "fika_compatibility": in_filter("fika_compatibility", cast=None),
        },
        allowed_includes={
            "dependencies": ("resolved_dependencies", "resolved_dependencies.mod"),
            "virus_total_links": "virus_total_links",
        },
        allowed_fields=MOD_VERSION_FIELDS,
        required_fields=("id", "mod_id", "version"),
        allowed_sorts=("id", "hub_id", "version", "downloads", "published_at", "created_at", "updated_at"),
        sort_overrides={"version": version_sort()},
    )


#
# SPT versions
#
def _spt_version_base_query(params: QueryParams) -> Queryable:
    return Queryable.for_model(SptVersion).where(SptVersion.version != "0.0.0")


def spt_version_specification() -> QuerySpecification:
    return QuerySpecification(
        base_query=_spt_version_base_query,
        allowed_filters={
            "id": in_filter("id"),
            "spt_version": semver_filter("version", SptVersion.all_valid_versions),
            "created_between": date_between_filter("created_at"),
            "updated_between": date_between_filter("updated_at"),
        },
        allowed_fields=(
            "id",
            "version",
            "version_major",
            "version_minor",
            "version_patch",
            "version_labels",
            "mod_count",
            "link",
            "color_class",
            "created_at",
            "updated_at",
        ),
        required_fields=("id", "version"),
        allowed_sorts=("id", "version", "mod_count", "created_at", "updated_at"),
        sort_overrides={"version": version_sort()},
    )


#
# Addons
#
ADDON_FIELDS = (
    "name",
    "slug",
    "teaser",
    "description",
    "thumbnail",
    "downloads",
    "contains_ai_content",
    "contains_ads",
    "mod_id",
    "detached_at",
    "published_at",
    "created_at",
    "updated_at",
)


def _addon_base_query(params: QueryParams) -> Queryable:
    return Queryable.for_model(Addon).where(published_criteria(Addon))


def addon_specification() -> QuerySpecification:
    return QuerySpecification(
        base_query=_addon_base_query,
        allowed_filters={
            "id": in_filter("id"),
            "name": fuzzy_filter("name"),
            "slug": fuzzy_filter("slug"),
            "teaser": fuzzy_filter("teaser"),
            "mod_id": in_filter("mod_id"),
            "contains_ads": boolean_filter("contains_ads"),
            "contains_ai_content": boolean_filter("contains_ai_content"),
            "is_detached": null_filter("detached_at"),
            "created_between": date_between_filter("created_at"),
            "updated_between": date_between_filter("updated_at"),
            "published_between": date_between_filter("published_at"),
        },
        allowed_includes=("owner", "authors", "versions", "latest_version", "license", "mod", "source_code_links"),
        allowed_fields=ADDON_FIELDS,
        required_fields=("id", "owner_id", "license_id", "mod_id"),
        dynamic_attributes={"detail_url": ("slug",), "is_detached": ("detached_at",)},
        allowed_sorts=("name", "downloads", "created_at", "updated_at", "published_at"),
        default_sorts=("-created_at",),
    )


#
# Addon versions
#
def addon_version_specification(addon_id: int) -> QuerySpecification:
    """
    :param addon_id: id of the addon whose versions are queried
    """

    def base_query(params: QueryParams) -> Queryable:
        has_published_versions = (
            db.session.query(AddonVersion.id).filter(AddonVersion.addon_id == addon_id, published_criteria(AddonVersion)).first()
        )
        if has_published_versions is None:
            raise NotFoundError(f"Addon {addon_id} has no published versions")

        parent_mod_is_visible = (
            db.session.query(ModVersion.id)
            .join(Addon, Addon.mod_id == ModVersion.mod_id)
            .filter(Addon.id == addon_id, published_criteria(ModVersion), spt_version_criteria())
            .first()
        )
        if parent_mod_is_visible is None:
            raise NotFoundError(f"The mod of addon {addon_id} has no visible versions")

        return Queryable.for_model(AddonVersion).where(AddonVersion.addon_id == addon_id, published_criteria(AddonVersion))

    return QuerySpecification(
        base_query=base_query,
        allowed_filters={
            "id": in_filter("id"),
            "version": semver_filter("version", lambda: AddonVersion.version_numbers(addon_id)),
            "description": fuzzy_filter("description"),
            "link": fuzzy_filter("link"),
            "published_between": date_between_filter("published_at"),
            "created_between": date_between_filter("created_at"),
            "updated_between": date_between_filter("updated_at"),
        },
        allowed_includes=("virus_total_links",),
        allowed_fields=(
            "id",
            "version",
            "description",
            "link",
            "content_length",
            "mod_version_constraint",
            "downloads",
            "published_at",
            "created_at",
            "updated_at",
        ),
        required_fields=("id", "addon_id", "version"),
        allowed_sorts=("id", "version", "downloads", "published_at", "created_at", "updated_at"),
        sort_overrides={"version": version_sort()},
    )

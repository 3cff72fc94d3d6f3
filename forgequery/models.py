# -*- coding: utf-8 -*-
"""
    models.py: SQLAlchemy models of the mod hosting resources exposed by the query bindings
"""
#
# pylint: disable=too-few-public-methods
import datetime
from typing import List
from sqlalchemy import and_, case, func, select
from sqlalchemy.orm import aliased, validates
from .forgequery_init import DB as db
from .version import Version


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


mod_authors = db.Table(
    "mod_authors",
    db.Column("mod_id", db.Integer, db.ForeignKey("mods.id"), primary_key=True),
    db.Column("user_id", db.Integer, db.ForeignKey("users.id"), primary_key=True),
)

addon_authors = db.Table(
    "addon_authors",
    db.Column("addon_id", db.Integer, db.ForeignKey("addons.id"), primary_key=True),
    db.Column("user_id", db.Integer, db.ForeignKey("users.id"), primary_key=True),
)

mod_version_spt_version = db.Table(
    "mod_version_spt_version",
    db.Column("mod_version_id", db.Integer, db.ForeignKey("mod_versions.id"), primary_key=True),
    db.Column("spt_version_id", db.Integer, db.ForeignKey("spt_versions.id"), primary_key=True),
)

mod_resolved_dependencies = db.Table(
    "mod_resolved_dependencies",
    db.Column("mod_version_id", db.Integer, db.ForeignKey("mod_versions.id"), primary_key=True),
    db.Column("resolved_mod_version_id", db.Integer, db.ForeignKey("mod_versions.id"), primary_key=True),
)


class VersionedMixin:
    """
    Keeps the version components in sync with the version string
    """

    version = db.Column(db.String(64), nullable=False, default="0.0.0")
    version_major = db.Column(db.Integer, nullable=False, default=0)
    version_minor = db.Column(db.Integer, nullable=False, default=0)
    version_patch = db.Column(db.Integer, nullable=False, default=0)
    version_labels = db.Column(db.String(64), nullable=False, default="")

    @validates("version")
    def _set_version_components(self, key, value):
        parsed = Version.parse(value)
        self.version_major, self.version_minor, self.version_patch, self.version_labels = parsed
        return value


class TimestampMixin:
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class User(db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=True)


class License(db.Model):
    __tablename__ = "licenses"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    short_name = db.Column(db.String(64), nullable=False, default="")
    link = db.Column(db.String(255), nullable=False, default="")


class SptVersion(VersionedMixin, TimestampMixin, db.Model):
    __tablename__ = "spt_versions"
    id = db.Column(db.Integer, primary_key=True)
    mod_count = db.Column(db.Integer, nullable=False, default=0)
    link = db.Column(db.String(255), nullable=False, default="")
    color_class = db.Column(db.String(64), nullable=False, default="")

    @classmethod
    def all_valid_versions(cls) -> List[str]:
        """
        :return: the version strings of all SPT versions except the 0.0.0 placeholder, newest first
        """
        query = (
            db.session.query(cls.version)
            .filter(cls.version.is_not(None), cls.version != "0.0.0")
            .order_by(
                cls.version_major.desc(),
                cls.version_minor.desc(),
                cls.version_patch.desc(),
                case((cls.version_labels == "", 0), else_=1),
                cls.version_labels,
            )
        )
        return [row[0] for row in query.all()]


class Mod(TimestampMixin, db.Model):
    __tablename__ = "mods"
    id = db.Column(db.Integer, primary_key=True)
    hub_id = db.Column(db.Integer, nullable=True, unique=True)
    guid = db.Column(db.String(255), nullable=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    license_id = db.Column(db.Integer, db.ForeignKey("licenses.id"), nullable=True)
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), nullable=False)
    teaser = db.Column(db.String(255), nullable=False, default="")
    description = db.Column(db.Text, nullable=False, default="")
    thumbnail = db.Column(db.String(255), nullable=False, default="")
    downloads = db.Column(db.Integer, nullable=False, default=0)
    source_code_link = db.Column(db.String(255), nullable=False, default="")
    featured = db.Column(db.Boolean, nullable=False, default=False)
    contains_ads = db.Column(db.Boolean, nullable=False, default=False)
    contains_ai_content = db.Column(db.Boolean, nullable=False, default=False)
    disabled = db.Column(db.Boolean, nullable=False, default=False)
    published_at = db.Column(db.DateTime, nullable=True)

    owner = db.relationship("User", foreign_keys=[owner_id])
    authors = db.relationship("User", secondary=mod_authors)
    license = db.relationship("License")
    versions = db.relationship("ModVersion", back_populates="mod", order_by="ModVersion.id")

    @property
    def detail_url(self) -> str:
        return f"/mods/{self.id}/{self.slug}"


class ModVersion(VersionedMixin, TimestampMixin, db.Model):
    __tablename__ = "mod_versions"
    id = db.Column(db.Integer, primary_key=True)
    mod_id = db.Column(db.Integer, db.ForeignKey("mods.id"), nullable=False)
    hub_id = db.Column(db.Integer, nullable=True)
    description = db.Column(db.Text, nullable=False, default="")
    link = db.Column(db.String(255), nullable=False, default="")
    content_length = db.Column(db.Integer, nullable=True)
    spt_version_constraint = db.Column(db.String(64), nullable=False, default="")
    downloads = db.Column(db.Integer, nullable=False, default=0)
    fika_compatibility = db.Column(db.String(16), nullable=False, default="unknown")
    disabled = db.Column(db.Boolean, nullable=False, default=False)
    published_at = db.Column(db.DateTime, nullable=True)

    mod = db.relationship("Mod", back_populates="versions")
    spt_versions = db.relationship("SptVersion", secondary=mod_version_spt_version)
    resolved_dependencies = db.relationship(
        "ModVersion",
        secondary=mod_resolved_dependencies,
        primaryjoin=id == mod_resolved_dependencies.c.mod_version_id,
        secondaryjoin=id == mod_resolved_dependencies.c.resolved_mod_version_id,
    )
    virus_total_links = db.relationship("VirusTotalLink", back_populates="mod_version")

    @classmethod
    def version_numbers(cls, mod_id: int) -> List[str]:
        """
        :return: the version strings of the mod, 0.0.0 placeholders excluded
        """
        query = db.session.query(cls.version).filter(cls.mod_id == mod_id, cls.version.is_not(None), cls.version != "0.0.0")
        return [row[0] for row in query.all()]


class VirusTotalLink(db.Model):
    __tablename__ = "virus_total_links"
    id = db.Column(db.Integer, primary_key=True)
    mod_version_id = db.Column(db.Integer, db.ForeignKey("mod_versions.id"), nullable=True)
    addon_version_id = db.Column(db.Integer, db.ForeignKey("addon_versions.id"), nullable=True)
    url = db.Column(db.String(255), nullable=False)
    label = db.Column(db.String(255), nullable=False, default="")

    mod_version = db.relationship("ModVersion", back_populates="virus_total_links")
    addon_version = db.relationship("AddonVersion", back_populates="virus_total_links")


class Addon(TimestampMixin, db.Model):
    __tablename__ = "addons"
    id = db.Column(db.Integer, primary_key=True)
    mod_id = db.Column(db.Integer, db.ForeignKey("mods.id"), nullable=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    license_id = db.Column(db.Integer, db.ForeignKey("licenses.id"), nullable=True)
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), nullable=False)
    teaser = db.Column(db.String(255), nullable=False, default="")
    description = db.Column(db.Text, nullable=False, default="")
    thumbnail = db.Column(db.String(255), nullable=False, default="")
    downloads = db.Column(db.Integer, nullable=False, default=0)
    contains_ads = db.Column(db.Boolean, nullable=False, default=False)
    contains_ai_content = db.Column(db.Boolean, nullable=False, default=False)
    disabled = db.Column(db.Boolean, nullable=False, default=False)
    detached_at = db.Column(db.DateTime, nullable=True)
    published_at = db.Column(db.DateTime, nullable=True)

    mod = db.relationship("Mod")
    owner = db.relationship("User", foreign_keys=[owner_id])
    authors = db.relationship("User", secondary=addon_authors)
    license = db.relationship("License")
    versions = db.relationship("AddonVersion", back_populates="addon", order_by="AddonVersion.id")
    source_code_links = db.relationship(
        "SourceCodeLink",
        back_populates="addon",
        order_by=lambda: func.coalesce(func.nullif(SourceCodeLink.label, ""), SourceCodeLink.url),
    )

    @property
    def detail_url(self) -> str:
        return f"/addons/{self.id}/{self.slug}"

    @property
    def is_detached(self) -> bool:
        return self.detached_at is not None


class AddonVersion(VersionedMixin, TimestampMixin, db.Model):
    __tablename__ = "addon_versions"
    id = db.Column(db.Integer, primary_key=True)
    addon_id = db.Column(db.Integer, db.ForeignKey("addons.id"), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    link = db.Column(db.String(255), nullable=False, default="")
    content_length = db.Column(db.Integer, nullable=True)
    mod_version_constraint = db.Column(db.String(64), nullable=False, default="")
    downloads = db.Column(db.Integer, nullable=False, default=0)
    disabled = db.Column(db.Boolean, nullable=False, default=False)
    published_at = db.Column(db.DateTime, nullable=True)

    addon = db.relationship("Addon", back_populates="versions")
    virus_total_links = db.relationship("VirusTotalLink", back_populates="addon_version")

    @classmethod
    def version_numbers(cls, addon_id: int) -> List[str]:
        query = db.session.query(cls.version).filter(cls.addon_id == addon_id, cls.version.is_not(None))
        return [row[0] for row in query.all()]


class SourceCodeLink(db.Model):
    __tablename__ = "source_code_links"
    id = db.Column(db.Integer, primary_key=True)
    addon_id = db.Column(db.Integer, db.ForeignKey("addons.id"), nullable=False)
    url = db.Column(db.String(255), nullable=False)
    label = db.Column(db.String(255), nullable=False, default="")

    addon = db.relationship("Addon", back_populates="source_code_links")


def _latest_addon_version_id():
    """
    :return: correlated subquery selecting the id of the newest enabled, published version of an addon
    """
    candidate = aliased(AddonVersion)
    return (
        select(candidate.id)
        .where(candidate.addon_id == Addon.id, candidate.disabled.is_(False), candidate.published_at.is_not(None))
        .order_by(
            candidate.version_major.desc(),
            candidate.version_minor.desc(),
            candidate.version_patch.desc(),
            case((candidate.version_labels == "", 0), else_=1),
            candidate.version_labels,
        )
        .limit(1)
        .correlate(Addon)
        .scalar_subquery()
    )


Addon.latest_version = db.relationship(
    AddonVersion,
    primaryjoin=and_(AddonVersion.addon_id == Addon.id, AddonVersion.id == _latest_addon_version_id()),
    uselist=False,
    viewonly=True,
)

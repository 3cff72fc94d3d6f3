import datetime
from types import SimpleNamespace

import pytest
from flask import Flask

from forgequery import DB, ForgeQuery
from forgequery.models import (
    Addon,
    AddonVersion,
    License,
    Mod,
    ModVersion,
    SourceCodeLink,
    SptVersion,
    User,
    VirusTotalLink,
    utcnow,
)


@pytest.fixture
def app():
    app = Flask("forgequery_tests")
    app.config.update(SQLALCHEMY_DATABASE_URI="sqlite://", TESTING=True)
    ForgeQuery(app)
    with app.app_context():
        DB.create_all()
        yield app
        DB.session.remove()
        DB.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _days_ago(days: int) -> datetime.datetime:
    return utcnow() - datetime.timedelta(days=days)


@pytest.fixture
def hub(app):
    """
    A small hub:
    - "Raid Overhaul": featured, compatible with SPT 3.8.0, eight versions
    - "Better Ammo": teaser mentions raids, fika compatible, SPT 3.9.0
    - "Old Timer": only compatible with SPT 3.7.6
    - "Hidden" (disabled), "Draft" (unpublished), "Placeholder" (only the 0.0.0 SPT version): never visible
    """
    owner = User(name="Refringe")
    mit = License(name="MIT License", short_name="MIT")
    spt = {version: SptVersion(version=version, mod_count=0) for version in ("3.7.6", "3.8.0", "3.8.3", "3.9.0", "0.0.0")}
    DB.session.add_all([owner, mit, *spt.values()])

    def mod(name, slug, teaser="", spt_version="3.8.0", versions=("1.0.0",), **kwargs):
        kwargs.setdefault("published_at", _days_ago(1))
        instance = Mod(name=name, slug=slug, teaser=teaser, owner=owner, license=mit, **kwargs)
        instance.versions = [
            ModVersion(version=version, published_at=_days_ago(1), spt_versions=[spt[spt_version]])
            for version in versions
        ]
        DB.session.add(instance)
        return instance

    raid = mod(
        "Raid Overhaul",
        "raid-overhaul",
        teaser="Reworks the raids",
        featured=True,
        downloads=500,
        versions=("1.1.0", "2.0.0", "1.0.0", "1.1.0-beta", "1.2.1", "1.1.0-alpha", "1.2.0", "1.1.1"),
    )
    ammo = mod("Better Ammo", "better-ammo", teaser="raid ready ammo", spt_version="3.9.0", downloads=100)
    ammo.versions[0].fika_compatibility = "compatible"
    old = mod("Old Timer", "old-timer", spt_version="3.7.6", downloads=50)
    mod("Hidden", "hidden", disabled=True)
    mod("Draft", "draft", published_at=None)
    placeholder = mod("Placeholder", "placeholder", spt_version="0.0.0")

    dependency = raid.versions[1]
    ammo.versions[0].resolved_dependencies = [dependency]
    ammo.versions[0].virus_total_links = [VirusTotalLink(url="https://www.virustotal.com/gui/file/abc", label="ammo.7z")]

    early = Addon(name="Raid Maps", slug="raid-maps", mod=raid, owner=owner, license=mit, published_at=_days_ago(3), created_at=_days_ago(3))
    late = Addon(
        name="Raid Sounds",
        slug="raid-sounds",
        mod=raid,
        owner=owner,
        license=mit,
        published_at=_days_ago(2),
        created_at=_days_ago(2),
        detached_at=_days_ago(1),
    )
    hidden_addon = Addon(name="Hidden Addon", slug="hidden-addon", mod=raid, owner=owner, license=mit, disabled=True, published_at=_days_ago(1))
    early.versions = [AddonVersion(version=version, published_at=_days_ago(1)) for version in ("1.0.0", "1.10.0", "1.2.0")]
    early.versions[0].virus_total_links = [VirusTotalLink(url="https://www.virustotal.com/gui/file/def", label="maps.7z")]
    early.source_code_links = [SourceCodeLink(url="https://github.com/hub/raid-maps"), SourceCodeLink(url="https://gitlab.com/hub/raid-maps", label="Mirror")]
    orphan = Addon(name="Orphan", slug="orphan", mod=placeholder, owner=owner, license=mit, published_at=_days_ago(1))
    orphan.versions = [AddonVersion(version="1.0.0", published_at=_days_ago(1))]
    DB.session.add_all([early, late, hidden_addon, orphan])
    DB.session.commit()

    return SimpleNamespace(
        owner=owner,
        spt=spt,
        raid=raid,
        ammo=ammo,
        old=old,
        placeholder=placeholder,
        early_addon=early,
        late_addon=late,
        orphan_addon=orphan,
    )

"""
Semantic version numbers

Versions are stored with their components (major, minor, patch, labels) next to the version
string so they can be ordered in the database, a version string can't be sorted as text.
"""
from typing import NamedTuple

import semver


class InvalidVersionNumber(ValueError):
    pass


class Version(NamedTuple):
    major: int
    minor: int
    patch: int
    labels: str = ""

    @classmethod
    def parse(cls, version: str) -> "Version":
        """
        :param version: semantic version, a leading "v" is ignored, eg. "v1.2.3-beta.1+build5"
        :return: Version, the labels hold the pre-release and build metadata, eg. "-beta.1+build5"
        :raises InvalidVersionNumber: if the version isn't a valid semantic version
        """
        try:
            parsed = semver.Version.parse(str(version).strip().lstrip("v"))
        except (TypeError, ValueError):
            raise InvalidVersionNumber(f"Invalid SemVer: {version}")

        labels = ""
        if parsed.prerelease:
            labels += f"-{parsed.prerelease}"
        if parsed.build:
            labels += f"+{parsed.build}"
        return cls(parsed.major, parsed.minor, parsed.patch, labels)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}{self.labels}"

import pytest

from forgequery.constraints import normalize_constraint, satisfied_by

VERSIONS = ["3.7.6", "3.8.0", "3.8.3", "3.9.0-beta", "3.9.0", "3.10.1", "4.0.0"]


@pytest.mark.parametrize(
    "constraint, expected",
    [
        ("^3.8.0", ["3.8.0", "3.8.3", "3.9.0", "3.10.1"]),
        ("~3.8.0", ["3.8.0", "3.8.3"]),
        ("3.8.3", ["3.8.3"]),
        (">=3.9.0", ["3.9.0", "3.10.1", "4.0.0"]),
        ("<3.8.0", ["3.7.6"]),
        (">=3.8.0 <3.9.0", ["3.8.0", "3.8.3"]),
        (">=3.8.0, <3.9.0", ["3.8.0", "3.8.3"]),
        ("3.8.0 - 3.9.0", ["3.8.0", "3.8.3", "3.9.0"]),
        ("3.8.x", ["3.8.0", "3.8.3"]),
        ("~3.7.0 || ^4.0.0", ["3.7.6", "4.0.0"]),
    ],
)
def test_satisfied_by(constraint: str, expected: list) -> None:
    assert satisfied_by(VERSIONS, constraint) == expected


def test_input_order_is_kept() -> None:
    assert satisfied_by(["3.9.0", "3.8.0", "3.8.3"], "^3.8.0") == ["3.9.0", "3.8.0", "3.8.3"]


def test_invalid_versions_are_skipped() -> None:
    assert satisfied_by(["3.8.0", "not-a-version", "3.8.1"], "~3.8.0") == ["3.8.0", "3.8.1"]


def test_empty_constraint_matches_nothing() -> None:
    assert satisfied_by(VERSIONS, "  ") == []


def test_normalize_constraint() -> None:
    assert normalize_constraint(" >=3.8.0 , <3.9.0 ") == ">=3.8.0 <3.9.0"


def test_pre_releases_only_match_constraints_on_the_same_version() -> None:
    versions = ["3.8.0", "3.9.0-beta", "3.9.0"]

    assert satisfied_by(versions, "^3.8.0") == ["3.8.0", "3.9.0"]
    assert satisfied_by(versions, ">=3.9.0-beta") == ["3.9.0-beta", "3.9.0"]

"""
Version constraint resolution

Constraints use the npm range syntax as implemented by node-semver:
    ^3.8.0, ~3.9.0, >=3.8.0 <3.10.0, 3.8.0 - 3.9.2, 3.8.x, ^3.8.0 || ^3.10.0
Commas are accepted as an alternative to spaces to combine comparators ("AND").
"""
import re
from typing import List, Sequence

import nodesemver

import forgequery

COMMA_RE = re.compile(r"\s*,\s*")


def normalize_constraint(constraint: str) -> str:
    return COMMA_RE.sub(" ", constraint.strip())


def satisfied_by(versions: Sequence[str], constraint: str) -> List[str]:
    """
    :param versions: version strings
    :param constraint: range expression
    :return: the versions that satisfy the constraint, in their original order
    """
    constraint = normalize_constraint(constraint)
    if not constraint:
        return []

    result = []
    for version in versions:
        try:
            if nodesemver.satisfies(version, constraint, loose=True):
                result.append(version)
        except ValueError:
            forgequery.log.debug(f"Skipping invalid version '{version}'")
    return result

"""
Package identifier parsing and validation

Identifiers are "name@version" strings. The name may itself contain '@'
(scoped packages such as "@scope/name"), so the version is always taken
from the text after the last '@'.
"""

import re
from typing import Iterable, List, Tuple

from .errors import InvalidPackageError
from .models import PackageIdentifier


# name, '@', then major, major.minor or major.minor.patch
IDENTIFIER_PATTERN = re.compile(r'^.+@[0-9]+(\.[0-9]+){0,2}$')


def split_identifier(raw: str) -> Tuple[str, str]:
    """
    Split an identifier into name and version at the last '@'

    Args:
        raw: Identifier string (e.g., "@scope/malware@1.0.0")

    Returns:
        Tuple of (name, version); version is empty when there is no '@'
    """
    index = raw.rfind('@')
    if index == -1:
        return raw, ''
    return raw[:index], raw[index + 1:]


def parse_identifier(raw: str) -> PackageIdentifier:
    """
    Validate and parse a single identifier

    Raises:
        InvalidPackageError: if raw does not look like name@version
    """
    if not isinstance(raw, str) or not IDENTIFIER_PATTERN.fullmatch(raw):
        raise InvalidPackageError(raw)

    name, version = split_identifier(raw)
    return PackageIdentifier(raw=raw, name=name, version=version)


def validate_packages(packages: Iterable[str]) -> List[PackageIdentifier]:
    """
    Validate a configured package list, all or nothing

    The first malformed entry aborts validation; a corrupted list is never
    partially scanned.

    Args:
        packages: Raw identifier strings from the config or the remote feed

    Returns:
        Parsed identifiers in input order

    Raises:
        InvalidPackageError: on the first malformed entry
    """
    if isinstance(packages, (str, bytes)) or not isinstance(packages, (list, tuple)):
        raise InvalidPackageError(
            packages, f"Invalid packages list: expected an array of strings, got {packages!r}")

    return [parse_identifier(raw) for raw in packages]

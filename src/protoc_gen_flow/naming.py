"""Qualified names for generated types.

A qualified name is the nesting path of a declaration joined with ``$``,
optionally prefixed by its package (dots also replaced by ``$``)::

    shop.Order.Status -> Order$Status          (default)
    shop.Order.Status -> shop$Order$Status     (package_prefix)
"""

from __future__ import annotations

from typing import List

NESTING_DELIMITER = "$"


def namespace_for(package: str, package_prefix: bool = False) -> str:
    """Return the prefix under which top-level declarations of a file live."""
    if not package_prefix or not package:
        return ""
    return package.replace(".", NESTING_DELIMITER) + NESTING_DELIMITER


def nested_namespace(qualified_name: str) -> str:
    return qualified_name + NESTING_DELIMITER


def qualified_name(package: str, path: List[str], package_prefix: bool = False) -> str:
    return namespace_for(package, package_prefix) + NESTING_DELIMITER.join(path)

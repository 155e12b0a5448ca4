"""
Functions used to validate and load work items
"""

import re
from pathlib import Path
from typing import Iterable, List

from configs.constants import Constants

IDENTIFIER_RE = re.compile(Constants.IDENTIFIER_PATTERN)


def is_valid_identifier(item: str) -> bool:
    """Checks an identifier before any request is made for it.

    Args:
        item (str): Identifier such as ``"bulbasaur"`` or ``"mr-mime"``.

    Returns:
        bool: True when the identifier only has lowercase letters and hyphens
        and is at least three characters long.
    """
    return isinstance(item, str) and IDENTIFIER_RE.fullmatch(item) is not None


def dedupe(items: Iterable[str]) -> List[str]:
    """Drops repeated identifiers, keeping the first occurrence."""
    seen = set()
    unique = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def read_items_file(path: Path) -> List[str]:
    """Reads one identifier per line, skipping blank lines and ``#`` comments.

    Args:
        path (Path): Text file with identifiers.

    Returns:
        list: Identifiers in file order.
    """
    items = []
    with open(path, encoding="utf-8") as fh:
        for line in fh:
            line = line.split("#", 1)[0].strip()
            if line:
                items.append(line)
    return items

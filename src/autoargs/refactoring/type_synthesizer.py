"""Type reference synthesis from display strings."""

from __future__ import annotations

import logging

from autoargs.syntax.parser import parse_type_name
from autoargs.syntax.tree import GreenElement

logger = logging.getLogger(__name__)


def create_type_syntax(type_name: str) -> GreenElement | None:
    """Build a type reference node for ``type_name``.

    The name is parsed as the operand of ``typeof(...)`` and the type
    subtree is returned without surrounding trivia, ready to be spliced into
    generated code.

    Args:
        type_name: Display string of a type, e.g. ``Dictionary<string, int>``.

    Returns:
        The type subtree, or None if the name does not parse as a type.
    """
    try:
        type_syntax = parse_type_name(type_name)
    except Exception as e:
        logger.debug(f"Failed to parse type name {type_name!r}: {e}")
        return None
    if type_syntax is None:
        logger.debug(f"Type name {type_name!r} is not a valid type")
    return type_syntax

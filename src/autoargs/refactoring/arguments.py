"""Placeholder argument lists.

Each placeholder is a call to the mocking library's match-any helper,
``Arg.Any<T>()`` with the default configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from autoargs.core.config import AutoArgsConfig, get_config
from autoargs.refactoring.type_synthesizer import create_type_syntax
from autoargs.syntax import factory
from autoargs.syntax.tree import GreenElement, GreenNode

logger = logging.getLogger(__name__)


def create_arg_any(type_syntax: GreenElement, config: AutoArgsConfig | None = None) -> GreenNode:
    """Build the argument ``Arg.Any<T>()`` for the type reference ``type_syntax``."""
    config = config or get_config()
    matcher = factory.member_access_expression(
        factory.identifier(config.matcher_type_name),
        factory.generic_name(config.matcher_method_name, [type_syntax]),
    )
    return factory.argument(factory.invocation_expression(matcher))


def create_args_any(
    type_names: Iterable[str], config: AutoArgsConfig | None = None
) -> GreenNode:
    """Build an argument list with one placeholder per parameter type.

    Type names that cannot be turned into a type reference are left out, so
    the list may be shorter than ``type_names``.

    Args:
        type_names: Parameter type display strings in declaration order.
        config: Configuration; defaults to the global one.

    Returns:
        A green ``argument_list`` node.
    """
    config = config or get_config()
    arguments: list[GreenElement] = []
    for type_name in type_names:
        type_syntax = create_type_syntax(type_name)
        if type_syntax is None:
            logger.debug(f"Dropping parameter of unparsable type {type_name!r}")
            continue
        arguments.append(create_arg_any(type_syntax, config))
    return factory.argument_list(arguments)

"""Parsing and resolution of @event attribute lists."""

import ast
from collections.abc import Callable, Iterable
from typing import Any

from eventglue.config import settings
from eventglue.exceptions import (
    ConflictingHandlerKindError,
    InvalidAttributeError,
    MissingHandlerKindError,
    UnsupportedModifierError,
)
from eventglue.logging.config import get_logger
from eventglue.models.handler import HandlerConfig, HandlerKind

logger = get_logger(__name__)

ATTRIBUTE_NAME = "event"
PACKAGE_NAME = "eventglue"
RESPOND_WITH_ERRORS = "respond_with_errors"

_KIND_TOKENS = {kind.value: kind for kind in HandlerKind}


class AttributeToken(str):
    """A token usable inside @event(...) at runtime."""

    def __repr__(self) -> str:
        return str(self)


def resolve_attributes(
    tokens: Iterable[str], strict: bool | None = None
) -> HandlerConfig:
    """
    Fold @event tokens into a HandlerConfig.

    Args:
        tokens: Attribute arguments, in the order written
        strict: Reject conflicting kinds and scheduled + respond_with_errors;
            defaults to EVENTGLUE_STRICT_ATTRIBUTES

    Returns:
        Fully resolved HandlerConfig

    Raises:
        InvalidAttributeError: For any token outside the grammar
        MissingHandlerKindError: If neither fetch nor scheduled was given
        ConflictingHandlerKindError: Strict mode, both kinds given
        UnsupportedModifierError: Strict mode, respond_with_errors on scheduled
    """
    if strict is None:
        strict = settings.strict_attributes

    kind: HandlerKind | None = None
    respond_with_errors = False

    for token in tokens:
        if token in _KIND_TOKENS:
            selected = _KIND_TOKENS[token]
            if kind is not None and kind is not selected:
                if strict:
                    raise ConflictingHandlerKindError(kind.value, selected.value)
                logger.warning(
                    "Conflicting handler kinds, last one wins",
                    extra={"context": {"kinds": [kind.value, selected.value]}},
                )
            kind = selected
        elif token == RESPOND_WITH_ERRORS:
            respond_with_errors = True
        else:
            raise InvalidAttributeError(token)

    if kind is None:
        raise MissingHandlerKindError()

    if respond_with_errors and not kind.has_error_policy:
        if strict:
            raise UnsupportedModifierError(RESPOND_WITH_ERRORS, kind.value)
        logger.warning(
            "Modifier ignored",
            extra={"context": {"modifier": RESPOND_WITH_ERRORS, "kind": kind.value}},
        )

    return HandlerConfig(kind=kind, respond_with_errors=respond_with_errors)


def is_event_decorator(node: ast.expr) -> bool:
    """
    Check whether a decorator expression is @event or @event(...).

    Only ``event`` and ``eventglue.event`` are recognised so that other
    libraries' ``.event`` decorators are left alone.
    """
    if isinstance(node, ast.Call):
        node = node.func
    if isinstance(node, ast.Name):
        return node.id == ATTRIBUTE_NAME
    if isinstance(node, ast.Attribute):
        return (
            node.attr == ATTRIBUTE_NAME
            and isinstance(node.value, ast.Name)
            and node.value.id == PACKAGE_NAME
        )
    return False


def attribute_tokens(decorator: ast.expr) -> list[str]:
    """
    Extract the token list from an @event decorator.

    Args:
        decorator: A decorator for which is_event_decorator() is true

    Returns:
        Token strings in source order; empty for a bare @event

    Raises:
        InvalidAttributeError: For keyword, starred or other non-token arguments
    """
    if not isinstance(decorator, ast.Call):
        return []

    if decorator.keywords:
        raise InvalidAttributeError(ast.unparse(decorator.keywords[0]))

    return [_token(arg) for arg in decorator.args]


def _token(node: ast.expr) -> str:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    raise InvalidAttributeError(ast.unparse(node))


def event(*tokens: Any) -> Callable[[Callable], Callable]:
    """
    Mark a handler for transformation.

    The decorator only validates its arguments and records the resolved
    configuration on the function as ``__event_config__``. The adapter
    itself is generated when the module is compiled with ``eventglue
    transform`` or loaded through ``eventglue.host.loader``.

    Example:
        @event(fetch, respond_with_errors)
        async def main(req, env, ctx):
            return Response.ok("hello")
    """
    config = resolve_attributes(
        [token if isinstance(token, str) else repr(token) for token in tokens]
    )

    def decorator(function: Callable) -> Callable:
        function.__event_config__ = config
        return function

    return decorator


fetch = AttributeToken(HandlerKind.FETCH.value)
scheduled = AttributeToken(HandlerKind.SCHEDULED.value)
respond_with_errors = AttributeToken(RESPOND_WITH_ERRORS)

"""Renaming of the user's handler out of its public slot."""

import ast

from eventglue.models.handler import HandlerKind

FunctionNode = ast.FunctionDef | ast.AsyncFunctionDef


def relocated_name(name: str, kind: HandlerKind) -> str:
    """Return the internal name a handler is moved to."""
    return name + kind.glue_suffix


def relocate_function(function: FunctionNode, kind: HandlerKind) -> str:
    """
    Rename the user's function in place.

    Only ``name`` changes; the node keeps its line and column numbers so
    diagnostics and tracebacks still point at the user's definition.

    Args:
        function: The decorated function definition
        kind: Selected handler kind

    Returns:
        The new identifier, e.g. ``main_fetch_glue``
    """
    new_name = relocated_name(function.name, kind)
    function.name = new_name
    return new_name

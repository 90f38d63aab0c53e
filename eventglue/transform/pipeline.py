"""Module-level driver for the @event transformation."""

import ast
from collections.abc import Iterable
from types import CodeType

from eventglue.exceptions import (
    DuplicateExportError,
    InvalidHandlerError,
    TransformError,
)
from eventglue.logging.config import get_logger
from eventglue.transform.attributes import (
    attribute_tokens,
    is_event_decorator,
    resolve_attributes,
)
from eventglue.transform.export import (
    ExportGenerator,
    TransformationOutput,
    emit_export,
)
from eventglue.transform.relocator import FunctionNode, relocate_function
from eventglue.transform.synthesizer import synthesize_wrapper

logger = get_logger(__name__)

_DEFINITIONS = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)


def expand_event(
    tokens: Iterable[str],
    function: FunctionNode,
    generator: ExportGenerator | None = None,
    strict: bool | None = None,
) -> TransformationOutput:
    """
    Run the full transformation for one function.

    Args:
        tokens: @event arguments
        function: The decorated definition; renamed in place
        generator: Binding export generator
        strict: Attribute resolution mode

    Returns:
        TransformationOutput for splicing

    Raises:
        TransformError: Nothing is emitted when any stage fails
    """
    config = resolve_attributes(tokens, strict=strict)
    new_name = relocate_function(function, config.kind)
    wrapper = synthesize_wrapper(config, new_name)
    return emit_export(function, wrapper, generator)


def _split_event_decorator(
    node: FunctionNode | ast.ClassDef,
) -> ast.expr | None:
    """Remove and return the @event decorator of a definition, if any."""
    for index, decorator in enumerate(node.decorator_list):
        if is_event_decorator(decorator):
            return node.decorator_list.pop(index)
    return None


def _nested_event_definitions(tree: ast.Module) -> list[FunctionNode | ast.ClassDef]:
    """Find @event definitions that are not direct children of the module."""
    found = []
    for statement in tree.body:
        for node in ast.walk(statement):
            if node is statement:
                continue
            if isinstance(node, _DEFINITIONS) and any(
                is_event_decorator(d) for d in node.decorator_list
            ):
                found.append(node)
    return found


def transform_module(
    tree: ast.Module,
    filename: str = "<unknown>",
    generator: ExportGenerator | None = None,
    strict: bool | None = None,
) -> list[TransformationOutput]:
    """
    Expand every module-level @event function in place.

    Args:
        tree: Parsed module; modified in place
        filename: Used for diagnostics
        generator: Binding export generator
        strict: Attribute resolution mode

    Returns:
        One TransformationOutput per handler, in source order

    Raises:
        TransformError: Located at the offending definition
    """
    nested = _nested_event_definitions(tree)
    if nested:
        node = nested[0]
        raise InvalidHandlerError(
            "@event handlers must be defined at module level", name=node.name
        ).locate(filename, node.lineno)

    outputs: list[TransformationOutput] = []
    seen: dict[str, int] = {}
    body: list[ast.stmt] = []

    for statement in tree.body:
        if not isinstance(statement, _DEFINITIONS):
            body.append(statement)
            continue

        decorator = _split_event_decorator(statement)
        if decorator is None:
            body.append(statement)
            continue

        try:
            if isinstance(statement, ast.ClassDef):
                raise InvalidHandlerError(
                    "@event can only decorate functions", name=statement.name
                )
            original_name = statement.name
            output = expand_event(
                attribute_tokens(decorator), statement, generator, strict
            )
            if output.export_name in seen:
                raise DuplicateExportError(output.export_name, seen[output.export_name])
        except TransformError as exc:
            exc.locate(filename, statement.lineno)
            raise

        seen[output.export_name] = statement.lineno
        outputs.append(output)
        body.extend(output.statements)

        logger.debug(
            "Expanded handler",
            extra={
                "context": {
                    "file": filename,
                    "handler": original_name,
                    "relocated": output.source_function.name,
                    "export": output.export_name,
                    "respond_with_errors": output.wrapper.template.respond_with_errors,
                }
            },
        )

    tree.body = body
    ast.fix_missing_locations(tree)
    return outputs


def transform_source(
    source: str,
    filename: str = "<string>",
    generator: ExportGenerator | None = None,
    strict: bool | None = None,
) -> str:
    """
    Transform handler module source text.

    Args:
        source: Module source
        filename: Used for diagnostics
        generator: Binding export generator
        strict: Attribute resolution mode

    Returns:
        Transformed source (comments are not preserved)
    """
    tree = ast.parse(source, filename=filename)
    transform_module(tree, filename, generator, strict)
    return ast.unparse(tree) + "\n"


def compile_source(
    source: str | bytes,
    filename: str = "<string>",
    generator: ExportGenerator | None = None,
    strict: bool | None = None,
) -> CodeType:
    """
    Transform and compile handler module source, keeping line numbers.

    Returns:
        Code object ready to exec in a module namespace
    """
    tree = ast.parse(source, filename=filename)
    transform_module(tree, filename, generator, strict)
    return compile(tree, filename, "exec", dont_inherit=True)

"""Export emission: hand the adapter to a binding generator and splice it."""

import ast
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from eventglue.config import settings
from eventglue.exceptions import ExportGenerationError
from eventglue.models.handler import EXPORT_NAMES
from eventglue.transform.relocator import FunctionNode
from eventglue.transform.synthesizer import GeneratedWrapper

HOST_EXPORT_DECORATOR = "host_export"


@runtime_checkable
class ExportGenerator(Protocol):
    """
    Contract for the tool that makes an adapter callable by the host.

    Implementations return the statements to place in the adapter's
    namespace, or raise ExportGenerationError. Failures are never
    recovered from.
    """

    def expand(
        self, definition: ast.AsyncFunctionDef, options: Mapping[str, Any]
    ) -> list[ast.stmt]:
        ...


class HostBindingGenerator:
    """Export generator targeting ``eventglue.runtime.bindings``."""

    def __init__(self, bindings_module: str | None = None) -> None:
        """
        Initialize HostBindingGenerator.

        Args:
            bindings_module: Module providing host_export (default from settings)
        """
        self.bindings_module = bindings_module or settings.bindings_module

    def expand(
        self, definition: ast.AsyncFunctionDef, options: Mapping[str, Any]
    ) -> list[ast.stmt]:
        """
        Decorate the adapter with ``@host_export``.

        Args:
            definition: Adapter definition
            options: Generator options; none are supported

        Returns:
            Import of host_export followed by the decorated definition

        Raises:
            ExportGenerationError: On options, sync definitions or unknown names
        """
        if options:
            raise ExportGenerationError(
                f"unsupported export options: {', '.join(sorted(options))}",
                details={"options": sorted(options)},
            )
        if not isinstance(definition, ast.AsyncFunctionDef):
            raise ExportGenerationError(
                "host exports must be async functions",
                details={"type": type(definition).__name__},
            )
        if definition.name not in EXPORT_NAMES:
            raise ExportGenerationError(
                f"'{definition.name}' is not a host export name",
                details={"name": definition.name, "allowed": sorted(EXPORT_NAMES)},
            )

        definition.decorator_list.append(
            ast.Name(id=HOST_EXPORT_DECORATOR, ctx=ast.Load())
        )
        import_stmt = ast.ImportFrom(
            module=self.bindings_module,
            names=[ast.alias(name=HOST_EXPORT_DECORATOR)],
            level=0,
        )
        return [import_stmt, definition]


class TransformationOutput(BaseModel):
    """
    Result of transforming one @event function.

    Attributes:
        source_function: The user's function, renamed
        namespace: ``def _worker_<kind>()`` holding the adapter and its export
        binding: ``<export> = _worker_<kind>()`` at module level
        wrapper: The synthesized adapter
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    source_function: ast.FunctionDef | ast.AsyncFunctionDef
    namespace: ast.FunctionDef
    binding: ast.Assign
    wrapper: GeneratedWrapper

    @property
    def export_name(self) -> str:
        return self.wrapper.export_name

    @property
    def statements(self) -> list[ast.stmt]:
        """Statements replacing the original definition, in order."""
        return [self.source_function, self.namespace, self.binding]


def emit_export(
    source_function: FunctionNode,
    wrapper: GeneratedWrapper,
    generator: ExportGenerator | None = None,
    runtime_module: str | None = None,
) -> TransformationOutput:
    """
    Wrap the adapter in its namespace and bind the public export name.

    Args:
        source_function: The relocated user function
        wrapper: Adapter produced by synthesize_wrapper()
        generator: Binding export generator (default HostBindingGenerator)
        runtime_module: Module the adapter imports conversions from

    Returns:
        TransformationOutput ready to splice into the module

    Raises:
        ExportGenerationError: Propagated unchanged from the generator
    """
    generator = generator or HostBindingGenerator()
    runtime_module = runtime_module or settings.runtime_module
    template = wrapper.template

    exported = generator.expand(wrapper.definition, {})

    skeleton = ast.parse(
        f"def {template.namespace}():\n"
        f"    from {runtime_module} import {', '.join(template.runtime_imports)}\n"
        f"    return {template.export_name}\n"
        f"{template.export_name} = {template.namespace}()\n"
    )
    namespace, binding = skeleton.body
    runtime_import, return_stmt = namespace.body
    namespace.body = [runtime_import, *exported, return_stmt]

    # Generated code reports the user's definition line in tracebacks
    for node in (namespace, binding):
        for child in ast.walk(node):
            ast.copy_location(child, source_function)

    return TransformationOutput(
        source_function=source_function,
        namespace=namespace,
        binding=binding,
        wrapper=wrapper,
    )

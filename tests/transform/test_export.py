"""Tests for export emission and the default binding generator."""

import ast

import pytest

from eventglue.exceptions import ExportGenerationError
from eventglue.models.handler import HandlerConfig, HandlerKind
from eventglue.transform.export import (
    ExportGenerator,
    HostBindingGenerator,
    emit_export,
)
from eventglue.transform.relocator import relocate_function
from eventglue.transform.synthesizer import synthesize_wrapper


class StubGenerator:
    """Generator that passes the definition through untouched."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []

    def expand(self, definition, options):
        self.calls.append((definition.name, dict(options)))
        return [definition]


class FailingGenerator:
    """Generator that always fails."""

    def expand(self, definition, options):
        raise ExportGenerationError("binding backend unavailable")


def _prepared(kind: HandlerKind = HandlerKind.FETCH, policy: bool = False):
    function = ast.parse("\n\n\nasync def main(req, env, ctx):\n    pass\n").body[0]
    new_name = relocate_function(function, kind)
    wrapper = synthesize_wrapper(
        HandlerConfig(kind=kind, respond_with_errors=policy), new_name
    )
    return function, wrapper


class TestHostBindingGenerator:
    """Tests for HostBindingGenerator."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(HostBindingGenerator(), ExportGenerator)

    def test_decorates_definition(self) -> None:
        _, wrapper = _prepared()
        statements = HostBindingGenerator("hosts.bindings").expand(wrapper.definition, {})

        import_stmt, definition = statements
        assert ast.unparse(import_stmt) == "from hosts.bindings import host_export"
        assert definition is wrapper.definition
        assert [ast.unparse(d) for d in definition.decorator_list] == ["host_export"]

    def test_rejects_options(self) -> None:
        _, wrapper = _prepared()
        with pytest.raises(ExportGenerationError) as exc_info:
            HostBindingGenerator().expand(wrapper.definition, {"js_name": "go"})
        assert "js_name" in exc_info.value.message

    def test_rejects_sync_definition(self) -> None:
        definition = ast.parse("def fetch(req, env, ctx):\n    pass\n").body[0]
        with pytest.raises(ExportGenerationError):
            HostBindingGenerator().expand(definition, {})

    def test_rejects_unknown_export_name(self) -> None:
        definition = ast.parse("async def queue(b, env, ctx):\n    pass\n").body[0]
        with pytest.raises(ExportGenerationError) as exc_info:
            HostBindingGenerator().expand(definition, {})
        assert exc_info.value.details["name"] == "queue"


class TestEmitExport:
    """Tests for emit_export."""

    def test_generator_receives_empty_options(self) -> None:
        function, wrapper = _prepared()
        generator = StubGenerator()

        emit_export(function, wrapper, generator)

        assert generator.calls == [("fetch", {})]

    def test_fetch_layout(self) -> None:
        function, wrapper = _prepared()

        output = emit_export(function, wrapper, runtime_module="eventglue.runtime")

        assert output.statements[0] is function
        assert output.namespace.name == "_worker_fetch"
        assert ast.unparse(output.binding) == "fetch = _worker_fetch()"
        assert ast.unparse(output.namespace.body[0]) == (
            "from eventglue.runtime import Context, HandlerFault, Request, console_error"
        )
        assert ast.unparse(output.namespace.body[-1]) == "return fetch"
        assert output.export_name == "fetch"

    def test_scheduled_layout(self) -> None:
        function, wrapper = _prepared(HandlerKind.SCHEDULED)

        output = emit_export(function, wrapper)

        assert output.namespace.name == "_worker_scheduled"
        assert ast.unparse(output.binding) == "scheduled = _worker_scheduled()"
        assert function.name == "main_scheduled_glue"

    def test_generated_nodes_use_source_position(self) -> None:
        function, wrapper = _prepared()

        output = emit_export(function, wrapper)

        for node in ast.walk(output.namespace):
            if "lineno" in node._attributes:
                assert node.lineno == function.lineno == 4

    def test_generator_failure_propagates(self) -> None:
        function, wrapper = _prepared()
        with pytest.raises(ExportGenerationError, match="binding backend unavailable"):
            emit_export(function, wrapper, FailingGenerator())

    def test_output_compiles(self) -> None:
        function, wrapper = _prepared(policy=True)
        output = emit_export(function, wrapper)
        module = ast.Module(body=output.statements, type_ignores=[])
        ast.fix_missing_locations(module)
        compile(module, "<test>", "exec")

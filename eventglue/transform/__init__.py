"""Build-time transformation of @event handlers into host adapters."""

from eventglue.transform.attributes import resolve_attributes
from eventglue.transform.export import (
    ExportGenerator,
    HostBindingGenerator,
    TransformationOutput,
    emit_export,
)
from eventglue.transform.pipeline import (
    compile_source,
    expand_event,
    transform_module,
    transform_source,
)
from eventglue.transform.relocator import relocate_function
from eventglue.transform.synthesizer import GeneratedWrapper, synthesize_wrapper
from eventglue.transform.templates import WrapperTemplate, wrapper_template

__all__ = [
    "ExportGenerator",
    "GeneratedWrapper",
    "HostBindingGenerator",
    "TransformationOutput",
    "WrapperTemplate",
    "compile_source",
    "emit_export",
    "expand_event",
    "relocate_function",
    "resolve_attributes",
    "synthesize_wrapper",
    "transform_module",
    "transform_source",
    "wrapper_template",
]

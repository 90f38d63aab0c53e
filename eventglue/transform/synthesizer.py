"""Synthesis of the adapter function for a resolved handler."""

import ast
import keyword

from pydantic import BaseModel, ConfigDict

from eventglue.models.handler import HandlerConfig
from eventglue.transform.templates import WrapperTemplate, wrapper_template


class GeneratedWrapper(BaseModel):
    """
    A synthesized adapter.

    Attributes:
        template: Template the adapter was rendered from
        relocated_name: Identifier of the user function it calls
        definition: The adapter's ``async def`` node
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    template: WrapperTemplate
    relocated_name: str
    definition: ast.AsyncFunctionDef

    @property
    def export_name(self) -> str:
        return self.template.export_name


def synthesize_wrapper(config: HandlerConfig, relocated_name: str) -> GeneratedWrapper:
    """
    Build the adapter for a relocated handler.

    Args:
        config: Resolved @event configuration
        relocated_name: Identifier returned by relocate_function()

    Returns:
        GeneratedWrapper whose definition is named ``fetch`` or ``scheduled``

    Raises:
        ValueError: If relocated_name is not a usable identifier
    """
    if not relocated_name.isidentifier() or keyword.iskeyword(relocated_name):
        raise ValueError(f"not an identifier: {relocated_name!r}")

    template = wrapper_template(config.kind, config.respond_with_errors)
    definition = ast.parse(template.render(relocated_name)).body[0]

    return GeneratedWrapper(
        template=template,
        relocated_name=relocated_name,
        definition=definition,
    )

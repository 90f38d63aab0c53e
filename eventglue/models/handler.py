"""Handler kind and resolved @event configuration."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class HandlerKind(str, Enum):
    """
    Event kinds a generated adapter can serve.

    The export name, glue suffix and namespace are part of the protocol
    with the host runtime and are not configurable.
    """

    FETCH = "fetch"
    SCHEDULED = "scheduled"

    @property
    def export_name(self) -> str:
        """Public name the host runtime looks the adapter up by."""
        return self.value

    @property
    def glue_suffix(self) -> str:
        """Suffix appended to the relocated user function's name."""
        return f"_{self.value}_glue"

    @property
    def namespace(self) -> str:
        """Name of the generated function isolating the adapter."""
        return f"_worker_{self.value}"

    @property
    def has_error_policy(self) -> bool:
        """Whether respond_with_errors changes the generated adapter."""
        return self is HandlerKind.FETCH


# Fixed names the host runtime dispatches to
EXPORT_NAMES = frozenset(kind.export_name for kind in HandlerKind)


class HandlerConfig(BaseModel):
    """
    Resolved configuration for one @event transformation.

    Attributes:
        kind: Selected handler kind
        respond_with_errors: Turn fetch failures into 500 responses
    """

    model_config = ConfigDict(frozen=True)

    kind: HandlerKind = Field(..., description="Selected handler kind")
    respond_with_errors: bool = Field(
        default=False, description="Respond with 500 instead of faulting"
    )

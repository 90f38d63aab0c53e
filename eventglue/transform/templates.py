"""Source templates for generated adapters.

One template per (handler kind, error policy). Selection is a table lookup
so a new kind or policy only adds entries here.
"""

from pydantic import BaseModel, ConfigDict

from eventglue.models.handler import HandlerKind


class WrapperTemplate(BaseModel):
    """
    Shape of a generated adapter.

    Attributes:
        kind: Handler kind served
        respond_with_errors: Error policy baked into ``body``
        parameters: Low-level parameters the host passes
        runtime_imports: Names imported from the runtime module
        body: Adapter source; ``{glue}`` is the relocated handler name
    """

    model_config = ConfigDict(frozen=True)

    kind: HandlerKind
    respond_with_errors: bool
    parameters: tuple[str, ...]
    runtime_imports: tuple[str, ...]
    body: str

    @property
    def export_name(self) -> str:
        return self.kind.export_name

    @property
    def namespace(self) -> str:
        return self.kind.namespace

    def render(self, glue: str) -> str:
        """Fill in the relocated handler name."""
        return self.body.format(glue=glue)


_FETCH_BODY = """\
async def fetch(req, env, ctx):
    ctx = Context.new(ctx)
    request = Request.from_raw(req)
    try:
        res = await {glue}(request, env, ctx)
    except Exception as e:
        console_error(e)
        %s
    return res.to_raw()
"""

_FETCH_ON_ERROR = {
    True: "return Response.error(str(e), 500).to_raw()",
    False: "raise HandlerFault(str(e)) from e",
}

_SCHEDULED_BODY = """\
async def scheduled(event, env, ctx):
    await {glue}(ScheduledEvent.from_raw(event), env, ScheduleContext.from_raw(ctx))
"""

_TEMPLATES: dict[tuple[HandlerKind, bool], WrapperTemplate] = {
    (HandlerKind.FETCH, policy): WrapperTemplate(
        kind=HandlerKind.FETCH,
        respond_with_errors=policy,
        parameters=("req", "env", "ctx"),
        runtime_imports=(
            ("Context", "Request", "Response", "console_error")
            if policy
            else ("Context", "HandlerFault", "Request", "console_error")
        ),
        body=_FETCH_BODY % on_error,
    )
    for policy, on_error in _FETCH_ON_ERROR.items()
}
_TEMPLATES[(HandlerKind.SCHEDULED, False)] = WrapperTemplate(
    kind=HandlerKind.SCHEDULED,
    respond_with_errors=False,
    parameters=("event", "env", "ctx"),
    runtime_imports=("ScheduleContext", "ScheduledEvent"),
    body=_SCHEDULED_BODY,
)


def wrapper_template(kind: HandlerKind, respond_with_errors: bool) -> WrapperTemplate:
    """
    Select the adapter template for a kind and error policy.

    The policy is dropped for kinds without one, so a scheduled handler
    never gets a 500 branch.
    """
    if not kind.has_error_policy:
        respond_with_errors = False
    return _TEMPLATES[(kind, respond_with_errors)]

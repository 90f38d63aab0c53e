"""Loading handler modules through the transformation."""

import importlib.abc
import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from eventglue.exceptions import NoExportsError
from eventglue.logging.config import get_logger
from eventglue.models.handler import EXPORT_NAMES
from eventglue.runtime.bindings import HostBinding
from eventglue.transform.pipeline import compile_source

logger = get_logger(__name__)


class GlueLoader(importlib.abc.Loader):
    """Executes a source file after expanding its @event handlers."""

    def __init__(self, path: str | Path, strict: bool | None = None) -> None:
        self.path = str(path)
        self.strict = strict

    def create_module(self, spec):
        return None

    def exec_module(self, module: ModuleType) -> None:
        source = Path(self.path).read_bytes()
        code = compile_source(source, self.path, strict=self.strict)
        exec(code, module.__dict__)


def load_handler_module(
    path: str | Path,
    module_name: str | None = None,
    strict: bool | None = None,
) -> ModuleType:
    """
    Import a handler file with its adapters generated.

    Args:
        path: Path to the handler module
        module_name: Name to register in sys.modules (default: file stem)
        strict: Attribute resolution mode

    Returns:
        The executed module

    Raises:
        TransformError: If the module's @event handlers are invalid
    """
    path = Path(path)
    name = module_name or path.stem
    loader = GlueLoader(path, strict=strict)
    spec = importlib.util.spec_from_file_location(name, path, loader=loader)
    module = importlib.util.module_from_spec(spec)

    sys.modules[name] = module
    try:
        loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise

    logger.info(
        "Handler module loaded",
        extra={"context": {"module": name, "path": str(path)}},
    )
    return module


def load_exports(module: ModuleType) -> dict[str, HostBinding]:
    """
    Locate generated exports strictly by their protocol names.

    Args:
        module: A module produced by load_handler_module()

    Returns:
        Mapping of export name ('fetch', 'scheduled') to HostBinding

    Raises:
        NoExportsError: If the module exports neither
    """
    exports = {
        name: getattr(module, name)
        for name in sorted(EXPORT_NAMES)
        if isinstance(getattr(module, name, None), HostBinding)
    }
    if not exports:
        raise NoExportsError(module.__name__)
    return exports

#!/usr/bin/env python3
"""
CLI for eventglue.

Provides commands to transform handler modules, check them for
diagnostics, and serve them with the development host.
"""

import argparse
import ast
import sys
from pathlib import Path
from typing import List, Optional

from eventglue.config import settings
from eventglue.exceptions import TransformError
from eventglue.logging.config import configure_logging
from eventglue.transform.pipeline import transform_module


def _strict(lenient: bool) -> Optional[bool]:
    return False if lenient else None


def _transform_file(path: Path, strict: Optional[bool]):
    """Parse and transform a file, returning the tree and outputs."""
    source = path.read_text(encoding="utf-8")
    tree = ast.parse(source, filename=str(path))
    outputs = transform_module(tree, filename=str(path), strict=strict)
    return tree, outputs


def default_output_path(path: Path) -> Path:
    """Return ``<stem><output_suffix>.py`` beside the input."""
    return path.with_name(f"{path.stem}{settings.output_suffix}{path.suffix}")


def cmd_transform(
    input_path: str,
    output: Optional[str],
    write: bool = False,
    lenient: bool = False,
) -> None:
    """
    Transform a handler module.

    Args:
        input_path: Handler module to read
        output: File to write (stdout when None)
        write: Write beside the input using the configured suffix
        lenient: Tolerate conflicting kinds and ignored modifiers
    """
    path = Path(input_path)
    try:
        tree, outputs = _transform_file(path, _strict(lenient))
    except TransformError as exc:
        print(f"✗ {exc.diagnostic()}", file=sys.stderr)
        sys.exit(1)
    except SyntaxError as exc:
        print(f"✗ {path}:{exc.lineno}: error[SYNTAX]: {exc.msg}", file=sys.stderr)
        sys.exit(1)

    source = ast.unparse(tree) + "\n"

    if write and output is None:
        output = str(default_output_path(path))

    if output is None:
        sys.stdout.write(source)
        return

    Path(output).write_text(source, encoding="utf-8")
    exports = ", ".join(o.export_name for o in outputs) or "none"
    print(f"✓ Wrote {output} (exports: {exports})", file=sys.stderr)


def cmd_check(paths: List[str], lenient: bool = False) -> None:
    """
    Report @event handlers and diagnostics for each file.

    Args:
        paths: Handler modules to check
        lenient: Tolerate conflicting kinds and ignored modifiers
    """
    failed = False
    for input_path in paths:
        path = Path(input_path)
        try:
            _, outputs = _transform_file(path, _strict(lenient))
        except TransformError as exc:
            print(f"✗ {exc.diagnostic()}")
            failed = True
            continue
        except SyntaxError as exc:
            print(f"✗ {path}:{exc.lineno}: error[SYNTAX]: {exc.msg}")
            failed = True
            continue

        if not outputs:
            print(f"- {path}: no @event handlers")
            continue

        for output in outputs:
            policy = (
                " respond_with_errors"
                if output.wrapper.template.respond_with_errors
                else ""
            )
            print(
                f"✓ {path}:{output.source_function.lineno}: "
                f"{output.export_name}{policy} -> {output.source_function.name}"
            )

    if failed:
        sys.exit(1)


def cmd_serve(input_path: str, host: str, port: int, lenient: bool = False) -> None:
    """
    Serve a handler module with the development host.

    Args:
        input_path: Handler module to load
        host: Interface to bind
        port: Port to bind
        lenient: Tolerate conflicting kinds and ignored modifiers
    """
    import uvicorn

    from eventglue.host.app import create_app_from_path

    try:
        app = create_app_from_path(input_path, strict=_strict(lenient))
    except TransformError as exc:
        print(f"✗ {exc.diagnostic()}", file=sys.stderr)
        sys.exit(1)

    print(f"✓ Serving {input_path} on http://{host}:{port}", file=sys.stderr)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="eventglue",
        description="Compile @event handlers into host runtime adapters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    # Options shared by every command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--lenient",
        action="store_true",
        help="Let the last handler kind win and ignore unusable modifiers",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    # Transform command
    transform_parser = subparsers.add_parser(
        "transform", help="Write the transformed module", parents=[common]
    )
    transform_parser.add_argument("input", type=str, help="Handler module")
    transform_parser.add_argument(
        "-o", "--output", type=str, help="Output file (default: stdout)"
    )
    transform_parser.add_argument(
        "-w",
        "--write",
        action="store_true",
        help=f"Write beside the input as <name>{settings.output_suffix}.py",
    )

    # Check command
    check_parser = subparsers.add_parser(
        "check", help="Report handlers and diagnostics", parents=[common]
    )
    check_parser.add_argument("inputs", type=str, nargs="+", help="Handler modules")

    # Serve command
    serve_parser = subparsers.add_parser(
        "serve", help="Run the development host", parents=[common]
    )
    serve_parser.add_argument("input", type=str, help="Handler module")
    serve_parser.add_argument("--host", type=str, default=settings.dev_host)
    serve_parser.add_argument("--port", type=int, default=settings.dev_port)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging()

    if args.command == "transform":
        cmd_transform(args.input, args.output, args.write, args.lenient)
    elif args.command == "check":
        cmd_check(args.inputs, args.lenient)
    elif args.command == "serve":
        cmd_serve(args.input, args.host, args.port, args.lenient)


if __name__ == "__main__":
    main()

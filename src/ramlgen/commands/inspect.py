"""Inspect command -- preview what a description compiles to.

Implements ``ramlgen inspect``: the description is compiled exactly as
``ramlgen generate`` would compile it, but nothing is written. The
generated methods are printed as a table, optionally followed by the
response factories of every method.
"""

from __future__ import annotations

from typing import Optional

import typer

from ramlgen.models import GeneratedInterface
from ramlgen.output import error, get_output, info


def inspect_command(
    source: str = typer.Argument(
        ..., help="RAML file path or URL (use '-' for stdin)."
    ),
    base_package: Optional[str] = typer.Option(
        None, "--package", "-p", help="Package prefix of the artifact names."
    ),
    validation: Optional[bool] = typer.Option(
        None,
        "--validation/--no-validation",
        help="Attach validation constraints to bound parameters.",
    ),
    responses: bool = typer.Option(
        False, "--responses", "-r", help="Also list response factories."
    ),
) -> None:
    """Show the interfaces and methods a description compiles to.

    Example::

        ramlgen inspect api.raml
        ramlgen --json inspect api.raml --responses
    """
    from ramlgen.config import resolve_config
    from ramlgen.exceptions import RamlgenError
    from ramlgen.generator import Generator

    try:
        config = resolve_config(cli_base_package=base_package, cli_use_validation=validation)
        # Inspection never writes, whatever the configured output directory.
        config = config.model_copy(update={"output_dir": None})
        generator = Generator(config)
        generator.run_file(source)
    except RamlgenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    context = generator.context
    assert context is not None
    interfaces = list(context.interfaces.values())
    if not interfaces:
        info("No resources declared in this description.")
        return

    title = context.description.title if context.description else "API"
    output = get_output()
    output.print_table(
        ["Interface", "Method", "HTTP", "Path", "Consumes", "Returns"],
        _method_rows(interfaces),
        title=f"{title} -- Methods",
    )
    if responses:
        output.print_table(
            ["Method", "Factory", "Status", "Media Type", "Parameters"],
            _factory_rows(interfaces),
            title=f"{title} -- Response Factories",
        )


def _full_path(interface_path: str, method_path: Optional[str]) -> str:
    parts = (interface_path.strip("/"), method_path or "")
    return "/" + "/".join(part for part in parts if part)


def _method_rows(interfaces: list[GeneratedInterface]) -> list[list[str]]:
    rows: list[list[str]] = []
    for interface in interfaces:
        for method in interface.methods:
            wrapper = method.response_wrapper
            rows.append([
                interface.name,
                method.name,
                method.http_method,
                _full_path(interface.path, method.path),
                method.consumes or "-",
                wrapper.name if wrapper is not None else str(method.returns),
            ])
    return rows


def _factory_rows(interfaces: list[GeneratedInterface]) -> list[list[str]]:
    rows: list[list[str]] = []
    for interface in interfaces:
        for method in interface.methods:
            wrapper = method.response_wrapper
            if wrapper is None:
                continue
            for factory in wrapper.factories:
                rows.append([
                    f"{interface.name}.{method.name}",
                    factory.name,
                    "*" if factory.status is None else str(factory.status),
                    factory.media_type or "-",
                    ", ".join(f"{p.name}: {p.type}" for p in factory.parameters),
                ])
    return rows

"""Generate command -- compile a description and write the artifacts.

Implements the ``ramlgen generate`` top-level command: resolve the
configuration (CLI flags, environment, ``./ramlgen.json``), load and build
the description, compile it, and emit one JSON file per generated
interface into the output directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ramlgen.exit_codes import EXIT_INVALID_USAGE
from ramlgen.output import debug, error, get_output, info, success, suggest


def generate_command(
    source: str = typer.Argument(
        ..., help="RAML file path or URL (use '-' for stdin)."
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Existing directory receiving the artifacts."
    ),
    base_package: Optional[str] = typer.Option(
        None, "--package", "-p", help="Package prefix of the artifact names."
    ),
    validation: Optional[bool] = typer.Option(
        None,
        "--validation/--no-validation",
        help="Attach validation constraints to bound parameters.",
    ),
) -> None:
    """Compile a RAML description into generated interfaces.

    Prints the name of every generated artifact to stdout, one per line
    (or a JSON object with ``--json``).

    Raises:
        typer.Exit: With the error's exit code when the configuration, the
            description or the compilation fails.

    Example::

        ramlgen generate api.raml -o build -p com.acme.api
        cat api.raml | ramlgen generate - -o build
    """
    from ramlgen.config import resolve_config
    from ramlgen.exceptions import DescriptionInvalidError, RamlgenError
    from ramlgen.generator import Generator
    from ramlgen.output import OutputFormat

    try:
        config = resolve_config(
            cli_output_dir=output_dir,
            cli_base_package=base_package,
            cli_use_validation=validation,
        )
    except RamlgenError as exc:
        error(f"Config error: {exc}")
        raise typer.Exit(code=exc.exit_code) from None

    if config.output_dir is None:
        error("No output directory configured.")
        suggest("Pass --output-dir or set RAMLGEN_OUTPUT_DIR")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    debug(
        f"Config: output_dir={config.output_dir} package={config.base_package} "
        f"validation={config.use_validation}"
    )
    info(f"Loading description from: {source}")

    generator = Generator(config)
    try:
        names = generator.run_file(source)
    except DescriptionInvalidError as exc:
        error(f"Invalid RAML definition ({len(exc.errors)} problem(s)):")
        for message in exc.errors:
            error(f"  {message}")
        raise typer.Exit(code=exc.exit_code) from None
    except RamlgenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    written = getattr(generator.emitter, "written", [])
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.print_json(
            {
                "artifacts": sorted(names),
                "files": [str(path) for path in written],
            }
        )
    else:
        for name in sorted(names):
            output.print_data(name)

    success(f"Generated {len(names)} interface(s) in {config.output_dir}")

"""Shared test fixtures for ramlgen.

Provides reusable fixtures for loading the RAML fixtures, building
descriptions from inline dicts, compiling them, creating isolated config
environments, managing output state, and running CLI commands. These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from ramlgen.generator.context import GenerationContext
from ramlgen.models import ApiDescription, GeneratorConfig
from ramlgen.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"
WIDGETS_RAML = FIXTURES_DIR / "widgets.raml"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Description fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def widgets_raw() -> dict[str, Any]:
    """Raw dict of the widgets fixture, as the loader returns it."""
    from ramlgen.parser import load_description

    return load_description(str(WIDGETS_RAML))


@pytest.fixture
def widgets_description(widgets_raw: dict[str, Any]) -> ApiDescription:
    from ramlgen.parser import build_description

    return build_description(widgets_raw)


@pytest.fixture
def make_description() -> Callable[..., ApiDescription]:
    """Build a description from resource declarations given as keyword dicts.

    ``make_description({"/a": {"get": None}})`` is the description with one
    resource ``/a`` declaring a bare GET action.
    """
    from ramlgen.parser import build_description

    def _make(resources: dict[str, Any], **root: Any) -> ApiDescription:
        raw: dict[str, Any] = {"title": "Test API", **root}
        raw.update(resources)
        return build_description(raw)

    return _make


@pytest.fixture
def compile_description() -> Callable[..., GenerationContext]:
    """Compile a description into a fresh context and return the context."""
    from ramlgen.generator import compile_resources

    def _compile(description: ApiDescription, **config: Any) -> GenerationContext:
        context = GenerationContext(GeneratorConfig(**config), description)
        compile_resources(description.resources.values(), context)
        return context

    return _compile


@pytest.fixture
def context() -> GenerationContext:
    """An empty context with the default configuration."""
    return GenerationContext(GeneratorConfig())


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_DATA_HOME to a subdirectory of tmp_path so that tests never
    touch real user data, clears all RAMLGEN_* environment variables and
    changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in [
        "RAMLGEN_OUTPUT_DIR",
        "RAMLGEN_BASE_PACKAGE",
        "RAMLGEN_USE_VALIDATION",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def output_dir(isolated_config: Path) -> Path:
    """An existing, empty output directory inside the isolated config root."""
    path = isolated_config / "out"
    path.mkdir()
    return path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner with the built-in commands registered."""
    from typer.testing import CliRunner

    from ramlgen.app import register_commands

    register_commands()
    return CliRunner()

"""Write generated interfaces to disk as JSON documents.

The emitter is the last stage of a run. It receives the
:class:`~ramlgen.generator.context.GenerationContext` once the whole
resource tree compiled, and writes one file per interface to
``<output_dir>/<base/package/path>/resource/<Interface>.json``. The files
are pydantic dumps of :class:`~ramlgen.models.GeneratedInterface`, so
another tool can render them into source code for any target language.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ramlgen.config import atomic_write
from ramlgen.exceptions import ConfigError

if TYPE_CHECKING:
    from ramlgen.generator.context import GenerationContext

logger = logging.getLogger(__name__)


def artifact_path(output_dir: Path, artifact_name: str) -> Path:
    """Map a dotted artifact name to its JSON file below *output_dir*."""
    *packages, name = artifact_name.split(".")
    return output_dir.joinpath(*packages) / f"{name}.json"


class JsonEmitter:
    """Emitter writing each generated interface as an indented JSON file."""

    def __init__(self, output_dir: Path, indent: int = 2) -> None:
        self.output_dir = output_dir
        self.indent = indent
        self.written: list[Path] = []

    def __call__(self, context: GenerationContext) -> None:
        """Write every interface of *context*.

        Either all files of the run are written or none is left behind: a
        failed write removes the files this call already wrote.

        Raises:
            ConfigError: If the output directory is missing or a file can't
                be written.
        """
        if not self.output_dir.is_dir():
            raise ConfigError(f"{self.output_dir} is not a pre-existing directory")
        written: list[Path] = []
        for interface in context.interfaces.values():
            path = artifact_path(self.output_dir, context.artifact_name(interface))
            try:
                atomic_write(path, interface.model_dump_json(indent=self.indent) + "\n")
            except OSError as exc:
                self._remove(written)
                raise ConfigError(f"Failed to write {path}: {exc}") from exc
            written.append(path)
            logger.debug("Wrote %s", path)
        self.written.extend(written)

    @staticmethod
    def _remove(paths: list[Path]) -> None:
        for path in paths:
            try:
                path.unlink()
            except OSError as exc:
                logger.warning("Could not remove partial artifact %s: %s", path, exc)
            else:
                logger.debug("Removed partial artifact %s", path)

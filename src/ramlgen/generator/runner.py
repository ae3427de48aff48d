"""Run a full generation: validate, compile, emit.

:class:`Generator` is the public entry point used by the CLI and by
library callers::

    from ramlgen.generator import Generator
    from ramlgen.models import GeneratorConfig

    generator = Generator(GeneratorConfig(output_dir=Path("build")))
    names = generator.run_file("api.raml")

A run either compiles the whole resource tree or fails as a whole. Nothing
is emitted until every resource compiled.
"""

from __future__ import annotations

import logging
from typing import Optional

from ramlgen.config import validate_config
from ramlgen.emitter import JsonEmitter
from ramlgen.exceptions import CompilationError, RamlgenError
from ramlgen.generator.context import Emitter, GenerationContext
from ramlgen.generator.naming import NamingPolicy
from ramlgen.generator.resource_walker import compile_resources
from ramlgen.generator.types import TypeResolver
from ramlgen.models import ApiDescription, GeneratorConfig
from ramlgen.parser import build_description, load_description

logger = logging.getLogger(__name__)


class Generator:
    """Compiles API descriptions into generated interfaces.

    Args:
        config: Settings for the run.
        naming: Optional naming policy override.
        types: Optional type resolver override.
        emitter: Callable receiving the finished context. Defaults to a
            :class:`~ramlgen.emitter.JsonEmitter` when ``config.output_dir``
            is set, and to no emission otherwise.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        naming: Optional[NamingPolicy] = None,
        types: Optional[TypeResolver] = None,
        emitter: Optional[Emitter] = None,
    ) -> None:
        self.config = config
        self.naming = naming
        self.types = types
        if emitter is None and config.output_dir is not None:
            emitter = JsonEmitter(config.output_dir, config.emit_indent)
        self.emitter = emitter
        self.context: Optional[GenerationContext] = None

    def run(self, description: ApiDescription) -> set[str]:
        """Compile *description* and emit it; return the artifact names.

        Raises:
            ConfigError: If the configuration fails pre-flight validation.
            CompilationError: If compiling any resource fails.
        """
        validate_config(self.config, require_output=self.config.output_dir is not None)

        context = GenerationContext(self.config, description, self.naming, self.types)
        self.context = context
        try:
            compile_resources(description.resources.values(), context)
        except RamlgenError:
            raise
        except Exception as exc:
            raise CompilationError(f"Failed to compile '{description.title}': {exc}") from exc

        names = context.generate(self.emitter)
        logger.info("Generated %d interface(s) for '%s'", len(names), description.title)
        return names

    def run_file(self, source: str) -> set[str]:
        """Load the description at *source* (path, URL or ``-``) and :meth:`run` it."""
        return self.run(build_description(load_description(source)))

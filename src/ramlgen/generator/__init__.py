"""Compiler -- turn a resource tree into generated interfaces.

This sub-package is the core of ramlgen: it takes an
:class:`~ramlgen.models.ApiDescription` (produced by the parser) and builds
one :class:`~ramlgen.models.GeneratedInterface` per top-level resource.

Typical usage::

    from ramlgen.generator import Generator
    from ramlgen.models import GeneratorConfig

    names = Generator(GeneratorConfig()).run(description)

Sub-modules:

* :mod:`~ramlgen.generator.resource_walker` -- depth-first walk creating
  interfaces and delegating every action.
* :mod:`~ramlgen.generator.method_builder` -- one method per action and
  request media type, with HTTP binding metadata.
* :mod:`~ramlgen.generator.param_binder` -- path, header, query, form and
  body parameters, with validation constraints.
* :mod:`~ramlgen.generator.response_builder` -- per-method response
  wrapper types and their factories.
* :mod:`~ramlgen.generator.responses` -- executes response factories.
* :mod:`~ramlgen.generator.media_types` -- response media type collection.
* :mod:`~ramlgen.generator.naming` and :mod:`~ramlgen.generator.types` --
  default naming policy and type resolver.
* :mod:`~ramlgen.generator.context` -- per-run generation state.
"""

from ramlgen.generator.context import GenerationContext
from ramlgen.generator.resource_walker import compile_resources
from ramlgen.generator.runner import Generator

__all__ = ["Generator", "GenerationContext", "compile_resources"]

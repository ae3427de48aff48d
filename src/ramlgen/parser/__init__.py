"""RAML description parser -- load a document and build its resource tree.

This sub-package is the first half of the ramlgen pipeline: it turns a RAML
document (YAML or JSON, local file, remote URL or stdin) into an
:class:`~ramlgen.models.ApiDescription` that the generator can compile.

Typical usage::

    from ramlgen.parser import build_description, load_description

    raw = load_description("api.raml")
    description = build_description(raw)

Sub-modules:

* :mod:`~ramlgen.parser.loader` -- I/O layer (URL, file, stdin) and
  JSON/YAML parsing.
* :mod:`~ramlgen.parser.builder` -- Walks the raw mapping and produces the
  :class:`~ramlgen.models.Resource` tree, reporting every structural
  problem at once.
"""

from ramlgen.parser.builder import build_description
from ramlgen.parser.loader import load_description

__all__ = ["load_description", "build_description"]

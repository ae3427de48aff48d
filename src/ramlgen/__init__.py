"""ramlgen -- Compile RAML resource trees into generated interface models.

This package reads a RAML 0.8 API description and compiles its resource tree
into a structured model of generated interfaces: one interface per top-level
resource, one method per action and request media type, typed parameters
with HTTP bindings and validation constraints, and a response wrapper type
per method with one factory per declared status code and media type.

Typical workflow::

    ramlgen inspect api.raml                      # preview interfaces and methods
    ramlgen generate api.raml -o build -p acme    # write one JSON file per interface

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Configuration resolution and pre-flight validation.
    emitter: Writes generated interfaces to disk.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"

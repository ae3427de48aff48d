"""Built-in CLI sub-commands for ramlgen.

* :mod:`~ramlgen.commands.generate` -- compile a description and write one
  JSON file per generated interface.
* :mod:`~ramlgen.commands.inspect` -- compile a description and print its
  interfaces, methods and response factories without writing anything.

Each module exports a plain callback function registered directly on the
root app by :func:`~ramlgen.app.register_commands`.
"""

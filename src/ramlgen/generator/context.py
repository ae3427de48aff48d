"""Per-run generation state shared by the compiler components.

One :class:`GenerationContext` is created for every compilation run and
passed explicitly down the resource walk. It owns the generated interfaces,
the collaborators (naming policy and type resolver) and the configuration.
It is not safe to reuse across runs.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ramlgen.generator.naming import DefaultNamingPolicy, NamingPolicy, make_unique
from ramlgen.generator.types import DefaultTypeResolver, TypeResolver
from ramlgen.models import (
    ApiDescription,
    GeneratedInterface,
    GeneratedMethod,
    GeneratorConfig,
)

logger = logging.getLogger(__name__)

Emitter = Callable[["GenerationContext"], None]


class GenerationContext:
    """State for one compilation run.

    Args:
        config: The run's :class:`~ramlgen.models.GeneratorConfig`.
        description: The description being compiled. Its named schemas
            seed the default type resolver.
        naming: Identifier policy; defaults to
            :class:`~ramlgen.generator.naming.DefaultNamingPolicy`.
        types: Type resolver; defaults to
            :class:`~ramlgen.generator.types.DefaultTypeResolver`.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        description: Optional[ApiDescription] = None,
        naming: Optional[NamingPolicy] = None,
        types: Optional[TypeResolver] = None,
    ) -> None:
        self.config = config
        self.description = description
        self.naming: NamingPolicy = naming or DefaultNamingPolicy()
        schemas = description.schemas if description is not None else {}
        self.types: TypeResolver = types or DefaultTypeResolver(schemas)
        self.interfaces: dict[str, GeneratedInterface] = {}

    def artifact_name(self, interface: GeneratedInterface) -> str:
        return f"{self.config.base_package}.resource.{interface.name}"

    def create_interface(
        self, name: str, path: str, description: Optional[str] = None
    ) -> GeneratedInterface:
        """Register a new interface, renaming it if *name* is already taken."""
        unique = make_unique(name, self.interfaces)
        if unique != name:
            logger.debug("Interface name '%s' taken, using '%s'", name, unique)
        interface = GeneratedInterface(name=unique, path=path, description=description)
        self.interfaces[unique] = interface
        return interface

    def unique_method_name(self, interface: GeneratedInterface, name: str) -> str:
        unique = make_unique(name, (m.name for m in interface.methods))
        if unique != name:
            logger.debug(
                "Method name '%s' taken in %s, using '%s'", name, interface.name, unique
            )
        return unique

    def add_method(self, interface: GeneratedInterface, method: GeneratedMethod) -> None:
        if any(m.name == method.name for m in interface.methods):
            raise ValueError(f"Duplicate method '{method.name}' in {interface.name}")
        interface.methods.append(method)

    def artifact_names(self) -> set[str]:
        return {self.artifact_name(i) for i in self.interfaces.values()}

    def generate(self, emitter: Optional[Emitter] = None) -> set[str]:
        """Hand the generated interfaces to *emitter* and return the artifact names."""
        if emitter is not None:
            emitter(self)
        return self.artifact_names()

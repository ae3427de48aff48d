"""Walk the resource tree and compile it into generated interfaces.

This is the core algorithm of ramlgen. Each top-level resource becomes one
:class:`~ramlgen.models.GeneratedInterface`. The walk then descends
depth-first: every action of the resource is handed to the
:class:`~ramlgen.generator.method_builder.MethodSynthesizer`, and every
child resource contributes its methods to the *same* interface, with paths
relative to the top-level resource's path.

Traversal follows the declaration order of every mapping, so identical
input always yields identical interfaces, methods and factories.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ramlgen.generator.context import GenerationContext
from ramlgen.generator.method_builder import MethodSynthesizer
from ramlgen.models import GeneratedInterface, Resource

logger = logging.getLogger(__name__)


def interface_path(resource: Resource) -> str:
    """Path annotation of the interface for *resource*: its URI without slashes, or ``/``."""
    return resource.relative_uri.strip("/") or "/"


class ResourceWalker:
    """Depth-first compiler from resources to interfaces."""

    def __init__(self, context: GenerationContext) -> None:
        self.context = context
        self.methods = MethodSynthesizer(context)

    def compile(self, resources: Iterable[Resource]) -> set[str]:
        """Create one interface per top-level resource and return the artifact names."""
        created: list[GeneratedInterface] = []
        for resource in resources:
            created.append(self.create_resource_interface(resource))
        return {self.context.artifact_name(i) for i in created}

    def create_resource_interface(self, resource: Resource) -> GeneratedInterface:
        path = interface_path(resource)
        description = resource.description
        if description is not None and not description.strip():
            description = None
        interface = self.context.create_interface(
            self.context.naming.interface_name(resource.uri), path, description
        )
        logger.debug("Compiling resource %s into %s", resource.uri, interface.name)
        self.add_resource_methods(resource, interface, path)
        return interface

    def add_resource_methods(
        self,
        resource: Resource,
        interface: GeneratedInterface,
        path: str,
    ) -> None:
        for action in resource.actions.values():
            self.methods.add_action_methods(interface, path, action)
        for child in resource.resources.values():
            self.add_resource_methods(child, interface, path)


def compile_resources(resources: Iterable[Resource], context: GenerationContext) -> set[str]:
    """Compile *resources* into *context* and return the artifact names."""
    return ResourceWalker(context).compile(resources)

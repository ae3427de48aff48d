"""Synthesise generated methods for the actions of a resource.

An action becomes one method, unless it declares several request body
media types, in which case it becomes one method per media type and each
method name carries the media type so the names stay distinct.

Each method records its HTTP binding: the verb, the path below the
interface path (only when non-empty), the consumed media type (only with a
body) and the produced media types (only when the responses declare any).
Its parameters are bound in a fixed order: path, header, query, body.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from ramlgen.generator.context import GenerationContext
from ramlgen.generator.media_types import unique_response_media_types
from ramlgen.generator.param_binder import ParameterBinder
from ramlgen.generator.response_builder import ResponseTypeBuilder
from ramlgen.generator.types import VOID
from ramlgen.models import (
    Action,
    GeneratedInterface,
    GeneratedMethod,
    MimeType,
    ResponseWrapper,
    TypeRef,
)

logger = logging.getLogger(__name__)


def residual_path(resource_uri: str, interface_path: str) -> str:
    """Return the part of *resource_uri* below *interface_path*.

    ``residual_path("/widgets/{id}", "widgets")`` is ``"{id}"``; the
    interface's own resource has an empty residual path.
    """
    uri = resource_uri.strip("/")
    if interface_path == "/":
        return uri
    prefix = interface_path + "/"
    return uri[len(prefix):] if uri.startswith(prefix) else ""


class MethodSynthesizer:
    """Adds generated methods to an interface for one compilation run."""

    def __init__(self, context: GenerationContext) -> None:
        self.context = context
        self.binder = ParameterBinder(context)
        self.responses = ResponseTypeBuilder(context)

    def add_action_methods(
        self,
        interface: GeneratedInterface,
        interface_path: str,
        action: Action,
    ) -> list[GeneratedMethod]:
        """Add the method(s) for *action* to *interface*."""
        if not action.has_body():
            return [self.add_method(interface, interface_path, action, None, False)]
        if len(action.body) == 1:
            body_mime_type = next(iter(action.body.values()))
            return [self.add_method(interface, interface_path, action, body_mime_type, False)]
        return [
            self.add_method(interface, interface_path, action, body_mime_type, True)
            for body_mime_type in action.body.values()
        ]

    def add_method(
        self,
        interface: GeneratedInterface,
        interface_path: str,
        action: Action,
        body_mime_type: Optional[MimeType],
        media_type_in_name: bool,
    ) -> GeneratedMethod:
        resource = action.resource
        path = residual_path(resource.uri if resource is not None else "", interface_path)

        name = self.context.naming.method_name(
            action.type,
            path,
            body_mime_type.type if media_type_in_name and body_mime_type is not None else None,
        )
        name = self.context.unique_method_name(interface, name)

        response_media_types = unique_response_media_types(action)
        method = GeneratedMethod(
            name=name,
            http_method=action.type.value,
            path=path or None,
            consumes=body_mime_type.type if body_mime_type is not None else None,
            produces=[m.type for m in response_media_types],
            returns=self._return_type(name, action, response_media_types),
        )
        if action.description and action.description.strip():
            method.doc.add(action.description)

        self.binder.add_path_parameters(action, method)
        self.binder.add_header_parameters(action, method)
        self.binder.add_query_parameters(action, method)
        self.binder.add_body_parameters(action.type, body_mime_type, method)

        self.context.add_method(interface, method)
        logger.debug("Generated %s.%s (%s)", interface.name, name, action.type.value)
        return method

    def _return_type(
        self,
        method_name: str,
        action: Action,
        response_media_types: list[MimeType],
    ) -> Union[ResponseWrapper, TypeRef]:
        # Status-only responses still need a wrapper to set their status.
        if not response_media_types and not action.responses:
            return VOID
        return self.responses.build_response_type(method_name, action)

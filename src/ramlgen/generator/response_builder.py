"""Synthesise the response-builder type returned by a generated method.

For every declared ``(status, media type)`` pair of an action the wrapper
gets one factory; body-less responses get one factory keyed by status
alone. A final generic ``respond(status, entity)`` factory lets a handler
express any response the description under-specifies.

Response headers whose name contains the wildcard marker ``{?}`` are not
bound one by one. They collapse into a single ``headers`` argument mapping
header names to lists of values, documented with the concatenated
descriptions of the wildcard headers.
"""

from __future__ import annotations

import logging
from typing import Optional

from ramlgen.generator.context import GenerationContext
from ramlgen.generator.naming import make_unique
from ramlgen.generator.param_binder import GENERIC_PAYLOAD_ARGUMENT, describe_parameter
from ramlgen.generator.types import INTEGER, MULTIPLE_HEADERS, STREAMING_OUTPUT
from ramlgen.models import (
    Action,
    GeneratedParameter,
    MimeType,
    Response,
    ResponseFactory,
    ResponseWrapper,
)

logger = logging.getLogger(__name__)

RESPONSE_HEADER_WILDCARD = "{?}"
MULTIPLE_HEADERS_ARGUMENT = "headers"
GENERIC_RESPONSE_FACTORY = "respond"
STATUS_ARGUMENT = "status"


def parse_status_code(key: str) -> int:
    """Parse a response key as an integer status; non-numeric keys become ``0``."""
    try:
        return int(key)
    except ValueError:
        logger.warning("Response status '%s' is not numeric, using 0", key)
        return 0


class ResponseTypeBuilder:
    """Builds :class:`~ramlgen.models.ResponseWrapper` types for one run."""

    def __init__(self, context: GenerationContext) -> None:
        self.context = context

    def build_response_type(self, method_name: str, action: Action) -> ResponseWrapper:
        wrapper = ResponseWrapper(name=self.context.naming.response_type_name(method_name))

        for key, response in action.responses.items():
            status = parse_status_code(key)
            if not response.has_body():
                self._add_factory(wrapper, status, response, None)
                continue
            for mime_type in response.body.values():
                self._add_factory(wrapper, status, response, mime_type)

        wrapper.factories.append(self._generic_factory())
        return wrapper

    def _add_factory(
        self,
        wrapper: ResponseWrapper,
        status: int,
        response: Response,
        mime_type: Optional[MimeType],
    ) -> ResponseFactory:
        naming = self.context.naming
        media_type = mime_type.type if mime_type is not None else None
        taken = [f.name for f in wrapper.factories] + [GENERIC_RESPONSE_FACTORY]
        factory = ResponseFactory(
            name=make_unique(naming.factory_name(status, media_type), taken),
            status=status,
            media_type=media_type,
        )
        if response.description and response.description.strip():
            factory.doc.add(response.description)

        reserved = {MULTIPLE_HEADERS_ARGUMENT, GENERIC_PAYLOAD_ARGUMENT}
        wildcard_docs: list[str] = []
        for header_name, header in response.headers.items():
            if RESPONSE_HEADER_WILDCARD in header_name:
                wildcard_docs.append(describe_parameter(header) + "\n")
                continue
            argument = make_unique(
                naming.variable_name(header_name),
                reserved | {p.name for p in factory.parameters},
            )
            factory.headers[header_name] = argument
            factory.parameters.append(
                GeneratedParameter(
                    name=argument, type=self.context.types.parameter_type(header)
                )
            )
            factory.doc.add_param(argument, describe_parameter(header))

        if wildcard_docs:
            factory.multiple_headers_argument = MULTIPLE_HEADERS_ARGUMENT
            factory.parameters.append(
                GeneratedParameter(name=MULTIPLE_HEADERS_ARGUMENT, type=MULTIPLE_HEADERS)
            )
            factory.doc.add_param(MULTIPLE_HEADERS_ARGUMENT, "".join(wildcard_docs))

        if mime_type is not None:
            factory.payload_argument = GENERIC_PAYLOAD_ARGUMENT
            factory.parameters.append(
                GeneratedParameter(
                    name=GENERIC_PAYLOAD_ARGUMENT,
                    type=self.context.types.response_entity_type(mime_type),
                )
            )
            factory.doc.add_param(GENERIC_PAYLOAD_ARGUMENT)

        wrapper.factories.append(factory)
        return factory

    @staticmethod
    def _generic_factory() -> ResponseFactory:
        return ResponseFactory(
            name=GENERIC_RESPONSE_FACTORY,
            status_argument=STATUS_ARGUMENT,
            payload_argument=GENERIC_PAYLOAD_ARGUMENT,
            parameters=[
                GeneratedParameter(name=STATUS_ARGUMENT, type=INTEGER),
                GeneratedParameter(name=GENERIC_PAYLOAD_ARGUMENT, type=STREAMING_OUTPUT),
            ],
            generic=True,
        )

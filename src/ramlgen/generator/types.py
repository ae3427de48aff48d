"""Resolve RAML parameters and media types to :class:`~ramlgen.models.TypeRef` handles.

The compiler needs a type for every bound argument and every request or
response entity. :class:`DefaultTypeResolver` provides them using Python
type names, which keeps the generated model readable and lets an emitter
map them onward if it targets another language.

**Mapping rules** (default resolver):

* Parameters map by RAML type: ``string`` to ``str``, ``integer`` to ``int``,
  ``number`` to ``float``, ``boolean`` to ``bool``, ``date`` to ``datetime``
  and ``file`` to ``BinaryIO``. A repeatable parameter becomes ``list[...]``.
* Entities with a schema that names one of the description's schemas, or
  an inline JSON schema with a ``title``, map to the PascalCase model name.
* Untyped ``text/*`` entities are ``str``. Other untyped request entities
  are ``BinaryIO`` and other untyped response entities are
  ``StreamingOutput``.
"""

from __future__ import annotations

import json
from typing import Optional, Protocol

from ramlgen.generator.naming import pascal_case
from ramlgen.models import MimeType, Parameter, ParamType, TypeRef

VOID = TypeRef(name="None")
STRING = TypeRef(name="str")
INTEGER = TypeRef(name="int")
OBJECT = TypeRef(name="object")
BINARY_INPUT = TypeRef(name="BinaryIO")
STREAMING_OUTPUT = TypeRef(name="StreamingOutput")
MULTIPART_BODY = TypeRef(name="MultipartBody")
MULTIVALUED_FORM = TypeRef(
    name="dict", arguments=(STRING, TypeRef(name="list", arguments=(STRING,)))
)
MULTIPLE_HEADERS = TypeRef(
    name="dict", arguments=(STRING, TypeRef(name="list", arguments=(OBJECT,)))
)

_PARAM_TYPE_MAP: dict[ParamType, TypeRef] = {
    ParamType.STRING: STRING,
    ParamType.INTEGER: INTEGER,
    ParamType.NUMBER: TypeRef(name="float"),
    ParamType.BOOLEAN: TypeRef(name="bool"),
    ParamType.DATE: TypeRef(name="datetime"),
    ParamType.FILE: BINARY_INPUT,
}


class TypeResolver(Protocol):
    """Type resolution required by the compiler."""

    def parameter_type(self, parameter: Parameter) -> TypeRef: ...

    def request_entity_type(self, mime_type: MimeType) -> TypeRef: ...

    def response_entity_type(self, mime_type: MimeType) -> TypeRef: ...


class DefaultTypeResolver:
    """Type resolver used when the caller does not provide one.

    Args:
        schemas: The description's named schemas, used to recognise a body
            ``schema`` that refers to one of them by name.
    """

    def __init__(self, schemas: Optional[dict[str, str]] = None) -> None:
        self._schemas = schemas or {}

    def parameter_type(self, parameter: Parameter) -> TypeRef:
        base = _PARAM_TYPE_MAP.get(parameter.type, STRING)
        if parameter.repeat:
            return TypeRef(name="list", arguments=(base,))
        return base

    def request_entity_type(self, mime_type: MimeType) -> TypeRef:
        return self._entity_type(mime_type) or _untyped(mime_type, BINARY_INPUT)

    def response_entity_type(self, mime_type: MimeType) -> TypeRef:
        return self._entity_type(mime_type) or _untyped(mime_type, STREAMING_OUTPUT)

    def _entity_type(self, mime_type: MimeType) -> Optional[TypeRef]:
        schema = (mime_type.schema_ or "").strip()
        if not schema:
            return None
        if schema in self._schemas:
            return TypeRef(name=pascal_case(schema))
        title = _inline_schema_title(schema)
        if title:
            return TypeRef(name=pascal_case(title))
        return None


def _untyped(mime_type: MimeType, fallback: TypeRef) -> TypeRef:
    if mime_type.type.startswith("text/"):
        return STRING
    return fallback


def _inline_schema_title(schema: str) -> Optional[str]:
    """Return the ``title`` of an inline JSON schema, if it has one."""
    try:
        parsed = json.loads(schema)
    except ValueError:
        return None
    if isinstance(parsed, dict) and isinstance(parsed.get("title"), str):
        return parsed["title"]
    return None

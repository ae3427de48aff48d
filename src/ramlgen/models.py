"""Canonical Pydantic models shared across all ramlgen modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Description models** -- produced by the description builder and read (never
mutated) by the compiler:
    :class:`ActionType`, :class:`ParamType`, :class:`Parameter`,
    :class:`MimeType`, :class:`Response`, :class:`Action`, :class:`Resource`,
    and :class:`ApiDescription`.

**Generated models** -- produced by the compiler and consumed by the emitter:
    :class:`TypeRef`, :class:`Binding`, the constraint family,
    :class:`GeneratedParameter`, :class:`Documentation`,
    :class:`ResponseFactory`, :class:`ResponseWrapper`,
    :class:`GeneratedMethod`, and :class:`GeneratedInterface`.

**Configuration models** -- :class:`GeneratorConfig`.

All mappings are plain ``dict`` objects, so declaration order is preserved
from the source document through to the generated output.
"""

from __future__ import annotations

import enum
from decimal import Decimal
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


# --- Description Models ---


class ActionType(str, enum.Enum):
    """HTTP verbs an action may be declared with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"


_VERBS_WITH_BODY = frozenset({ActionType.PUT, ActionType.POST, ActionType.PATCH})


def verb_requires_body(action_type: ActionType) -> bool:
    """Return ``True`` for the verbs that always carry a request body."""
    return action_type in _VERBS_WITH_BODY


class ParamType(str, enum.Enum):
    """Primitive types a RAML named parameter can declare."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    DATE = "date"
    BOOLEAN = "boolean"
    FILE = "file"


class Parameter(BaseModel):
    """A named parameter: URI, header, query or form field.

    All four kinds share one shape. Validation facets (lengths, bounds,
    pattern) are optional and only turned into constraints when the
    generator runs with validation enabled.
    """

    display_name: Optional[str] = None
    description: Optional[str] = None
    type: ParamType = ParamType.STRING
    required: bool = False
    default_value: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    minimum: Optional[Decimal] = None
    maximum: Optional[Decimal] = None
    pattern: Optional[str] = None
    enum: list[str] = Field(default_factory=list)
    repeat: bool = False


class MimeType(BaseModel):
    """A request or response body declared for one media type.

    ``form_parameters`` maps each form field to a *list* of parameters
    because RAML lets a single field be declared with several types.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(description="Media type string, e.g. application/json")
    schema_: Optional[str] = Field(default=None, alias="schema")
    example: Optional[str] = None
    form_parameters: dict[str, list[Parameter]] = Field(default_factory=dict)


class Response(BaseModel):
    """A response declared for one status code key."""

    description: Optional[str] = None
    headers: dict[str, Parameter] = Field(default_factory=dict)
    body: dict[str, MimeType] = Field(default_factory=dict)

    def has_body(self) -> bool:
        return bool(self.body)


class Action(BaseModel):
    """One HTTP verb handler declared on a :class:`Resource`."""

    type: ActionType
    description: Optional[str] = None
    headers: dict[str, Parameter] = Field(default_factory=dict)
    query_parameters: dict[str, Parameter] = Field(default_factory=dict)
    body: dict[str, MimeType] = Field(default_factory=dict)
    responses: dict[str, Response] = Field(default_factory=dict)

    _resource: Any = PrivateAttr(default=None)

    @property
    def resource(self) -> Optional[Resource]:
        """The resource declaring this action (set by the owning resource)."""
        return self._resource

    def has_body(self) -> bool:
        return bool(self.body)


class Resource(BaseModel):
    """A node in the API path hierarchy.

    Child resources and actions get a back-reference to this resource when
    it is constructed. The references are private attributes: they are never
    serialised and never imply ownership.
    """

    relative_uri: str
    display_name: Optional[str] = None
    description: Optional[str] = None
    uri_parameters: dict[str, Parameter] = Field(default_factory=dict)
    actions: dict[ActionType, Action] = Field(default_factory=dict)
    resources: dict[str, Resource] = Field(default_factory=dict)

    _parent: Any = PrivateAttr(default=None)

    def model_post_init(self, __context: Any) -> None:
        for action in self.actions.values():
            action._resource = self
        for child in self.resources.values():
            child._parent = self

    @property
    def parent(self) -> Optional[Resource]:
        return self._parent

    @property
    def uri(self) -> str:
        """Full URI of this resource, built from the parent chain."""
        if self._parent is None:
            return self.relative_uri
        return self._parent.uri + self.relative_uri


class ApiDescription(BaseModel):
    """Root of a parsed API description.

    Produced by :func:`~ramlgen.parser.builder.build_description` and
    passed to :meth:`~ramlgen.generator.Generator.run`.
    """

    title: str = "Untitled API"
    version: Optional[str] = None
    base_uri: Optional[str] = None
    schemas: dict[str, str] = Field(
        default_factory=dict, description="Named schemas, name to schema text"
    )
    resources: dict[str, Resource] = Field(default_factory=dict)


# --- Generated Models ---


class TypeRef(BaseModel):
    """A handle to a type in the generated model.

    Types are identified by name and optional type arguments, which is
    enough for an emitter to render them in any target language.

    Example::

        >>> str(TypeRef(name="dict", arguments=(TypeRef(name="str"),
        ...     TypeRef(name="list", arguments=(TypeRef(name="str"),)))))
        'dict[str, list[str]]'
    """

    model_config = ConfigDict(frozen=True)

    name: str
    arguments: tuple[TypeRef, ...] = ()

    def __str__(self) -> str:
        if not self.arguments:
            return self.name
        return f"{self.name}[{', '.join(str(a) for a in self.arguments)}]"


class BindingKind(str, enum.Enum):
    """Where a bound method parameter is read from in the HTTP request."""

    PATH = "path"
    HEADER = "header"
    QUERY = "query"
    FORM = "form"


class Binding(BaseModel):
    """Binding directive carrying the original (unsanitised) declared name."""

    kind: BindingKind
    name: str


class SizeConstraint(BaseModel):
    kind: Literal["size"] = "size"
    min: Optional[int] = None
    max: Optional[int] = None


class MinConstraint(BaseModel):
    kind: Literal["min"] = "min"
    value: int


class MaxConstraint(BaseModel):
    kind: Literal["max"] = "max"
    value: int


class NotNullConstraint(BaseModel):
    kind: Literal["not_null"] = "not_null"


Constraint = Annotated[
    Union[SizeConstraint, MinConstraint, MaxConstraint, NotNullConstraint],
    Field(discriminator="kind"),
]


class GeneratedParameter(BaseModel):
    """One parameter of a generated method or response factory."""

    name: str
    type: TypeRef
    binding: Optional[Binding] = None
    default_value: Optional[str] = None
    constraints: list[Constraint] = Field(default_factory=list)


class ParamDoc(BaseModel):
    name: str
    text: str = ""


class Documentation(BaseModel):
    """Documentation attached to a generated method, factory or parameter.

    ``text`` holds free-form lines; ``params`` holds one entry per
    parameter name. Adding text for a parameter that already has an entry
    appends to that entry instead of creating a second one.
    """

    text: list[str] = Field(default_factory=list)
    params: list[ParamDoc] = Field(default_factory=list)

    def add(self, text: str) -> None:
        self.text.append(text)

    def add_param(self, name: str, text: str = "") -> ParamDoc:
        for entry in self.params:
            if entry.name == name:
                entry.text += text
                return entry
        entry = ParamDoc(name=name, text=text)
        self.params.append(entry)
        return entry

    def param(self, name: str) -> Optional[ParamDoc]:
        return next((entry for entry in self.params if entry.name == name), None)


class ResponseFactory(BaseModel):
    """A static factory on a :class:`ResponseWrapper`.

    A declared factory has a fixed ``status`` and, when the response has a
    body, a ``media_type`` that becomes the content-type header. The
    generic fallback factory has ``status=None`` and reads the status from
    the ``status_argument`` instead.

    ``headers`` maps each declared response header name to the argument
    that supplies its value.
    """

    name: str
    status: Optional[int] = None
    media_type: Optional[str] = None
    headers: dict[str, str] = Field(default_factory=dict)
    multiple_headers_argument: Optional[str] = None
    payload_argument: Optional[str] = None
    status_argument: Optional[str] = None
    parameters: list[GeneratedParameter] = Field(default_factory=list)
    doc: Documentation = Field(default_factory=Documentation)
    generic: bool = False


class ResponseWrapper(BaseModel):
    """Response-builder type returned by one generated method.

    A single generic model parameterized by its closed list of factory
    descriptors. The last factory is always the generic fallback.
    """

    name: str
    factories: list[ResponseFactory] = Field(default_factory=list)

    def factory(self, name: str) -> ResponseFactory:
        for candidate in self.factories:
            if candidate.name == name:
                return candidate
        raise KeyError(name)

    def build(self, factory_name: str, *args: Any, **kwargs: Any) -> Any:
        """Apply the named factory; see :func:`ramlgen.generator.responses.build_response`."""
        from ramlgen.generator.responses import build_response

        return build_response(self, factory_name, *args, **kwargs)


class GeneratedMethod(BaseModel):
    """A method generated for one action (and one request media type)."""

    name: str
    http_method: str
    path: Optional[str] = Field(
        default=None, description="Residual path relative to the interface path"
    )
    consumes: Optional[str] = None
    produces: list[str] = Field(default_factory=list)
    parameters: list[GeneratedParameter] = Field(default_factory=list)
    returns: Union[ResponseWrapper, TypeRef]
    doc: Documentation = Field(default_factory=Documentation)

    @property
    def response_wrapper(self) -> Optional[ResponseWrapper]:
        return self.returns if isinstance(self.returns, ResponseWrapper) else None


class GeneratedInterface(BaseModel):
    """The interface generated for one top-level resource."""

    name: str
    path: str
    description: Optional[str] = None
    methods: list[GeneratedMethod] = Field(default_factory=list)


# --- Configuration ---


class GeneratorConfig(BaseModel):
    """Settings for one generation run.

    Only ``use_validation`` is read by the compiler itself; the other
    fields are consumed by naming and emission.

    See Also:
        :func:`~ramlgen.config.resolve_config`: Precedence resolution.
        :func:`~ramlgen.config.validate_config`: Pre-flight checks.
    """

    output_dir: Optional[Path] = Field(
        default=None, description="Directory receiving generated artifacts"
    )
    base_package: str = Field(
        default="generated", description="Package prefix for artifact names"
    )
    use_validation: bool = Field(
        default=True, description="Attach validation constraints to parameters"
    )
    emit_indent: int = Field(default=2, description="JSON indent for emitted files")

"""Build an :class:`~ramlgen.models.ApiDescription` from a raw RAML mapping.

This module walks the dictionary produced by
:func:`~ramlgen.parser.loader.load_description` and builds the resource
tree the compiler reads. It understands the RAML 0.8 structure:

* root keys (``title``, ``version``, ``baseUri``, ``mediaType``,
  ``schemas``) and ``/``-prefixed resource keys;
* per resource: ``displayName``, ``description``, ``uriParameters``, one
  key per HTTP verb, and nested ``/``-prefixed child resources;
* per action: ``description``, ``headers``, ``queryParameters``, ``body``
  and ``responses``;
* named parameters with their validation facets.

Structural problems do not stop the walk. Every problem is collected with
its location and reported at once through a single
:class:`~ramlgen.exceptions.DescriptionInvalidError`.

Resource types, traits and ``!include`` are not expanded. Their keys are
accepted and ignored with a warning.
"""

from __future__ import annotations

import json
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ramlgen.exceptions import DescriptionInvalidError
from ramlgen.models import (
    Action,
    ActionType,
    ApiDescription,
    MimeType,
    Parameter,
    ParamType,
    Resource,
    Response,
)

logger = logging.getLogger(__name__)

_VERBS = {action_type.value.lower(): action_type for action_type in ActionType}

_ROOT_KEYS = frozenset(
    {
        "title",
        "version",
        "baseUri",
        "baseUriParameters",
        "protocols",
        "mediaType",
        "schemas",
        "documentation",
        "securitySchemes",
        "securedBy",
        "traits",
        "resourceTypes",
    }
)
_RESOURCE_KEYS = frozenset(
    {"displayName", "description", "uriParameters", "baseUriParameters", "type", "is", "securedBy"}
)
_ACTION_KEYS = frozenset(
    {
        "description",
        "headers",
        "queryParameters",
        "body",
        "responses",
        "protocols",
        "baseUriParameters",
        "is",
        "securedBy",
    }
)
_RESPONSE_KEYS = frozenset({"description", "headers", "body"})
_MIME_KEYS = frozenset({"schema", "example", "formParameters"})

# Keys of resource types and traits, which are never expanded.
_IGNORED_KEYS = frozenset({"traits", "resourceTypes", "type", "is"})

_PARAMETER_FIELDS = {
    "displayName": "display_name",
    "description": "description",
    "type": "type",
    "required": "required",
    "default": "default_value",
    "minLength": "min_length",
    "maxLength": "max_length",
    "minimum": "minimum",
    "maximum": "maximum",
    "pattern": "pattern",
    "enum": "enum",
    "repeat": "repeat",
    "example": None,
}

FORM_MEDIA_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

_URI_TEMPLATE_VARIABLE = re.compile(r"\{([^{}/]+)\}")


def build_description(raw: dict[str, Any]) -> ApiDescription:
    """Build an :class:`~ramlgen.models.ApiDescription` from a raw RAML dict.

    Args:
        raw: The mapping returned by
            :func:`~ramlgen.parser.loader.load_description`.

    Returns:
        The description with its resource tree and named schemas.

    Raises:
        DescriptionInvalidError: If the mapping has one or more structural
            problems. All of them are listed in the exception's ``errors``.

    Example::

        raw = load_description("api.raml")
        description = build_description(raw)
        for uri, resource in description.resources.items():
            print(uri, [t.value for t in resource.actions])
    """
    return _DescriptionBuilder(raw).build()


class _DescriptionBuilder:
    """One-shot builder holding the errors found so far."""

    def __init__(self, raw: dict[str, Any]) -> None:
        self.raw = raw
        self.errors: list[str] = []
        self.default_media_type: Optional[str] = None

    def error(self, location: str, message: str) -> None:
        self.errors.append(f"{location}: {message}")

    def build(self) -> ApiDescription:
        raw = self.raw
        location = "(root)"

        title = self.text(raw.get("title"), location, "title")
        if title is None:
            self.error(location, "missing required key 'title'")

        self.default_media_type = self.text(raw.get("mediaType"), location, "mediaType")

        resources: dict[str, Resource] = {}
        for key, value in raw.items():
            key = str(key)
            if key.startswith("/"):
                resource = self.resource(key, value, key)
                if resource is not None:
                    resources[key] = resource
            elif key in _IGNORED_KEYS:
                logger.warning("Ignoring '%s': resource types and traits are not expanded", key)
            elif key not in _ROOT_KEYS:
                self.error(location, f"unknown key '{key}'")

        description = ApiDescription(
            title=title or "Untitled API",
            version=self.text(raw.get("version"), location, "version"),
            base_uri=self.text(raw.get("baseUri"), location, "baseUri"),
            schemas=self.schemas(raw.get("schemas")),
            resources=resources,
        )

        if self.errors:
            raise DescriptionInvalidError(self.errors)
        return description

    # --- Scalars ---

    def text(self, value: Any, location: str, key: str) -> Optional[str]:
        """Return *value* as a string; numbers and booleans are stringified."""
        if value is None:
            return None
        if isinstance(value, (dict, list)):
            self.error(location, f"'{key}' must be a scalar")
            return None
        return str(value)

    def schemas(self, raw: Any) -> dict[str, str]:
        """Collect named schemas from a list of one-key maps or a plain map."""
        location = "(root)/schemas"
        if raw is None:
            return {}
        if isinstance(raw, dict):
            entries = [raw]
        elif isinstance(raw, list):
            entries = raw
        else:
            self.error(location, "must be a map or a list of maps")
            return {}

        schemas: dict[str, str] = {}
        for entry in entries:
            if not isinstance(entry, dict):
                self.error(location, "each entry must be a map of name to schema")
                continue
            for name, schema in entry.items():
                text = self.schema_text(schema, f"{location}/{name}")
                if text is not None:
                    schemas[str(name)] = text
        return schemas

    def schema_text(self, value: Any, location: str) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, str):
            return value
        if isinstance(value, dict):
            return json.dumps(value, indent=2)
        self.error(location, "schema must be a string or a map")
        return None

    # --- Resources and actions ---

    def resource(self, relative_uri: str, data: Any, location: str) -> Optional[Resource]:
        if data is None:
            data = {}
        if not isinstance(data, dict):
            self.error(location, "resource must be a map")
            return None

        actions: dict[ActionType, Action] = {}
        children: dict[str, Resource] = {}
        for key, value in data.items():
            key = str(key)
            if key.startswith("/"):
                child = self.resource(key, value, location + key)
                if child is not None:
                    children[key] = child
            elif key in _VERBS:
                action = self.action(_VERBS[key], value, f"{location}/{key}")
                if action is not None:
                    actions[action.type] = action
            elif key in _IGNORED_KEYS:
                logger.warning(
                    "Ignoring '%s' on %s: resource types and traits are not expanded",
                    key,
                    location,
                )
            elif key not in _RESOURCE_KEYS:
                self.error(location, f"unknown key '{key}'")

        uri_parameters = self.parameters(
            data.get("uriParameters"), f"{location}/uriParameters", required=True
        )
        for name in _URI_TEMPLATE_VARIABLE.findall(relative_uri):
            if name not in uri_parameters:
                logger.debug("Implicit URI parameter '%s' on %s", name, location)
                uri_parameters[name] = Parameter(required=True)

        return Resource(
            relative_uri=relative_uri,
            display_name=self.text(data.get("displayName"), location, "displayName"),
            description=self.text(data.get("description"), location, "description"),
            uri_parameters=uri_parameters,
            actions=actions,
            resources=children,
        )

    def action(self, action_type: ActionType, data: Any, location: str) -> Optional[Action]:
        if data is None:
            data = {}
        if not isinstance(data, dict):
            self.error(location, "action must be a map")
            return None
        self.check_keys(data, _ACTION_KEYS, location)

        return Action(
            type=action_type,
            description=self.text(data.get("description"), location, "description"),
            headers=self.parameters(data.get("headers"), f"{location}/headers"),
            query_parameters=self.parameters(
                data.get("queryParameters"), f"{location}/queryParameters"
            ),
            body=self.bodies(data.get("body"), f"{location}/body", request=True),
            responses=self.responses(data.get("responses"), f"{location}/responses"),
        )

    def responses(self, raw: Any, location: str) -> dict[str, Response]:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            self.error(location, "responses must be a map of status code to response")
            return {}

        responses: dict[str, Response] = {}
        for status, data in raw.items():
            status_location = f"{location}/{status}"
            if data is None:
                data = {}
            if not isinstance(data, dict):
                self.error(status_location, "response must be a map")
                continue
            self.check_keys(data, _RESPONSE_KEYS, status_location)
            responses[str(status)] = Response(
                description=self.text(data.get("description"), status_location, "description"),
                headers=self.parameters(data.get("headers"), f"{status_location}/headers"),
                body=self.bodies(data.get("body"), f"{status_location}/body", request=False),
            )
        return responses

    # --- Bodies ---

    def bodies(self, raw: Any, location: str, request: bool) -> dict[str, MimeType]:
        """Build the media type map of a request or response body.

        A body whose keys are body attributes rather than media types uses
        the root ``mediaType``.
        """
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            self.error(location, "body must be a map of media type to body")
            return {}

        if raw and all(key in _MIME_KEYS for key in raw):
            if self.default_media_type is None:
                self.error(location, "body has no media type and no default 'mediaType' is set")
                return {}
            raw = {self.default_media_type: raw}

        bodies: dict[str, MimeType] = {}
        for media_type, data in raw.items():
            mime = self.mime_type(str(media_type), data, f"{location}/{media_type}", request)
            if mime is not None:
                bodies[mime.type] = mime
        return bodies

    def mime_type(
        self, media_type: str, data: Any, location: str, request: bool
    ) -> Optional[MimeType]:
        if data is None:
            return MimeType(type=media_type)
        if not isinstance(data, dict):
            self.error(location, "body must be a map")
            return None
        self.check_keys(data, _MIME_KEYS, location)

        form_parameters: dict[str, list[Parameter]] = {}
        raw_form = data.get("formParameters")
        if raw_form is not None:
            if not request or media_type not in FORM_MEDIA_TYPES:
                self.error(
                    location,
                    "formParameters are only allowed on request bodies of type "
                    + " or ".join(FORM_MEDIA_TYPES),
                )
            else:
                form_parameters = self.form_parameters(raw_form, f"{location}/formParameters")

        schema = data.get("schema")
        return MimeType(
            type=media_type,
            schema=self.schema_text(schema, f"{location}/schema"),
            example=self.text(data.get("example"), location, "example"),
            form_parameters=form_parameters,
        )

    def form_parameters(self, raw: Any, location: str) -> dict[str, list[Parameter]]:
        """Form fields may be declared with several types as a list."""
        if not isinstance(raw, dict):
            self.error(location, "formParameters must be a map")
            return {}

        fields: dict[str, list[Parameter]] = {}
        for name, data in raw.items():
            declarations = data if isinstance(data, list) else [data]
            parameters = []
            for declaration in declarations:
                parameter = self.parameter(declaration, f"{location}/{name}", required=False)
                if parameter is not None:
                    parameters.append(parameter)
            if parameters:
                fields[str(name)] = parameters
        return fields

    # --- Named parameters ---

    def parameters(self, raw: Any, location: str, required: bool = False) -> dict[str, Parameter]:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            self.error(location, "must be a map of name to parameter")
            return {}

        parameters: dict[str, Parameter] = {}
        for name, data in raw.items():
            param_location = f"{location}/{name}"
            if isinstance(data, list):
                if not data:
                    self.error(param_location, "empty list of declarations")
                    continue
                logger.warning(
                    "%s declares %d types; only the first is used", param_location, len(data)
                )
                data = data[0]
            parameter = self.parameter(data, param_location, required)
            if parameter is not None:
                parameters[str(name)] = parameter
        return parameters

    def parameter(self, data: Any, location: str, required: bool) -> Optional[Parameter]:
        """Build one named parameter; *required* is the default when not declared."""
        if data is None:
            return Parameter(required=required)
        if not isinstance(data, dict):
            self.error(location, "parameter must be a map")
            return None

        fields: dict[str, Any] = {"required": required}
        for key, value in data.items():
            if key not in _PARAMETER_FIELDS:
                self.error(location, f"unknown key '{key}'")
                continue
            field = _PARAMETER_FIELDS[key]
            if field is None or value is None:
                continue

            if field == "type":
                try:
                    fields[field] = ParamType(value)
                except ValueError:
                    allowed = ", ".join(t.value for t in ParamType)
                    self.error(location, f"invalid type '{value}', expected one of: {allowed}")
            elif field in ("required", "repeat"):
                if isinstance(value, bool):
                    fields[field] = value
                else:
                    self.error(location, f"'{key}' must be a boolean")
            elif field in ("min_length", "max_length"):
                if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
                    fields[field] = value
                else:
                    self.error(location, f"'{key}' must be a non-negative integer")
            elif field in ("minimum", "maximum"):
                number = _to_decimal(value)
                if number is None:
                    self.error(location, f"'{key}' must be a number")
                else:
                    fields[field] = number
            elif field == "default_value":
                fields[field] = _default_text(value)
            elif field == "enum":
                if isinstance(value, list):
                    fields[field] = [str(item) for item in value]
                else:
                    self.error(location, "'enum' must be a list")
            else:
                text = self.text(value, location, key)
                if text is not None:
                    fields[field] = text

        return Parameter(**fields)

    def check_keys(self, data: dict[str, Any], allowed: frozenset[str], location: str) -> None:
        for key in data:
            if key in _IGNORED_KEYS:
                logger.warning(
                    "Ignoring '%s' on %s: resource types and traits are not expanded",
                    key,
                    location,
                )
            elif key not in allowed:
                self.error(location, f"unknown key '{key}'")


def _to_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, str)):
        try:
            number = Decimal(str(value))
        except InvalidOperation:
            return None
        return number if number.is_finite() else None
    return None


def _default_text(value: Any) -> str:
    """YAML booleans are written back the way RAML spells them."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)

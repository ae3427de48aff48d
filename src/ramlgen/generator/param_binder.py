"""Bind declared RAML parameters and bodies to generated method parameters.

This module bridges the description's named parameters and the arguments
of a :class:`~ramlgen.models.GeneratedMethod`. Every bound argument gets:

* an identifier from the naming policy (the declared name is kept in the
  :class:`~ramlgen.models.Binding` so the HTTP layer can find it again);
* a type from the type resolver;
* a default-value entry when the parameter declares one;
* validation constraints, when the run has validation enabled;
* one documentation entry.

**Body rules:**

* ``application/x-www-form-urlencoded`` -- one form-bound argument per
  field, unless some field is declared with more than one type, in which
  case a single catch-all ``dict[str, list[str]]`` argument is used.
* ``multipart/form-data`` -- a single catch-all multipart argument.
* anything else -- a single payload argument typed by the request entity.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from ramlgen.generator.context import GenerationContext
from ramlgen.generator.naming import make_unique
from ramlgen.generator.types import MULTIPART_BODY, MULTIVALUED_FORM
from ramlgen.models import (
    Action,
    ActionType,
    Binding,
    BindingKind,
    Constraint,
    GeneratedMethod,
    GeneratedParameter,
    MaxConstraint,
    MimeType,
    MinConstraint,
    NotNullConstraint,
    Parameter,
    SizeConstraint,
    TypeRef,
    verb_requires_body,
)

logger = logging.getLogger(__name__)

GENERIC_PAYLOAD_ARGUMENT = "entity"
FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART_FORM_DATA = "multipart/form-data"

# Bounds of the signed 64-bit integers that integer constraints carry.
_INTEGER_MIN = -(2**63)
_INTEGER_MAX = 2**63 - 1


def describe_parameter(parameter: Parameter) -> str:
    """Join display name and description with ``" - "`` when both are present."""
    parts = [p for p in (parameter.display_name, parameter.description) if p and p.strip()]
    return " - ".join(parts)


def exact_integer(value: Decimal) -> Optional[int]:
    """Convert *value* to ``int`` without loss, or return ``None``.

    Fractional values and values outside the signed 64-bit range cannot be
    expressed as an integer bound.
    """
    if not value.is_finite() or value != value.to_integral_value():
        return None
    result = int(value)
    if not _INTEGER_MIN <= result <= _INTEGER_MAX:
        return None
    return result


class ParameterBinder:
    """Adds bound parameters to generated methods for one compilation run."""

    def __init__(self, context: GenerationContext) -> None:
        self.context = context

    # ------------------------------------------------------------------ #
    # Declared parameters
    # ------------------------------------------------------------------ #

    def add_path_parameters(self, action: Action, method: GeneratedMethod) -> None:
        """Bind the URI parameters of the action's resource and all its ancestors."""
        resource = action.resource
        while resource is not None:
            for name, parameter in resource.uri_parameters.items():
                self.bind(name, parameter, BindingKind.PATH, method)
            resource = resource.parent

    def add_header_parameters(self, action: Action, method: GeneratedMethod) -> None:
        for name, parameter in action.headers.items():
            self.bind(name, parameter, BindingKind.HEADER, method)

    def add_query_parameters(self, action: Action, method: GeneratedMethod) -> None:
        for name, parameter in action.query_parameters.items():
            self.bind(name, parameter, BindingKind.QUERY, method)

    def bind(
        self,
        name: str,
        parameter: Parameter,
        kind: BindingKind,
        method: GeneratedMethod,
    ) -> GeneratedParameter:
        """Bind one declared parameter to *method* and document it."""
        argument = GeneratedParameter(
            name=argument_name(method, self.context.naming.variable_name(name)),
            type=self.context.types.parameter_type(parameter),
            binding=Binding(kind=kind, name=name),
            default_value=parameter.default_value,
        )
        if self.context.config.use_validation:
            argument.constraints = self.validation_constraints(name, parameter)

        method.parameters.append(argument)
        method.doc.add_param(argument.name, describe_parameter(parameter))
        return argument

    def validation_constraints(self, name: str, parameter: Parameter) -> list[Constraint]:
        """Derive the constraints expressible for *parameter*.

        Bounds that are not exact integers are skipped with a diagnostic;
        patterns are never translated.
        """
        if parameter.pattern and parameter.pattern.strip():
            logger.info("Pattern constraint ignored for parameter '%s'", name)

        constraints: list[Constraint] = []
        if parameter.min_length is not None or parameter.max_length is not None:
            constraints.append(
                SizeConstraint(min=parameter.min_length, max=parameter.max_length)
            )

        if parameter.minimum is not None:
            bound = self._integer_bound(name, "minimum", parameter.minimum)
            if bound is not None:
                constraints.append(MinConstraint(value=bound))

        if parameter.maximum is not None:
            bound = self._integer_bound(name, "maximum", parameter.maximum)
            if bound is not None:
                constraints.append(MaxConstraint(value=bound))

        if parameter.required:
            constraints.append(NotNullConstraint())
        return constraints

    @staticmethod
    def _integer_bound(name: str, facet: str, value: Decimal) -> Optional[int]:
        bound = exact_integer(value)
        if bound is None:
            logger.info(
                "Non integer %s constraint ignored for parameter '%s': %s",
                facet, name, value,
            )
        return bound

    # ------------------------------------------------------------------ #
    # Bodies
    # ------------------------------------------------------------------ #

    def add_body_parameters(
        self,
        action_type: ActionType,
        body_mime_type: Optional[MimeType],
        method: GeneratedMethod,
    ) -> None:
        """Bind the request body for *body_mime_type*.

        A verb that carries a body gets a payload argument even when the
        action declares no body media type.
        """
        if body_mime_type is None and not verb_requires_body(action_type):
            return
        if body_mime_type is not None and body_mime_type.type == FORM_URLENCODED:
            self._add_form_parameters(body_mime_type, method)
        elif body_mime_type is not None and body_mime_type.type == MULTIPART_FORM_DATA:
            self._add_catch_all_argument(body_mime_type, method, MULTIPART_BODY)
        else:
            self._add_plain_body_argument(body_mime_type, method)

    def _add_form_parameters(self, body_mime_type: MimeType, method: GeneratedMethod) -> None:
        if has_multi_type_form_parameter(body_mime_type):
            self._add_catch_all_argument(body_mime_type, method, MULTIVALUED_FORM)
            return
        for name, declarations in body_mime_type.form_parameters.items():
            if declarations:
                self.bind(name, declarations[0], BindingKind.FORM, method)

    def _add_catch_all_argument(
        self,
        body_mime_type: MimeType,
        method: GeneratedMethod,
        argument_type: TypeRef,
    ) -> None:
        argument = argument_name(method, GENERIC_PAYLOAD_ARGUMENT)
        method.parameters.append(GeneratedParameter(name=argument, type=argument_type))
        for name, declarations in body_mime_type.form_parameters.items():
            lines = [f"{name}: "]
            lines.extend(describe_parameter(p) + "\n" for p in declarations)
            method.doc.add_param(argument, "".join(lines))

    def _add_plain_body_argument(
        self,
        body_mime_type: Optional[MimeType],
        method: GeneratedMethod,
    ) -> None:
        if body_mime_type is None:
            entity_type = self.context.types.request_entity_type(
                MimeType(type="application/octet-stream")
            )
        else:
            entity_type = self.context.types.request_entity_type(body_mime_type)
        argument = argument_name(method, GENERIC_PAYLOAD_ARGUMENT)
        method.parameters.append(GeneratedParameter(name=argument, type=entity_type))
        method.doc.add_param(argument, "the request body")


def argument_name(method: GeneratedMethod, name: str) -> str:
    """Return *name*, suffixed when another argument of *method* already uses it."""
    return make_unique(name, (p.name for p in method.parameters))


def has_multi_type_form_parameter(body_mime_type: MimeType) -> bool:
    """Return ``True`` when some form field is declared with more than one type."""
    return any(len(declarations) > 1 for declarations in body_mime_type.form_parameters.values())

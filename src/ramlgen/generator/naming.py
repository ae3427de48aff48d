"""Derive identifiers for generated interfaces, methods, factories and arguments.

The compiler never builds identifiers itself; it asks a :class:`NamingPolicy`.
:class:`DefaultNamingPolicy` is the policy used unless the caller supplies
another one. All of its methods are pure functions of their inputs, so the
same description always yields the same names. Uniqueness inside one
interface or one response wrapper is the job of
:func:`make_unique`, applied by the generation context.

**Naming rules** (default policy):

* Interfaces -- PascalCase of the static URI segments (``/widgets/{id}``
  becomes ``Widgets``).
* Methods -- lowercase verb, then the residual path below the interface
  (URI parameters become ``By<Name>``), then the short media type when the
  action is split by request body (``putJson``, ``getById``).
* Response factories -- short media type plus the HTTP reason phrase
  (``jsonOk``), or the reason phrase alone for body-less responses
  (``noContent``).
* Arguments -- snake_case, keyword-safe (``X-Request-Id`` becomes
  ``x_request_id``).
"""

from __future__ import annotations

import keyword
import re
from http import HTTPStatus
from typing import Iterable, Optional, Protocol

from ramlgen.models import ActionType

# Matches any character that is not alphanumeric or underscore.
_INVALID_IDENT_RE = re.compile(r"[^a-zA-Z0-9_]")
_WORD_SPLIT_RE = re.compile(r"[^a-zA-Z0-9]+")
_LOWER_UPPER_RE = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")

_MEDIA_TYPE_PREFIXES = ("x-", "vnd.")


class NamingPolicy(Protocol):
    """Identifier derivation required by the compiler."""

    def interface_name(self, uri: str) -> str: ...

    def method_name(
        self,
        action_type: ActionType,
        residual_path: str,
        media_type: Optional[str] = None,
    ) -> str: ...

    def response_type_name(self, method_name: str) -> str: ...

    def factory_name(self, status: int, media_type: Optional[str] = None) -> str: ...

    def variable_name(self, name: str) -> str: ...


# ---------------------------------------------------------------------------
# Case helpers
# ---------------------------------------------------------------------------


def split_words(value: str) -> list[str]:
    """Split *value* on separators and camelCase boundaries."""
    value = _ACRONYM_RE.sub(r"\1_\2", value)
    value = _LOWER_UPPER_RE.sub(r"\1_\2", value)
    return [w for w in _WORD_SPLIT_RE.split(value) if w]


def pascal_case(value: str) -> str:
    return "".join(w[:1].upper() + w[1:].lower() for w in split_words(value))


def camel_case(value: str) -> str:
    result = pascal_case(value)
    return result[:1].lower() + result[1:]


def safe_identifier(name: str, fallback: str) -> str:
    """Make *name* a valid Python identifier that is not a keyword."""
    name = _INVALID_IDENT_RE.sub("_", name) or fallback
    if name[0].isdigit():
        name = f"_{name}"
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name


def make_unique(name: str, taken: Iterable[str]) -> str:
    """Return *name*, or *name* with the lowest numeric suffix from 2 not in *taken*."""
    existing = set(taken)
    if name not in existing:
        return name
    counter = 2
    while f"{name}{counter}" in existing:
        counter += 1
    return f"{name}{counter}"


def short_media_type(media_type: str) -> str:
    """Reduce a media type to a short camelCase token.

    ``application/json`` -> ``json``, ``application/vnd.acme+xml`` -> ``xml``,
    ``application/x-www-form-urlencoded`` -> ``wwwFormUrlencoded``.
    """
    subtype = media_type.split(";", 1)[0].strip().split("/")[-1]
    if "+" in subtype:
        subtype = subtype.rsplit("+", 1)[1]
    for prefix in _MEDIA_TYPE_PREFIXES:
        if subtype.startswith(prefix):
            subtype = subtype[len(prefix):]
    return camel_case(subtype) or "any"


def _uri_segments(uri: str) -> list[str]:
    return [s for s in uri.split("/") if s]


def _is_uri_parameter(segment: str) -> bool:
    return segment.startswith("{") and segment.endswith("}")


# ---------------------------------------------------------------------------
# Default policy
# ---------------------------------------------------------------------------


class DefaultNamingPolicy:
    """Naming policy used when the caller does not provide one."""

    def interface_name(self, uri: str) -> str:
        static = [s for s in _uri_segments(uri) if not _is_uri_parameter(s)]
        name = "".join(pascal_case(s) for s in static)
        return safe_identifier(name, "Root") if name else "Root"

    def method_name(
        self,
        action_type: ActionType,
        residual_path: str,
        media_type: Optional[str] = None,
    ) -> str:
        parts = [action_type.value.lower()]
        for segment in _uri_segments(residual_path):
            if _is_uri_parameter(segment):
                parts.append("By" + pascal_case(segment[1:-1]))
            else:
                parts.append(pascal_case(segment))
        if media_type is not None:
            parts.append(pascal_case(short_media_type(media_type)))
        return safe_identifier("".join(parts), "method")

    def response_type_name(self, method_name: str) -> str:
        return method_name[:1].upper() + method_name[1:] + "Response"

    def factory_name(self, status: int, media_type: Optional[str] = None) -> str:
        try:
            reason = pascal_case(HTTPStatus(status).phrase)
        except ValueError:
            reason = f"Status{status}"
        if media_type is None:
            return safe_identifier(reason[:1].lower() + reason[1:], "respond")
        return safe_identifier(short_media_type(media_type) + reason, "respond")

    def variable_name(self, name: str) -> str:
        words = [w.lower() for w in split_words(name)]
        return safe_identifier("_".join(words), "param")

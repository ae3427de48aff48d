"""Apply response factory descriptors to produce concrete HTTP responses.

A :class:`~ramlgen.models.ResponseWrapper` only describes its factories.
:func:`build_response` executes one of them: it sets the status, the
content type, every declared header, every value of the free-form header
map and the entity, and wraps the resulting :class:`httpx.Response` in a
:class:`WrappedResponse`. This is what a server-side handler generated
from the model returns, and it lets the model's factories be exercised
directly.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from ramlgen.exceptions import ResponseBuildError
from ramlgen.models import ResponseFactory, ResponseWrapper


class WrappedResponse:
    """A response produced by a factory of one :class:`~ramlgen.models.ResponseWrapper`.

    Instances are created by :func:`build_response` only. The wrapped
    :class:`httpx.Response` is owned, never copied.
    """

    __slots__ = ("_delegate", "_wrapper_name", "_factory_name")

    def __init__(self, delegate: httpx.Response, wrapper_name: str, factory_name: str) -> None:
        self._delegate = delegate
        self._wrapper_name = wrapper_name
        self._factory_name = factory_name

    @property
    def delegate(self) -> httpx.Response:
        return self._delegate

    @property
    def status_code(self) -> int:
        return self._delegate.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._delegate.headers

    @property
    def factory_name(self) -> str:
        return self._factory_name

    def __repr__(self) -> str:
        return (
            f"<{self._wrapper_name}.{self._factory_name} "
            f"status={self._delegate.status_code}>"
        )


def build_response(
    wrapper: ResponseWrapper, factory_name: str, *args: Any, **kwargs: Any
) -> WrappedResponse:
    """Apply the factory named *factory_name* of *wrapper*.

    Positional arguments follow the factory's parameter order; keyword
    arguments use the parameter names.

    Raises:
        ResponseBuildError: If the factory does not exist, or arguments are
            missing, unknown or given twice.
    """
    try:
        factory = wrapper.factory(factory_name)
    except KeyError:
        raise ResponseBuildError(
            f"{wrapper.name} has no factory '{factory_name}'"
        ) from None

    values = _bind_arguments(wrapper, factory, args, kwargs)

    if factory.status_argument is not None:
        status = int(values[factory.status_argument])
    else:
        status = factory.status if factory.status is not None else 0

    headers: list[tuple[str, str]] = []
    if factory.media_type is not None:
        headers.append(("Content-Type", factory.media_type))
    for header_name, argument in factory.headers.items():
        value = values[argument]
        if value is not None:
            headers.append((header_name, str(value)))
    if factory.multiple_headers_argument is not None:
        free_form = values[factory.multiple_headers_argument] or {}
        for header_name, header_values in free_form.items():
            headers.extend((header_name, str(v)) for v in header_values)

    entity = values[factory.payload_argument] if factory.payload_argument else None
    response = httpx.Response(status, headers=headers, **_entity_kwargs(entity))
    return WrappedResponse(response, wrapper.name, factory.name)


def _bind_arguments(
    wrapper: ResponseWrapper,
    factory: ResponseFactory,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> dict[str, Any]:
    names = [p.name for p in factory.parameters]
    qualified = f"{wrapper.name}.{factory.name}"
    if len(args) > len(names):
        raise ResponseBuildError(
            f"{qualified} takes {len(names)} arguments but {len(args)} were given"
        )

    values = dict(zip(names, args))
    for name, value in kwargs.items():
        if name not in names:
            raise ResponseBuildError(f"{qualified} got an unexpected argument '{name}'")
        if name in values:
            raise ResponseBuildError(f"{qualified} got multiple values for '{name}'")
        values[name] = value

    missing = [n for n in names if n not in values]
    if missing:
        raise ResponseBuildError(f"{qualified} missing arguments: {', '.join(missing)}")
    return values


def _entity_kwargs(entity: Any) -> dict[str, Any]:
    """Choose how httpx should encode *entity*."""
    if entity is None:
        return {}
    if isinstance(entity, (bytes, str)):
        return {"content": entity}
    if isinstance(entity, (Mapping, list, int, float, bool)):
        return {"json": entity}
    if isinstance(entity, Iterable):
        return {"content": entity}
    return {"json": entity}

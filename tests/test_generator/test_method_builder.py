"""Tests for ramlgen.generator.method_builder.

Covers:
- residual path computation
- one method per action, or one per request media type
- return type: void only without any response, wrapper otherwise
- binding metadata and parameter order
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from ramlgen.generator.context import GenerationContext
from ramlgen.generator.method_builder import MethodSynthesizer, residual_path
from ramlgen.generator.types import VOID
from ramlgen.models import (
    Action,
    ActionType,
    ApiDescription,
    BindingKind,
    GeneratedInterface,
    MimeType,
    Resource,
    ResponseWrapper,
)


@pytest.fixture
def synthesizer(context: GenerationContext) -> MethodSynthesizer:
    return MethodSynthesizer(context)


@pytest.fixture
def interface(context: GenerationContext) -> GeneratedInterface:
    return context.create_interface("Widgets", "widgets")


def _attach(action: Action, relative_uri: str = "/widgets") -> Action:
    Resource(relative_uri=relative_uri, actions={action.type: action})
    return action


class TestResidualPath:
    @pytest.mark.parametrize(
        ("uri", "interface_path", "expected"),
        [
            ("/widgets", "widgets", ""),
            ("/widgets/{id}", "widgets", "{id}"),
            ("/widgets/{id}/attachments", "widgets", "{id}/attachments"),
            ("/api/v1/widgets", "api/v1", "widgets"),
            ("/", "/", ""),
            ("//items", "/", "items"),
        ],
    )
    def test_residual(self, uri: str, interface_path: str, expected: str) -> None:
        assert residual_path(uri, interface_path) == expected


class TestMethodCount:
    def test_no_body_gives_one_method(
        self, synthesizer: MethodSynthesizer, interface: GeneratedInterface
    ) -> None:
        methods = synthesizer.add_action_methods(
            interface, "widgets", _attach(Action(type=ActionType.GET))
        )
        assert [m.name for m in methods] == ["get"]
        assert methods[0].consumes is None

    def test_single_body_media_type_not_in_name(
        self, synthesizer: MethodSynthesizer, interface: GeneratedInterface
    ) -> None:
        action = _attach(
            Action(
                type=ActionType.PUT,
                body={"application/json": MimeType(type="application/json")},
            )
        )
        methods = synthesizer.add_action_methods(interface, "widgets", action)
        assert [m.name for m in methods] == ["put"]
        assert methods[0].consumes == "application/json"

    def test_one_method_per_body_media_type(
        self, synthesizer: MethodSynthesizer, interface: GeneratedInterface
    ) -> None:
        action = _attach(
            Action(
                type=ActionType.PUT,
                body={
                    "application/json": MimeType(type="application/json"),
                    "application/xml": MimeType(type="application/xml"),
                    "text/plain": MimeType(type="text/plain"),
                },
            )
        )
        methods = synthesizer.add_action_methods(interface, "widgets", action)

        assert [m.name for m in methods] == ["putJson", "putXml", "putPlain"]
        assert [m.consumes for m in methods] == ["application/json", "application/xml", "text/plain"]
        assert interface.methods == methods
        # each method carries its own parameter list
        assert len({id(m.parameters) for m in methods}) == 3


class TestReturnType:
    def test_void_without_responses(
        self, synthesizer: MethodSynthesizer, interface: GeneratedInterface
    ) -> None:
        (method,) = synthesizer.add_action_methods(
            interface, "widgets", _attach(Action(type=ActionType.DELETE))
        )
        assert method.returns == VOID
        assert method.produces == []

    def test_status_only_responses_get_a_wrapper(
        self,
        make_description: Callable[..., ApiDescription],
        compile_description: Callable[..., GenerationContext],
    ) -> None:
        description = make_description({"/widgets": {"delete": {"responses": {204: None}}}})
        (method,) = compile_description(description).interfaces["Widgets"].methods

        assert isinstance(method.returns, ResponseWrapper)
        assert [f.name for f in method.returns.factories] == ["noContent", "respond"]
        assert method.produces == []

    def test_wrapper_uses_unique_method_name(
        self, synthesizer: MethodSynthesizer, interface: GeneratedInterface
    ) -> None:
        first = _attach(Action(type=ActionType.GET, responses={"200": {}}))
        second = _attach(Action(type=ActionType.GET, responses={"200": {}}))
        synthesizer.add_action_methods(interface, "widgets", first)
        (method,) = synthesizer.add_action_methods(interface, "widgets", second)

        assert method.name == "get2"
        assert method.response_wrapper.name == "Get2Response"


class TestBindingMetadata:
    def test_full_method(
        self,
        make_description: Callable[..., ApiDescription],
        compile_description: Callable[..., GenerationContext],
    ) -> None:
        raw: dict[str, Any] = {
            "/widgets": {
                "/{id}": {
                    "uriParameters": {"id": {"type": "integer"}},
                    "patch": {
                        "description": "Update a widget.",
                        "headers": {"If-Match": {"required": True}},
                        "queryParameters": {"dryRun": {"type": "boolean"}},
                        "body": {"application/json": None},
                        "responses": {
                            200: {"body": {"application/json": None}},
                            412: None,
                        },
                    },
                }
            }
        }
        (method,) = compile_description(make_description(raw)).interfaces["Widgets"].methods

        assert method.name == "patchById"
        assert method.http_method == "PATCH"
        assert method.path == "{id}"
        assert method.consumes == "application/json"
        assert method.produces == ["application/json"]
        assert method.doc.text == ["Update a widget."]
        assert [(p.name, p.binding.kind if p.binding else None) for p in method.parameters] == [
            ("id", BindingKind.PATH),
            ("if_match", BindingKind.HEADER),
            ("dry_run", BindingKind.QUERY),
            ("entity", None),
        ]

    def test_path_omitted_for_interface_resource(
        self, synthesizer: MethodSynthesizer, interface: GeneratedInterface
    ) -> None:
        (method,) = synthesizer.add_action_methods(
            interface, "widgets", _attach(Action(type=ActionType.GET))
        )
        assert method.path is None

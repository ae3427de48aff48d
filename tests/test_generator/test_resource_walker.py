"""Tests for ramlgen.generator.resource_walker.

Exercises the whole compiler on the widgets fixture and on small inline
descriptions:
- one interface per top-level resource, children folded into it
- K methods for an action with K request media types
- void return only for actions without responses
- 2 + 1 factories for two media types under one status
- a single free-form header argument for wildcard headers
- form bodies: catch-all versus one argument per field
- identical input compiles to identical output
"""

from __future__ import annotations

from typing import Callable

import pytest

from ramlgen.generator import compile_resources
from ramlgen.generator.context import GenerationContext
from ramlgen.generator.resource_walker import interface_path
from ramlgen.generator.types import MULTIPART_BODY, MULTIPLE_HEADERS, MULTIVALUED_FORM, VOID
from ramlgen.models import (
    ApiDescription,
    BindingKind,
    GeneratedInterface,
    GeneratedMethod,
    GeneratorConfig,
    MaxConstraint,
    MinConstraint,
    NotNullConstraint,
    Resource,
    SizeConstraint,
    TypeRef,
)


@pytest.fixture
def widgets_context(
    widgets_description: ApiDescription,
    compile_description: Callable[..., GenerationContext],
) -> GenerationContext:
    return compile_description(widgets_description)


@pytest.fixture
def widgets(widgets_context: GenerationContext) -> GeneratedInterface:
    return widgets_context.interfaces["Widgets"]


def _method(interface: GeneratedInterface, name: str) -> GeneratedMethod:
    return next(m for m in interface.methods if m.name == name)


# ------------------------------------------------------------------ #
# Interfaces
# ------------------------------------------------------------------ #


class TestInterfaces:
    def test_one_interface_per_top_level_resource(
        self, widgets_context: GenerationContext
    ) -> None:
        assert list(widgets_context.interfaces) == ["Widgets", "Health", "Root"]

    def test_artifact_names(
        self,
        widgets_description: ApiDescription,
    ) -> None:
        context = GenerationContext(GeneratorConfig(base_package="com.acme"), widgets_description)
        names = compile_resources(widgets_description.resources.values(), context)
        assert names == {
            "com.acme.resource.Widgets",
            "com.acme.resource.Health",
            "com.acme.resource.Root",
        }

    def test_interface_path_and_description(self, widgets_context: GenerationContext) -> None:
        widgets = widgets_context.interfaces["Widgets"]
        assert widgets.path == "widgets"
        assert widgets.description == "The widget collection."
        assert widgets_context.interfaces["Root"].path == "/"
        assert widgets_context.interfaces["Health"].description is None

    def test_interface_path_strips_slashes(self) -> None:
        assert interface_path(Resource(relative_uri="/api/v1/")) == "api/v1"
        assert interface_path(Resource(relative_uri="/")) == "/"

    def test_children_fold_into_parent_interface(self, widgets: GeneratedInterface) -> None:
        assert [m.name for m in widgets.methods] == [
            "get",
            "putJson",
            "putXml",
            "post",
            "getById",
            "deleteById",
            "postByIdAttachments",
        ]
        assert _method(widgets, "postByIdAttachments").path == "{id}/attachments"

    def test_empty_resource_list(self, context: GenerationContext) -> None:
        assert compile_resources([], context) == set()
        assert context.interfaces == {}

    def test_colliding_interface_names(
        self,
        make_description: Callable[..., ApiDescription],
        compile_description: Callable[..., GenerationContext],
    ) -> None:
        description = make_description({"/widgets": {"get": None}, "/widgets/{id}": {"get": None}})
        context = compile_description(description)
        assert list(context.interfaces) == ["Widgets", "Widgets2"]


# ------------------------------------------------------------------ #
# Methods and responses
# ------------------------------------------------------------------ #


class TestWidgetsMethods:
    def test_list_widgets(self, widgets: GeneratedInterface) -> None:
        method = _method(widgets, "get")

        assert method.http_method == "GET"
        assert method.path is None
        assert method.produces == ["application/json", "application/xml"]
        assert method.doc.text == ["List widgets."]
        assert [p.name for p in method.parameters] == ["x_request_id", "page", "q"]

        page = method.parameters[1]
        assert page.type == TypeRef(name="int")
        assert page.default_value == "1"
        assert page.constraints == [MinConstraint(value=1), MaxConstraint(value=1000)]
        assert method.parameters[2].constraints == [SizeConstraint(min=1, max=64)]

    def test_two_media_types_under_one_status(self, widgets: GeneratedInterface) -> None:
        wrapper = _method(widgets, "get").response_wrapper
        assert wrapper.name == "GetResponse"
        assert [f.name for f in wrapper.factories] == ["jsonOk", "xmlOk", "respond"]

    def test_wildcard_headers_collapse(self, widgets: GeneratedInterface) -> None:
        factory = _method(widgets, "get").response_wrapper.factory("jsonOk")
        assert [(p.name, p.type) for p in factory.parameters] == [
            ("x_total_count", TypeRef(name="int")),
            ("headers", MULTIPLE_HEADERS),
            ("entity", TypeRef(name="Widget")),
        ]

    def test_put_split_by_media_type(self, widgets: GeneratedInterface) -> None:
        put_json = _method(widgets, "putJson")
        put_xml = _method(widgets, "putXml")

        assert put_json.parameters[-1].type == TypeRef(name="Widget")
        assert put_xml.parameters[-1].type == TypeRef(name="BinaryIO")
        assert put_json.response_wrapper.name == "PutJsonResponse"
        assert put_xml.response_wrapper.name == "PutXmlResponse"
        assert put_json.parameters is not put_xml.parameters

    def test_form_fields_bound_individually(self, widgets: GeneratedInterface) -> None:
        method = _method(widgets, "post")
        assert method.consumes == "application/x-www-form-urlencoded"
        assert [(p.name, p.binding.kind) for p in method.parameters] == [
            ("name", BindingKind.FORM),
            ("size", BindingKind.FORM),
        ]
        assert method.parameters[0].constraints == [NotNullConstraint()]
        created = method.response_wrapper.factory("created")
        assert created.headers == {"Location": "location"}

    def test_get_by_id(self, widgets: GeneratedInterface) -> None:
        method = _method(widgets, "getById")
        assert method.path == "{id}"
        (identifier,) = method.parameters
        assert identifier.binding.kind == BindingKind.PATH
        assert identifier.constraints == [NotNullConstraint()]
        assert [f.name for f in method.response_wrapper.factories] == [
            "jsonOk",
            "notFound",
            "respond",
        ]

    def test_void_for_actions_without_responses(
        self, widgets: GeneratedInterface, widgets_context: GenerationContext
    ) -> None:
        assert _method(widgets, "deleteById").returns == VOID
        assert widgets_context.interfaces["Health"].methods[0].returns == VOID

    def test_multipart_catch_all_with_inherited_path_parameter(
        self, widgets: GeneratedInterface
    ) -> None:
        method = _method(widgets, "postByIdAttachments")
        assert [(p.name, p.type) for p in method.parameters] == [
            ("id", TypeRef(name="int")),
            ("entity", MULTIPART_BODY),
        ]


class TestFormBodies:
    def test_multi_type_field_gives_catch_all(
        self,
        make_description: Callable[..., ApiDescription],
        compile_description: Callable[..., GenerationContext],
    ) -> None:
        description = make_description(
            {
                "/upload": {
                    "post": {
                        "body": {
                            "application/x-www-form-urlencoded": {
                                "formParameters": {
                                    "x": [{"type": "string"}, {"type": "file"}],
                                    "y": {"type": "integer"},
                                }
                            }
                        }
                    }
                }
            }
        )
        (method,) = compile_description(description).interfaces["Upload"].methods
        (entity,) = method.parameters
        assert entity.name == "entity"
        assert entity.type == MULTIVALUED_FORM


class TestValidationToggle:
    def test_no_constraints_without_validation(
        self,
        widgets_description: ApiDescription,
        compile_description: Callable[..., GenerationContext],
    ) -> None:
        context = compile_description(widgets_description, use_validation=False)
        for interface in context.interfaces.values():
            for method in interface.methods:
                assert all(p.constraints == [] for p in method.parameters)


class TestDeterminism:
    def test_identical_input_identical_output(
        self,
        widgets_description: ApiDescription,
        compile_description: Callable[..., GenerationContext],
    ) -> None:
        first = compile_description(widgets_description)
        second = compile_description(widgets_description)

        assert list(first.interfaces) == list(second.interfaces)
        for name, interface in first.interfaces.items():
            assert interface.model_dump_json() == second.interfaces[name].model_dump_json()


class TestSpecExamples:
    def test_get_with_single_json_response(
        self,
        make_description: Callable[..., ApiDescription],
        compile_description: Callable[..., GenerationContext],
    ) -> None:
        description = make_description(
            {
                "/widgets/{id}": {
                    "get": {
                        "responses": {
                            200: {"body": {"application/json": {"schema": "widget"}}}
                        }
                    }
                }
            },
            schemas=[{"widget": '{"type": "object"}'}],
        )
        context = compile_description(description)

        assert list(context.interfaces) == ["Widgets"]
        (method,) = context.interfaces["Widgets"].methods
        wrapper = method.response_wrapper
        assert wrapper is not None
        assert [f.name for f in wrapper.factories] == ["jsonOk", "respond"]
        assert wrapper.factory("jsonOk").parameters[-1].type == TypeRef(name="Widget")
        assert str(wrapper.factory("respond").parameters[-1].type) == "StreamingOutput"

    def test_put_with_two_body_media_types(
        self,
        make_description: Callable[..., ApiDescription],
        compile_description: Callable[..., GenerationContext],
    ) -> None:
        description = make_description(
            {
                "/things": {
                    "put": {
                        "queryParameters": {"force": {"type": "boolean"}},
                        "body": {"application/json": None, "application/xml": None},
                    }
                }
            }
        )
        methods = compile_description(description).interfaces["Things"].methods

        assert [m.name for m in methods] == ["putJson", "putXml"]
        for method in methods:
            assert [p.name for p in method.parameters] == ["force", "entity"]

"""Tests for ramlgen.models."""

from __future__ import annotations

from decimal import Decimal

import pytest

from ramlgen.models import (
    Action,
    ActionType,
    Documentation,
    GeneratedMethod,
    GeneratedParameter,
    MaxConstraint,
    MimeType,
    MinConstraint,
    Parameter,
    Resource,
    ResponseFactory,
    ResponseWrapper,
    TypeRef,
    verb_requires_body,
)


# ---------------------------------------------------------------------------
# Resource tree
# ---------------------------------------------------------------------------


class TestResource:
    """Back-references and URI composition."""

    def test_child_gets_parent_reference(self) -> None:
        child = Resource(relative_uri="/{id}")
        parent = Resource(relative_uri="/widgets", resources={"/{id}": child})
        assert child.parent is parent
        assert parent.parent is None

    def test_action_gets_resource_reference(self) -> None:
        action = Action(type=ActionType.GET)
        resource = Resource(relative_uri="/widgets", actions={ActionType.GET: action})
        assert action.resource is resource

    def test_uri_joins_parent_chain(self) -> None:
        leaf = Resource(relative_uri="/attachments")
        middle = Resource(relative_uri="/{id}", resources={"/attachments": leaf})
        Resource(relative_uri="/widgets", resources={"/{id}": middle})
        assert leaf.uri == "/widgets/{id}/attachments"

    def test_back_references_are_not_serialised(self) -> None:
        child = Resource(relative_uri="/b")
        parent = Resource(relative_uri="/a", resources={"/b": child})
        dumped = parent.model_dump()
        assert "parent" not in dumped["resources"]["/b"]
        assert "_parent" not in dumped["resources"]["/b"]

    def test_validated_from_dict(self) -> None:
        resource = Resource.model_validate(
            {
                "relative_uri": "/a",
                "actions": {"GET": {"type": "GET"}},
                "resources": {"/b": {"relative_uri": "/b"}},
            }
        )
        assert resource.actions[ActionType.GET].resource is resource
        assert resource.resources["/b"].uri == "/a/b"


class TestVerbRequiresBody:
    @pytest.mark.parametrize("verb", [ActionType.PUT, ActionType.POST, ActionType.PATCH])
    def test_body_verbs(self, verb: ActionType) -> None:
        assert verb_requires_body(verb) is True

    @pytest.mark.parametrize(
        "verb", [ActionType.GET, ActionType.DELETE, ActionType.HEAD, ActionType.OPTIONS]
    )
    def test_bodyless_verbs(self, verb: ActionType) -> None:
        assert verb_requires_body(verb) is False


class TestMimeType:
    def test_schema_alias(self) -> None:
        mime = MimeType.model_validate({"type": "application/json", "schema": "widget"})
        assert mime.schema_ == "widget"

    def test_populate_by_field_name(self) -> None:
        mime = MimeType(type="application/json", schema_="widget")
        assert mime.schema_ == "widget"

    def test_parameter_bounds_are_decimals(self) -> None:
        parameter = Parameter(minimum="1.5")
        assert parameter.minimum == Decimal("1.5")


# ---------------------------------------------------------------------------
# Generated model
# ---------------------------------------------------------------------------


class TestTypeRef:
    def test_plain_name(self) -> None:
        assert str(TypeRef(name="str")) == "str"

    def test_nested_arguments(self) -> None:
        ref = TypeRef(
            name="dict",
            arguments=(TypeRef(name="str"), TypeRef(name="list", arguments=(TypeRef(name="str"),))),
        )
        assert str(ref) == "dict[str, list[str]]"

    def test_equality_and_hashing(self) -> None:
        assert TypeRef(name="int") == TypeRef(name="int")
        assert len({TypeRef(name="int"), TypeRef(name="int")}) == 1


class TestDocumentation:
    def test_add_param_appends_to_existing_entry(self) -> None:
        doc = Documentation()
        doc.add_param("entity", "a: one\n")
        doc.add_param("entity", "b: two\n")
        assert len(doc.params) == 1
        assert doc.param("entity").text == "a: one\nb: two\n"

    def test_param_missing(self) -> None:
        assert Documentation().param("nope") is None


class TestConstraints:
    def test_discriminated_round_trip(self) -> None:
        parameter = GeneratedParameter(
            name="page",
            type=TypeRef(name="int"),
            constraints=[MinConstraint(value=1), MaxConstraint(value=10)],
        )
        restored = GeneratedParameter.model_validate_json(parameter.model_dump_json())
        assert restored.constraints == parameter.constraints


class TestResponseWrapper:
    def test_factory_lookup(self) -> None:
        wrapper = ResponseWrapper(
            name="GetResponse", factories=[ResponseFactory(name="jsonOk", status=200)]
        )
        assert wrapper.factory("jsonOk").status == 200

    def test_factory_unknown_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            ResponseWrapper(name="GetResponse").factory("nope")

    def test_method_response_wrapper_property(self) -> None:
        wrapper = ResponseWrapper(name="GetResponse")
        assert GeneratedMethod(name="get", http_method="GET", returns=wrapper).response_wrapper is wrapper
        void = GeneratedMethod(name="get", http_method="GET", returns=TypeRef(name="None"))
        assert void.response_wrapper is None

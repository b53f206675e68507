"""Tests for @param parsing: type, name, required flag, description."""

from __future__ import annotations

from liquid_doc.ast import LiquidDocParamNode, Position


def _param(ast) -> LiquidDocParamNode:
    node = ast.head()
    assert isinstance(node, LiquidDocParamNode), f"Expected LiquidDocParamNode, got {type(node).__name__}"
    return node


class TestParamWithType:
    def test_required_param_with_type(self, parse_doc) -> None:
        source = "@param {sometype} requiredParamWithNoType"
        param = _param(parse_doc(source))

        assert param.name == "param"
        assert param.param_type is not None
        assert param.param_type.value == "sometype"
        assert param.param_name.value == "requiredParamWithNoType"
        assert param.param_description is None
        assert param.required

    def test_positions(self, parse_doc) -> None:
        source = "@param {sometype} requiredParamWithNoType"
        param = _param(parse_doc(source))

        assert param.position == Position(10, 51)
        assert param.param_type is not None
        assert param.param_type.position == Position(18, 26)
        assert param.param_name.position == Position(28, 51)

    def test_source_is_full_param_line(self, parse_doc) -> None:
        source = "@param {sometype} requiredParamWithNoType"
        param = _param(parse_doc(source))

        assert param.source == source
        assert param.param_name.source == source

    def test_with_description(self, parse_doc) -> None:
        param = _param(parse_doc("@param {sometype} requiredParamWithNoType - This is a cool parameter"))
        assert param.param_name.value == "requiredParamWithNoType"
        assert param.param_description is not None
        assert param.param_description.value == "This is a cool parameter"


class TestOptionalParams:
    def test_optional_with_type_and_description(self, parse_doc) -> None:
        source = "@param {sometype} [optionalParamWithTypeAndDescription] - This is a cool parameter"
        param = _param(parse_doc(source))

        assert param.param_name.value == "optionalParamWithTypeAndDescription"
        assert not param.required
        assert param.param_description is not None
        assert param.param_description.value == "This is a cool parameter"

    def test_bracketed_name_positions_exclude_brackets(self, parse_doc) -> None:
        source = "@param {sometype} [optionalParamWithTypeAndDescription] - This is a cool parameter"
        param = _param(parse_doc(source))
        start, end = param.param_name.position.start - 10, param.param_name.position.end - 10
        assert source[start:end] == "optionalParamWithTypeAndDescription"

    def test_optional_without_type(self, parse_doc) -> None:
        param = _param(parse_doc("@param [optionalParameterWithDescription] - optional parameter description"))
        assert param.param_type is None
        assert param.param_name.value == "optionalParameterWithDescription"
        assert not param.required

    def test_optional_with_type_only(self, parse_doc) -> None:
        param = _param(parse_doc("@param {String} [optionalParameterWithType]"))
        assert param.param_type is not None
        assert param.param_type.value == "String"
        assert not param.required
        assert param.param_description is None

    def test_bare_name_is_required(self, parse_doc) -> None:
        param = _param(parse_doc("@param name"))
        assert param.param_name.value == "name"
        assert param.required


class TestManyParams:
    def test_param_list(self, parse_doc) -> None:
        source = (
            "@param requiredParamWithNoType\n"
            "@param {String} paramWithDescription - param with description and `punctation`."
            " This is still a valid param description.\n"
            "@param {String} paramWithNoDescription\n"
            "@param {String} [optionalParameterWithTypeAndDescription] - optional parameter with type"
            " and description\n"
            "@param [optionalParameterWithDescription] - optional parameter description\n"
            "@param {String} [optionalParameterWithType]"
        )
        ast = parse_doc(source)
        params = ast.nodes
        assert all(isinstance(p, LiquidDocParamNode) for p in params)
        assert [p.param_name.value for p in params] == [
            "requiredParamWithNoType",
            "paramWithDescription",
            "paramWithNoDescription",
            "optionalParameterWithTypeAndDescription",
            "optionalParameterWithDescription",
            "optionalParameterWithType",
        ]
        assert [p.required for p in params] == [True, True, True, False, False, False]
        assert [p.param_type.value if p.param_type else None for p in params] == [
            None,
            "String",
            "String",
            "String",
            None,
            "String",
        ]
        assert params[1].param_description is not None
        assert params[1].param_description.value == (
            "param with description and `punctation`. This is still a valid param description."
        )
        assert params[2].param_description is None

    def test_description_without_dash(self, parse_doc) -> None:
        param = _param(parse_doc("@param {String} title The card title"))
        assert param.param_description is not None
        assert param.param_description.value == "The card title"

    def test_hyphenated_name(self, parse_doc) -> None:
        param = _param(parse_doc("@param {String} image-width - Width in px"))
        assert param.param_name.value == "image-width"
        assert param.param_description is not None
        assert param.param_description.value == "Width in px"


class TestNonAsciiPositions:
    def test_param_after_multibyte_text(self, parse_doc, source_slice) -> None:
        source = "héllo\n@param {String} name"
        param = parse_doc(source, 0).nodes[1]
        assert isinstance(param, LiquidDocParamNode)
        assert param.position == Position(7, 27)
        assert source_slice(source, param.position.start, param.position.end) == "@param {String} name"

    def test_sub_nodes_use_byte_offsets(self, parse_doc, source_slice) -> None:
        source = "héllo\n@param {Maß} [größe] - Größe ✓"
        param = parse_doc(source).nodes[1]
        assert isinstance(param, LiquidDocParamNode)
        assert param.param_type is not None and param.param_description is not None
        for text in (param.param_type, param.param_name, param.param_description):
            assert source_slice(source, text.position.start - 10, text.position.end - 10) == text.value
        assert param.param_type.value == "Maß"
        assert param.param_name.value == "größe"
        assert not param.required

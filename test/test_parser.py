"""Tests for the aggregate declaration syntax."""

import pytest

from aggdef.errors import AggregateSyntaxError
from aggdef.model.attributes import Attribute, AttributeKind
from aggdef.model.spec import ConstItem, ConstKind, ImplBlock, MethodItem, TypeItem
from aggdef.model.types import TupleType, TypePath


DEMO = """
aggregate demo.DemoSum implements Aggregate {
    type Args = (int4, float8);
    const NAME = "demo_sum";
    def state(current, value);
    def combine;
}
"""


class TestDeclarations:
    def test_parses_target_trait_and_items(self, parser):
        block = parser.parse_one(DEMO)
        assert isinstance(block, ImplBlock)
        assert block.target == TypePath(("demo", "DemoSum"))
        assert block.trait == TypePath(("Aggregate",))
        assert [type(i) for i in block.items] == [TypeItem, ConstItem, MethodItem, MethodItem]

    def test_trait_is_optional(self, parser):
        block = parser.parse_one("aggregate MySum { def state; }")
        assert block.trait is None
        assert block.find_method("state") == MethodItem("state")

    def test_method_parameters(self, parser):
        block = parser.parse_one(DEMO)
        assert block.find_method("state").params == ("current", "value")
        assert block.find_method("combine").params == ()

    def test_empty_parameter_list(self, parser):
        block = parser.parse_one("aggregate MySum { def state(); }")
        assert block.find_method("state").params == ()

    def test_multiple_declarations(self, parser):
        blocks = parser.parse(DEMO + "\naggregate Other { def state; }\n")
        assert [b.target.render() for b in blocks] == ["demo.DemoSum", "Other"]

    def test_empty_source(self, parser):
        assert parser.parse("  // nothing here\n") == []

    def test_parse_one_rejects_several_declarations(self, parser):
        with pytest.raises(AggregateSyntaxError, match="exactly one"):
            parser.parse_one(DEMO + DEMO)

    def test_comments_are_ignored(self, parser):
        text = """
        // line comment
        # hash comment
        aggregate MySum { /* inline */ def state; }
        """
        assert len(parser.parse(text)) == 1

    def test_identifiers_starting_with_keywords(self, parser):
        block = parser.parse_one("aggregate typed.Constant { type Args = definite; const NAME = truthy; }")
        assert block.target == TypePath(("typed", "Constant"))
        assert block.find_type("Args").type == TypePath(("definite",))
        assert block.find_const("NAME").value.kind == ConstKind.EXPRESSION


class TestTypes:
    def _args(self, parser, type_text):
        return parser.parse_one(f"aggregate T {{ type Args = {type_text}; }}").find_type("Args").type

    def test_tuple(self, parser):
        ty = self._args(parser, "(int4, float8, text)")
        assert isinstance(ty, TupleType)
        assert [e.render() for e in ty.elements] == ["int4", "float8", "text"]

    def test_single_element_tuple(self, parser):
        ty = self._args(parser, "(int4,)")
        assert ty == TupleType((TypePath(("int4",)),))
        assert ty.render() == "(int4,)"

    def test_unit(self, parser):
        ty = self._args(parser, "()")
        assert ty.is_unit()

    def test_parenthesized_type_is_not_a_tuple(self, parser):
        with pytest.raises(AggregateSyntaxError):
            self._args(parser, "(int4)")

    def test_nested_generics(self, parser):
        ty = self._args(parser, "(int4, Variadic<my.Pair<text, int8>>)")
        assert ty.render() == "(int4, Variadic<my.Pair<text, int8>>)"
        variadic = ty.elements[1]
        assert variadic.name == "Variadic"
        assert variadic.args[0].segments == ("my", "Pair")

    def test_empty_generic_arguments(self, parser):
        ty = self._args(parser, "Varlena<>")
        assert ty == TypePath(("Varlena",))


class TestConstants:
    def _const(self, parser, literal):
        return parser.parse_one(f"aggregate T {{ const C = {literal}; }}").find_const("C").value

    @pytest.mark.parametrize("literal,kind,value", [
        ('"sum"', ConstKind.STRING, "sum"),
        ("true", ConstKind.BOOLEAN, True),
        ("false", ConstKind.BOOLEAN, False),
        ("42", ConstKind.INTEGER, 42),
        ("-7", ConstKind.INTEGER, -7),
        ("ParallelOption.Safe", ConstKind.EXPRESSION, ("ParallelOption", "Safe")),
    ])
    def test_literal_kinds(self, parser, literal, kind, value):
        const = self._const(parser, literal)
        assert const.kind == kind
        assert const.value == value

    def test_string_escapes(self, parser):
        const = self._const(parser, r'"say \"hi\" \\ bye"')
        assert const.value == 'say "hi" \\ bye'

    def test_control_escapes(self, parser):
        assert self._const(parser, r'"a\nb"').value == "a\nb"
        assert self._const(parser, r'"col\tval"').value == "col\tval"

    def test_non_ascii_text_is_kept(self, parser):
        assert self._const(parser, '"größe ∑"').value == "größe ∑"

    def test_escaped_newline_reaches_the_descriptor(self, compile_text):
        compiled = compile_text(r'aggregate T { type Args = int4; const NAME = "a\nb"; def state; }')
        assert compiled.descriptor.name == "a\nb"

    def test_invalid_escape(self, parser):
        with pytest.raises(AggregateSyntaxError, match="invalid escape"):
            self._const(parser, r'"\x4"')


class TestAttributes:
    def test_flag_and_valued_attributes(self, parser):
        block = parser.parse_one('@immutable @parallel_safe @schema("stats")\naggregate T { def state; }')
        assert block.attributes == (
            Attribute(AttributeKind.IMMUTABLE),
            Attribute(AttributeKind.PARALLEL_SAFE),
            Attribute(AttributeKind.SCHEMA, "stats"),
        )

    def test_unknown_option(self, parser):
        with pytest.raises(AggregateSyntaxError, match="Invalid option"):
            parser.parse_one("@fast\naggregate T { def state; }")

    def test_flag_with_value_is_rejected(self, parser):
        with pytest.raises(AggregateSyntaxError, match="does not take a value"):
            parser.parse_one('@strict("yes")\naggregate T { def state; }')

    def test_valued_option_requires_value(self, parser):
        with pytest.raises(AggregateSyntaxError, match="requires a string value"):
            parser.parse_one("@name\naggregate T { def state; }")


class TestSourcePositions:
    def test_declaration_and_item_lines(self, parser):
        block = parser.parse_one(DEMO, source="demo.agg")
        assert block.span.file == "demo.agg"
        assert block.span.line == 2
        assert block.find_const("NAME").span.line == 4

    def test_syntax_error_location(self, parser):
        text = "aggregate T {\n    type Args = ;\n}\n"
        with pytest.raises(AggregateSyntaxError) as excinfo:
            parser.parse(text, source="bad.agg")
        assert excinfo.value.span.file == "bad.agg"
        assert excinfo.value.span.line == 2
        assert str(excinfo.value).startswith("bad.agg:2:")

    def test_unexpected_end_of_input(self, parser):
        with pytest.raises(AggregateSyntaxError, match="end of input"):
            parser.parse("aggregate T { def state;")

    def test_spans_do_not_affect_equality(self, parser):
        a = parser.parse_one("aggregate T { type Args = int4; }")
        b = parser.parse_one("\n\n\naggregate T {\n type Args =\n int4; }")
        assert a == b

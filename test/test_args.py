"""Tests for resolving `Args` types into named positional arguments."""

import pytest

from aggdef.compiler.args import ARG_NAMES, MAX_ARGS, resolve_arguments
from aggdef.compiler.config import config
from aggdef.compiler.markers import MarkerRegistry
from aggdef.errors import MalformedTypePath, MisplacedVariadic, UnsupportedArgCount
from aggdef.model.types import TupleType, TypePath


def t(path, *args):
    return TypePath(tuple(path.split(".")), tuple(args))


@pytest.fixture
def markers():
    return MarkerRegistry.from_config()


class TestExpansion:
    def test_single_type_is_one_argument(self, markers):
        args = resolve_arguments(t("int4"), markers)
        assert len(args) == 1
        assert args[0].name == "arg_one"
        assert args[0].type == t("int4")
        assert not args[0].variadic

    def test_tuple_expands_in_order(self, markers):
        args = resolve_arguments(TupleType((t("int4"), t("float8"), t("text"))), markers)
        assert args.names == ("arg_one", "arg_two", "arg_three")
        assert [a.type.render() for a in args] == ["int4", "float8", "text"]

    def test_unit_has_no_arguments(self, markers):
        assert len(resolve_arguments(TupleType(()), markers)) == 0

    def test_generic_argument_is_kept_whole(self, markers):
        args = resolve_arguments(t("my.Pair", t("int4"), t("text")), markers)
        assert len(args) == 1
        assert args[0].type.render() == "my.Pair<int4, text>"


class TestVariadic:
    def test_variadic_tail(self, markers):
        args = resolve_arguments(TupleType((t("int4"), t("Variadic", t("text")))), markers)
        tail = args.variadic_tail
        assert tail is args[1]
        assert tail.variadic
        assert tail.type == t("Variadic", t("text"))
        assert tail.element_type == t("text")
        assert tail.signature_type == t("text")

    def test_bare_variadic_args(self, markers):
        args = resolve_arguments(t("Variadic", t("int4")), markers)
        assert len(args) == 1
        assert args.variadic_tail.element_type == t("int4")

    def test_qualified_marker(self, markers):
        args = resolve_arguments(t("aggdef.Variadic", t("int4")), markers)
        assert args.variadic_tail is not None

    def test_look_alike_is_an_ordinary_type(self, markers):
        args = resolve_arguments(t("other.Variadic", t("int4")), markers)
        assert args.variadic_tail is None
        assert args[0].type.render() == "other.Variadic<int4>"

    def test_variadic_must_be_last(self, markers):
        with pytest.raises(MisplacedVariadic, match="last argument"):
            resolve_arguments(TupleType((t("Variadic", t("text")), t("int4"))), markers)

    def test_only_one_variadic(self, markers):
        with pytest.raises(MisplacedVariadic):
            resolve_arguments(TupleType((t("Variadic", t("text")), t("Variadic", t("int4")))), markers)

    def test_nested_variadic(self, markers):
        with pytest.raises(MisplacedVariadic, match="only one"):
            resolve_arguments(t("Variadic", t("Variadic", t("int4"))), markers)

    @pytest.mark.parametrize("ty", [
        TupleType((t("Vec", t("Variadic", t("int4"))), t("int4"))),
        TupleType((t("int4"), t("Vec", t("Variadic", t("int4"))))),
        t("Vec", t("Variadic", t("int4"))),
        TupleType((TupleType((t("int4"), t("Variadic", t("text")))), t("int4"))),
    ])
    def test_variadic_nested_in_another_type(self, markers, ty):
        with pytest.raises(MisplacedVariadic, match="nests a variadic marker"):
            resolve_arguments(ty, markers)

    def test_variadic_nested_in_the_tail(self, markers):
        with pytest.raises(MisplacedVariadic, match="only one"):
            resolve_arguments(t("Variadic", t("Vec", t("Variadic", t("int4")))), markers)

    def test_nested_look_alike_is_accepted(self, markers):
        args = resolve_arguments(t("Vec", t("other.Variadic", t("int4"))), markers)
        assert args.variadic_tail is None

    def test_variadic_needs_exactly_one_type(self, markers):
        with pytest.raises(MalformedTypePath):
            resolve_arguments(t("Variadic", t("int4"), t("text")), markers)
        with pytest.raises(MalformedTypePath):
            resolve_arguments(t("Variadic"), markers)

    def test_variadic_not_allowed(self, markers):
        with pytest.raises(MisplacedVariadic, match="not allowed"):
            resolve_arguments(t("Variadic", t("int4")), markers, allow_variadic=False)

    def test_prelude_disabled_requires_qualified_marker(self):
        config.set("markers.prelude", False)
        markers = MarkerRegistry.from_config(config)
        assert resolve_arguments(t("Variadic", t("int4")), markers).variadic_tail is None
        assert resolve_arguments(t("aggdef.Variadic", t("int4")), markers).variadic_tail is not None


class TestArgumentLimit:
    def test_name_pool(self):
        assert len(ARG_NAMES) == MAX_ARGS == 32
        assert len(set(ARG_NAMES)) == 32
        assert ARG_NAMES[0] == "arg_one"
        assert ARG_NAMES[-1] == "arg_thirty_two"

    def test_thirty_two_arguments(self, markers):
        args = resolve_arguments(TupleType(tuple(t(f"t{i}") for i in range(32))), markers)
        assert len(args) == 32
        assert args.names == ARG_NAMES
        assert args[31].type == t("t31")

    def test_thirty_three_arguments(self, markers):
        with pytest.raises(UnsupportedArgCount) as excinfo:
            resolve_arguments(TupleType(tuple(t(f"t{i}") for i in range(33))), markers)
        assert excinfo.value.count == 33
        assert excinfo.value.limit == 32

    def test_variadic_tail_at_the_limit(self, markers):
        elements = tuple(t(f"t{i}") for i in range(31)) + (t("Variadic", t("text")),)
        args = resolve_arguments(TupleType(elements), markers)
        assert args.variadic_tail.name == "arg_thirty_two"

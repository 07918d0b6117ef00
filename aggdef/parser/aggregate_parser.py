import logging
import os
logger = logging.getLogger("aggdef.parser")
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    logger.addHandler(handler)
log_level_str = os.environ.get("AGGDEF_DEBUG", "WARNING").upper()
try:
    logger.setLevel(getattr(logging, log_level_str))
except AttributeError:
    logger.setLevel(logging.WARNING)

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError

from ..errors import AggregateError, AggregateSyntaxError
from ..model.attributes import Attribute
from ..model.spec import ConstItem, ConstKind, ConstValue, ImplBlock, MethodItem, TypeItem
from ..model.types import SourceSpan, TupleType, TypePath

aggregate_grammar = r"""
// -----------------------------
// Top-Level: a source is zero or more aggregate declarations
// -----------------------------
start: declaration*

// -----------------------------
// Declarations:
//   @immutable
//   aggregate my.pkg.DemoSum implements Aggregate { ... }
// -----------------------------
declaration: attribute* "aggregate" type_ref [trait_clause] "{" item* "}"
trait_clause: "implements" path_type

// Option markers, copied verbatim onto generated functions
attribute: "@" IDENT ["(" STRING ")"]

?item: type_item
     | const_item
     | method_item

type_item: "type" IDENT "=" type_ref ";"
const_item: "const" IDENT "=" const_value ";"
method_item: "def" IDENT [param_list] ";"
param_list: "(" ")"
          | "(" IDENT ("," IDENT)* ")"

// -----------------------------
// Types: paths with optional generic arguments, and tuples
// -----------------------------
?type_ref: path_type
         | tuple_type

path_type: dotted [type_args]
type_args: "<" ">"
         | "<" type_ref ("," type_ref)* ">"
dotted: IDENT ("." IDENT)*

tuple_type: "(" ")"
          | "(" type_ref "," ")"
          | "(" type_ref ("," type_ref)+ ")"

// -----------------------------
// Constant literals
// -----------------------------
?const_value: STRING      -> string_lit
            | TRUE        -> true_lit
            | FALSE       -> false_lit
            | SIGNED_INT  -> int_lit
            | dotted      -> expr_lit

TRUE: "true"
FALSE: "false"
IDENT: /[A-Za-z_][A-Za-z0-9_]*/
STRING: /"([^"\\]|\\.)*"/

%import common.SIGNED_INT
%import common.CPP_COMMENT
COMMENT_ML: /\/\*[\s\S]*?\*\//
%ignore CPP_COMMENT
%ignore COMMENT_ML
%ignore /#[^\n]*/
%import common.WS
%ignore WS
"""


class AggregateTransformer(Transformer):
    """
    Transforms a Lark parse tree into ImplBlock declarations, keeping the
    source position of every item for error reporting.
    """

    def __init__(self, source: str = "<string>"):
        super().__init__()
        self.source = source

    def _span(self, meta) -> SourceSpan:
        return SourceSpan(self.source, getattr(meta, "line", 0) or 0, getattr(meta, "column", 0) or 0)

    def _token_span(self, tok) -> SourceSpan:
        return SourceSpan(self.source, tok.line or 0, tok.column or 0)

    def start(self, items):
        logger.debug("source %s: %d declaration(s)", self.source, len(items))
        return list(items)

    @v_args(meta=True)
    def declaration(self, meta, items):
        attributes = []
        index = 0
        while index < len(items) and isinstance(items[index], Attribute):
            attributes.append(items[index])
            index += 1
        target = items[index]
        trait = items[index + 1]
        body = items[index + 2:]
        result = ImplBlock(
            target=target,
            trait=trait,
            attributes=tuple(attributes),
            items=tuple(body),
            span=self._span(meta),
        )
        logger.debug("declaration result: %s", result)
        return result

    def trait_clause(self, items):
        return items[0]

    @v_args(meta=True)
    def attribute(self, meta, items):
        option = str(items[0])
        value = self._unquote(items[1]) if items[1] is not None else None
        try:
            return Attribute.parse(option, value)
        except ValueError as e:
            raise AggregateSyntaxError(str(e), self._span(meta)) from e

    @v_args(meta=True)
    def type_item(self, meta, items):
        result = TypeItem(str(items[0]), items[1], self._span(meta))
        logger.debug("type_item result: %s", result)
        return result

    @v_args(meta=True)
    def const_item(self, meta, items):
        result = ConstItem(str(items[0]), items[1], self._span(meta))
        logger.debug("const_item result: %s", result)
        return result

    @v_args(meta=True)
    def method_item(self, meta, items):
        params = items[1] if items[1] is not None else ()
        result = MethodItem(str(items[0]), params, self._span(meta))
        logger.debug("method_item result: %s", result)
        return result

    def param_list(self, items):
        return tuple(str(i) for i in items)

    @v_args(meta=True)
    def path_type(self, meta, items):
        segments = items[0]
        args = tuple(items[1]) if items[1] is not None else ()
        return TypePath(segments, args, self._span(meta))

    def type_args(self, items):
        return list(items)

    def dotted(self, items):
        return tuple(str(i) for i in items)

    @v_args(meta=True)
    def tuple_type(self, meta, items):
        return TupleType(tuple(items), self._span(meta))

    def string_lit(self, items):
        return ConstValue(ConstKind.STRING, self._unquote(items[0]))

    def true_lit(self, items):
        return ConstValue(ConstKind.BOOLEAN, True)

    def false_lit(self, items):
        return ConstValue(ConstKind.BOOLEAN, False)

    def int_lit(self, items):
        return ConstValue(ConstKind.INTEGER, int(items[0]))

    def expr_lit(self, items):
        return ConstValue(ConstKind.EXPRESSION, items[0])

    def _unquote(self, tok) -> str:
        # Non-latin-1 characters pass through as \uXXXX so they survive the decode
        body = str(tok)[1:-1]
        try:
            return body.encode("latin-1", "backslashreplace").decode("unicode_escape")
        except UnicodeDecodeError as e:
            raise AggregateSyntaxError(f"invalid escape in string {str(tok)}", self._token_span(tok)) from e


class AggregateParser:
    def __init__(self):
        self.parser = Lark(
            aggregate_grammar,
            parser="lalr",
            propagate_positions=True,
            maybe_placeholders=True,
        )

    def parse(self, text: str, source: str = "<string>") -> list[ImplBlock]:
        """Parse every aggregate declaration in `text`.

        Raises:
            AggregateSyntaxError: when the text is not a valid declaration
                source, or names an unknown option marker.
        """
        logger.debug("Starting parse of %s:\n%s", source, text)
        try:
            parse_tree = self.parser.parse(text)
        except UnexpectedInput as e:
            raise AggregateSyntaxError(
                _describe(e), SourceSpan(source, getattr(e, "line", 0) or 0, getattr(e, "column", 0) or 0)
            ) from e
        logger.debug("Parse tree:\n%s", parse_tree.pretty())
        try:
            blocks = AggregateTransformer(source).transform(parse_tree)
        except VisitError as e:
            if isinstance(e.orig_exc, AggregateError):
                raise e.orig_exc from None
            raise
        logger.debug("Parsed %d declaration(s) from %s", len(blocks), source)
        return blocks

    def parse_one(self, text: str, source: str = "<string>") -> ImplBlock:
        """Parse text holding exactly one aggregate declaration."""
        blocks = self.parse(text, source)
        if len(blocks) != 1:
            raise AggregateSyntaxError(
                f"expected exactly one aggregate declaration, found {len(blocks)}",
                SourceSpan(source, 1, 1),
            )
        return blocks[0]


def _describe(e: UnexpectedInput) -> str:
    if isinstance(e, UnexpectedToken):
        if e.token.type == "$END":
            return "unexpected end of input"
        return f"unexpected token {str(e.token)!r}"
    if isinstance(e, UnexpectedCharacters):
        return f"unexpected character {e.char!r}"
    if isinstance(e, UnexpectedEOF):
        return "unexpected end of input"
    return str(e).splitlines()[0]

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Union

from .attributes import Attribute
from .types import NO_SPAN, SourceSpan, TypePath, TypeRef


class ConstKind(str, Enum):
    """Literal kinds a constant item can be written with."""
    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    EXPRESSION = "expression"


@dataclass(frozen=True, slots=True)
class ConstValue:
    """
    The right-hand side of a `const` item.
    For EXPRESSION values `value` holds the dotted path segments,
    e.g. ("ParallelOption", "Safe").
    """
    kind: ConstKind
    value: Any

    def render(self) -> str:
        if self.kind == ConstKind.STRING:
            return f'"{self.value}"'
        if self.kind == ConstKind.BOOLEAN:
            return "true" if self.value else "false"
        if self.kind == ConstKind.EXPRESSION:
            return ".".join(self.value)
        return str(self.value)

    def __repr__(self) -> str:
        return self.render()


@dataclass(frozen=True, slots=True)
class TypeItem:
    """`type Name = <type>;`"""
    name: str
    type: TypeRef
    span: SourceSpan = field(default=NO_SPAN, compare=False)
    synthesized: bool = False


@dataclass(frozen=True, slots=True)
class ConstItem:
    """`const NAME = <literal>;`"""
    name: str
    value: ConstValue
    span: SourceSpan = field(default=NO_SPAN, compare=False)


@dataclass(frozen=True, slots=True)
class MethodItem:
    """
    `def name(params);` - a component the implementation provides.
    `synthesized` marks stubs added by the defaulting pass; those were never
    written by the author.
    """
    name: str
    params: tuple[str, ...] = ()
    span: SourceSpan = field(default=NO_SPAN, compare=False)
    synthesized: bool = False


Item = Union[TypeItem, ConstItem, MethodItem]


@dataclass(frozen=True, slots=True)
class ImplBlock:
    """
    One raw aggregate declaration, exactly as written:

        @immutable
        aggregate my.pkg.DemoSum implements Aggregate {
            type Args = int4;
            const NAME = "demo_sum";
            def state;
        }

      - target: the type the aggregate is declared for
      - trait: the capability the block claims to implement, if named
      - attributes: option markers preceding the declaration
      - items: associated types, constants and methods in source order
    """
    target: TypeRef
    trait: Optional[TypePath] = None
    attributes: tuple[Attribute, ...] = ()
    items: tuple[Item, ...] = ()
    span: SourceSpan = field(default=NO_SPAN, compare=False)

    def find(self, kind: type, name: str):
        # Later declarations shadow earlier ones.
        needle = None
        for item in self.items:
            if isinstance(item, kind) and item.name == name:
                needle = item
        return needle

    def find_type(self, name: str) -> Optional[TypeItem]:
        return self.find(TypeItem, name)

    def find_const(self, name: str) -> Optional[ConstItem]:
        return self.find(ConstItem, name)

    def find_method(self, name: str) -> Optional[MethodItem]:
        return self.find(MethodItem, name)

    def declared(self, kind: type, name: str) -> int:
        """Number of times an item of `kind` called `name` is declared."""
        return sum(1 for item in self.items if isinstance(item, kind) and item.name == name)

    def extended(self, extra: tuple[Item, ...]) -> "ImplBlock":
        """A copy of this block with `extra` items appended."""
        return replace(self, items=self.items + tuple(extra))

    def __repr__(self) -> str:
        trait = f" implements {self.trait.render()}" if self.trait else ""
        return f"aggregate {self.target.render()}{trait} {{{len(self.items)} items}}"

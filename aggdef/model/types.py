from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """
    Location of a fragment of an aggregate declaration.
      - file: name of the source the declaration was read from
      - line, column: 1-based position (0 when unknown)
    """
    file: str = "<string>"
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


NO_SPAN = SourceSpan()


@dataclass(frozen=True, slots=True)
class TypePath:
    """
    A (possibly generic) named type, e.g. `int4`, `my.pkg.DemoSum` or
    `Varlena<DemoState>`.
      - segments: the dotted path, outermost first
      - args: generic arguments between angle brackets
    Spans never take part in equality, two structurally equal types are equal
    wherever they were written.
    """
    segments: tuple[str, ...]
    args: tuple["TypeRef", ...] = ()
    span: SourceSpan = field(default=NO_SPAN, compare=False)

    @property
    def name(self) -> Optional[str]:
        """Final segment of the path, or None for an empty path."""
        return self.segments[-1] if self.segments else None

    @property
    def qualified(self) -> str:
        return ".".join(self.segments)

    def is_self(self) -> bool:
        return self.segments == ("Self",) and not self.args

    def render(self) -> str:
        if self.args:
            inner = ", ".join(a.render() for a in self.args)
            return f"{self.qualified}<{inner}>"
        return self.qualified

    def __repr__(self) -> str:
        return self.render()


@dataclass(frozen=True, slots=True)
class TupleType:
    """
    A tuple of types, e.g. `(int4, float8)`. The empty tuple is the unit type.
    """
    elements: tuple["TypeRef", ...] = ()
    span: SourceSpan = field(default=NO_SPAN, compare=False)

    def is_unit(self) -> bool:
        return not self.elements

    def render(self) -> str:
        if len(self.elements) == 1:
            return f"({self.elements[0].render()},)"
        return "(" + ", ".join(e.render() for e in self.elements) + ")"

    def __repr__(self) -> str:
        return self.render()


TypeRef = Union[TypePath, TupleType]

UNIT = TupleType(())


def substitute_self(ty: TypeRef, target: TypePath) -> TypeRef:
    """Replace every `Self` inside `ty` with `target`."""
    if isinstance(ty, TupleType):
        return TupleType(tuple(substitute_self(e, target) for e in ty.elements), ty.span)
    if ty.is_self():
        return target
    if ty.args:
        return TypePath(ty.segments, tuple(substitute_self(a, target) for a in ty.args), ty.span)
    return ty

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from .attributes import Attribute
from .spec import MethodItem
from .types import NO_SPAN, SourceSpan, TypePath, TypeRef

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def snake_case(name: str) -> str:
    """`DemoSum` -> `demo_sum`, `HTTPCount` -> `http_count`."""
    s = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    s = _WORD_BOUNDARY.sub(r"\1_\2", s)
    s = re.sub(r"[-\s]+", "_", s)
    s = re.sub(r"_+", "_", s)
    return s.lower()


class Component(str, Enum):
    """
    The operations an aggregate can provide. The value is both the method name
    in a declaration and the suffix of the generated function.
    Declaration order here is the order functions are generated in.
    """
    STATE = "state"
    COMBINE = "combine"
    FINALIZE = "finalize"
    SERIAL = "serial"
    DESERIAL = "deserial"
    MOVING_STATE = "moving_state"
    MOVING_STATE_INVERSE = "moving_state_inverse"
    MOVING_FINALIZE = "moving_finalize"

    @classmethod
    def optional(cls) -> list["Component"]:
        return [c for c in cls if c is not cls.STATE]


class ParallelOption(str, Enum):
    SAFE = "Safe"
    RESTRICTED = "Restricted"
    UNSAFE = "Unsafe"


class FinalizeModify(str, Enum):
    READ_ONLY = "ReadOnly"
    SHAREABLE = "Shareable"
    READ_WRITE = "ReadWrite"


@dataclass(frozen=True, slots=True)
class ComponentSlot:
    """Whether a component was supplied by the author."""
    component: Component

    @property
    def user_supplied(self) -> bool:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Present(ComponentSlot):
    definition: MethodItem

    @property
    def user_supplied(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Present({self.component.value})"


@dataclass(frozen=True, slots=True)
class Absent(ComponentSlot):
    @property
    def user_supplied(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Absent({self.component.value})"


@dataclass(frozen=True, slots=True)
class TypeIdentity:
    """Fully-qualified and short name of the aggregate's target type."""
    full_path: str
    name: str

    @property
    def snake_name(self) -> str:
        return snake_case(self.name)

    def __repr__(self) -> str:
        return self.full_path


@dataclass(frozen=True, slots=True)
class Argument:
    """
    One positional argument of the aggregate.
      - type: the declared type (the `Variadic<T>` wrapper for a variadic tail)
      - element_type: the flattened `T` of a variadic tail
    """
    name: str
    type: TypeRef
    variadic: bool = False
    element_type: Optional[TypeRef] = None

    @property
    def signature_type(self) -> TypeRef:
        """Type used in call signatures."""
        return self.element_type if self.element_type is not None else self.type

    def __repr__(self) -> str:
        prefix = "variadic " if self.variadic else ""
        return f"{prefix}{self.name}: {self.signature_type.render()}"


@dataclass(frozen=True, slots=True)
class ArgumentList:
    arguments: tuple[Argument, ...] = ()

    def __len__(self) -> int:
        return len(self.arguments)

    def __iter__(self) -> Iterator[Argument]:
        return iter(self.arguments)

    def __getitem__(self, index: int) -> Argument:
        return self.arguments[index]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(a.name for a in self.arguments)

    @property
    def variadic_tail(self) -> Optional[Argument]:
        if self.arguments and self.arguments[-1].variadic:
            return self.arguments[-1]
        return None

    def __repr__(self) -> str:
        return "(" + ", ".join(repr(a) for a in self.arguments) + ")"


@dataclass(frozen=True, slots=True)
class StateEncoding:
    """How the transition state travels through generated signatures."""
    type: TypeRef

    @property
    def wrapped(self) -> bool:
        raise NotImplementedError

    @property
    def state_type(self) -> TypeRef:
        """The state type with any wrapping removed."""
        return self.type

    @property
    def signature_type(self) -> TypeRef:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Direct(StateEncoding):
    @property
    def wrapped(self) -> bool:
        return False

    @property
    def signature_type(self) -> TypeRef:
        return self.type


@dataclass(frozen=True, slots=True)
class WrappedByValue(StateEncoding):
    """
    State passed as a flat, self-describing variable-length value.
      - type: the inner type
      - wrapper: path of the wrapper marker the author used
    """
    wrapper: TypePath = field(default=TypePath(("Varlena",)))

    @property
    def wrapped(self) -> bool:
        return True

    @property
    def signature_type(self) -> TypeRef:
        return TypePath(self.wrapper.segments, (self.type,))


@dataclass(frozen=True, slots=True)
class Parameter:
    name: str
    type: TypeRef
    variadic: bool = False

    def render(self) -> str:
        star = "*" if self.variadic else ""
        return f"{star}{self.name}: {self.type.render()}"


@dataclass(frozen=True, slots=True)
class GeneratedFunction:
    """
    A flat, externally callable wrapper around one aggregate component.
      - delegate: qualified name of the operation the wrapper calls
      - attributes: option markers copied from the declaration
    """
    name: str
    component: Component
    parameters: tuple[Parameter, ...]
    return_type: TypeRef
    delegate: str
    attributes: tuple[Attribute, ...] = ()

    def signature(self) -> str:
        params = ", ".join(p.render() for p in self.parameters)
        return f"{self.name}({params}) -> {self.return_type.render()}"

    def __repr__(self) -> str:
        return self.signature()


@dataclass(frozen=True, slots=True)
class AggregateSpec:
    """
    A validated aggregate declaration. Every slot the declaration may fill is
    resolved here; nothing downstream looks at the raw block again.
    """
    identity: TypeIdentity
    target: TypePath
    name: str
    args: ArgumentList
    encoding: StateEncoding
    state: Present
    slots: tuple[ComponentSlot, ...]
    order_by: Optional[ArgumentList] = None
    finalize_type: Optional[TypeRef] = None
    moving_state_type: Optional[TypeRef] = None
    parallel: Optional[ParallelOption] = None
    finalize_modify: Optional[FinalizeModify] = None
    moving_finalize_modify: Optional[FinalizeModify] = None
    initial_condition: Optional[str] = None
    sort_operator: Optional[str] = None
    moving_initial_condition: Optional[str] = None
    hypothetical: bool = False
    attributes: tuple[Attribute, ...] = ()
    span: SourceSpan = field(default=NO_SPAN, compare=False)

    def slot(self, component: Component) -> ComponentSlot:
        if component is Component.STATE:
            return self.state
        for slot in self.slots:
            if slot.component is component:
                return slot
        return Absent(component)

    def is_present(self, component: Component) -> bool:
        return self.slot(component).user_supplied

    def present_components(self) -> list[Component]:
        return [c for c in Component if self.is_present(c)]

    def absent_components(self) -> list[Component]:
        return [c for c in Component if not self.is_present(c)]


@dataclass(frozen=True, slots=True)
class SourceLocation:
    file: str
    line: int


@dataclass(frozen=True, slots=True)
class AggregateDescriptor:
    """
    Metadata the SQL generator registers an aggregate from.

    Required fields are always set. Every optional field is set if and only if
    the matching method or constant was written in the declaration.
    Type names (`state_type_name`, `moving_state_type`) are the final path
    segment, or the rendered type for a tuple.
    """
    name: str
    type_identity: TypeIdentity
    args: ArgumentList
    state_type_name: str
    state_function_name: str
    entity_name: str
    source: SourceLocation
    order_by: Optional[ArgumentList] = None
    combine_function: Optional[str] = None
    finalize_function: Optional[str] = None
    serial_function: Optional[str] = None
    deserial_function: Optional[str] = None
    moving_state_function: Optional[str] = None
    moving_state_inverse_function: Optional[str] = None
    moving_finalize_function: Optional[str] = None
    moving_state_type: Optional[str] = None
    sort_operator: Optional[str] = None
    initial_condition: Optional[str] = None
    moving_initial_condition: Optional[str] = None
    parallel_marker: Optional[ParallelOption] = None
    finalize_modify_marker: Optional[FinalizeModify] = None
    moving_finalize_modify_marker: Optional[FinalizeModify] = None
    hypothetical: bool = False

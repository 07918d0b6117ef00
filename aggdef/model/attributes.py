"""
Option markers attached to generated functions, e.g. `@immutable` or
`@schema("stats")`. The compiler never interprets them, it copies them onto
every function it generates.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AttributeKind(str, Enum):
    IMMUTABLE = "immutable"
    STRICT = "strict"
    STABLE = "stable"
    VOLATILE = "volatile"
    RAW = "raw"
    NO_GUARD = "no_guard"
    PARALLEL_SAFE = "parallel_safe"
    PARALLEL_UNSAFE = "parallel_unsafe"
    PARALLEL_RESTRICTED = "parallel_restricted"
    ERROR = "error"
    SCHEMA = "schema"
    NAME = "name"
    SKIP_INVENTORY = "skip_inventory"

    @classmethod
    def is_valid(cls, option: str) -> bool:
        return option in [kind.value for kind in cls]

    def takes_value(self) -> bool:
        return self in (AttributeKind.ERROR, AttributeKind.SCHEMA, AttributeKind.NAME)


@dataclass(frozen=True, slots=True)
class Attribute:
    kind: AttributeKind
    value: Optional[str] = None

    @classmethod
    def parse(cls, option: str, value: Optional[str] = None) -> "Attribute":
        """Build an attribute from its option name and optional string value.

        Raises:
            ValueError: for unknown options, or a value given to (or missing
                from) an option that does (or does not) take one.
        """
        if not AttributeKind.is_valid(option):
            raise ValueError(f"Invalid option `{option}`")
        kind = AttributeKind(option)
        if kind.takes_value() and value is None:
            raise ValueError(f"Option `{option}` requires a string value")
        if not kind.takes_value() and value is not None:
            raise ValueError(f"Option `{option}` does not take a value")
        return cls(kind, value)

    def __repr__(self) -> str:
        if self.value is not None:
            return f'{self.kind.value}("{self.value}")'
        return self.kind.value

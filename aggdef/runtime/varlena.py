from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Varlena(Generic[T]):
    """
    A state value carried by value rather than by reference. Generated
    wrappers for a `WrappedByValue` state receive and return Varlena values;
    the aggregate's own operations only ever see the inner value.
    """
    value: T

    @classmethod
    def wrap(cls, value: Any) -> "Varlena":
        if isinstance(value, Varlena):
            return value
        return cls(value)

    def unwrap(self) -> T:
        return self.value

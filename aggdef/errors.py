"""
Errors raised while compiling aggregate declarations, and the runtime error
raised by stubs standing in for components an aggregate does not provide.
"""
from typing import Optional

from .model.spec import ConstKind
from .model.types import NO_SPAN, SourceSpan


class AggregateError(Exception):
    """
    Base class for compile-time failures. Fatal to the declaration being
    compiled and to nothing else.
    """

    def __init__(self, message: str, span: Optional[SourceSpan] = None):
        self.message = message
        self.span = span if span is not None else NO_SPAN
        super().__init__(f"{self.span}: {message}")


class AggregateSyntaxError(AggregateError):
    """The declaration text could not be parsed."""


class InvalidTraitTarget(AggregateError):
    def __init__(self, trait: str, span: Optional[SourceSpan] = None):
        self.trait = trait
        super().__init__(
            f"aggregates can only implement the `Aggregate` capability, not `{trait}`", span
        )


class MissingRequiredComponent(AggregateError):
    def __init__(self, name: str, span: Optional[SourceSpan] = None):
        self.name = name
        super().__init__(f"aggregate declarations require `{name}` to be defined", span)


class InvalidConstantType(AggregateError):
    def __init__(self, name: str, expected_kind: ConstKind, span: Optional[SourceSpan] = None,
                 detail: str = ""):
        self.name = name
        self.expected_kind = expected_kind
        message = f"`{name}` must be a literal {expected_kind.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, span)


class UnsupportedArgCount(AggregateError):
    def __init__(self, count: int, limit: int, span: Optional[SourceSpan] = None):
        self.count = count
        self.limit = limit
        super().__init__(f"aggregates support at most {limit} arguments, got {count}", span)


class MalformedTypePath(AggregateError):
    """A target or wrapped type cannot be resolved to a final named segment."""


class MisplacedVariadic(AggregateError):
    """A variadic marker appears anywhere but the last argument."""


class DuplicateSymbol(AggregateError):
    """Two compiled aggregates export a function under the same name."""


class UnsupportedOperation(NotImplementedError):
    """Raised when a component the aggregate does not provide is invoked."""

    def __init__(self, component: str):
        self.component = component
        super().__init__(f"Call to {component} on an aggregate which does not support it.")

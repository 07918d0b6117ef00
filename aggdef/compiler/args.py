from typing import Optional

from ..errors import MalformedTypePath, MisplacedVariadic, UnsupportedArgCount
from ..model.aggregate import Argument, ArgumentList
from ..model.types import SourceSpan, TupleType, TypePath, TypeRef
from .markers import Marker, MarkerRegistry, unwrap

# Names for positional arguments, in order. Aggregates take at most this many.
ARG_NAMES = (
    "arg_one",
    "arg_two",
    "arg_three",
    "arg_four",
    "arg_five",
    "arg_six",
    "arg_seven",
    "arg_eight",
    "arg_nine",
    "arg_ten",
    "arg_eleven",
    "arg_twelve",
    "arg_thirteen",
    "arg_fourteen",
    "arg_fifteen",
    "arg_sixteen",
    "arg_seventeen",
    "arg_eighteen",
    "arg_nineteen",
    "arg_twenty",
    "arg_twenty_one",
    "arg_twenty_two",
    "arg_twenty_three",
    "arg_twenty_four",
    "arg_twenty_five",
    "arg_twenty_six",
    "arg_twenty_seven",
    "arg_twenty_eight",
    "arg_twenty_nine",
    "arg_thirty",
    "arg_thirty_one",
    "arg_thirty_two",
)

MAX_ARGS = 32


def resolve_arguments(
    ty: TypeRef,
    markers: MarkerRegistry,
    allow_variadic: bool = True,
    span: Optional[SourceSpan] = None,
) -> ArgumentList:
    """
    Expand an `Args` (or `OrderBy`) type into named positional arguments.

    A tuple gives one argument per element, anything else a single argument.
    A `Variadic<T>` element marks a variadic tail; it may only appear once,
    as the last argument.

    Raises:
        UnsupportedArgCount: more than MAX_ARGS arguments
        MisplacedVariadic: a variadic marker anywhere but the last position,
            nested, or where variadics are not allowed
        MalformedTypePath: a variadic marker that does not wrap one type
    """
    span = span or getattr(ty, "span", None)
    elements = ty.elements if isinstance(ty, TupleType) else (ty,)
    if len(elements) > MAX_ARGS:
        raise UnsupportedArgCount(len(elements), MAX_ARGS, span)

    arguments = []
    last = len(elements) - 1
    for index, element in enumerate(elements):
        name = ARG_NAMES[index]
        if not markers.is_marker(element, Marker.VARIADIC):
            if _contains_variadic(element, markers):
                raise MisplacedVariadic(
                    f"`{element.render()}` nests a variadic marker, only a top-level last argument may be variadic",
                    getattr(element, "span", span),
                )
            arguments.append(Argument(name, element))
            continue
        if not allow_variadic:
            raise MisplacedVariadic(f"`{element.render()}` is not allowed here", element.span)
        if index != last:
            raise MisplacedVariadic(
                f"`{element.render()}` must be the last argument, found at position {index + 1}",
                element.span,
            )
        inner = unwrap(element)
        if _contains_variadic(inner, markers):
            raise MisplacedVariadic("only one variadic marker is permitted", element.span)
        if isinstance(inner, TypePath) and not inner.segments:
            raise MalformedTypePath(f"`{element.render()}` wraps an empty type path", element.span)
        arguments.append(Argument(name, element, variadic=True, element_type=inner))
    return ArgumentList(tuple(arguments))


def _contains_variadic(ty: TypeRef, markers: MarkerRegistry) -> bool:
    """Whether a variadic marker appears anywhere inside `ty`, `ty` included."""
    if isinstance(ty, TupleType):
        return any(_contains_variadic(e, markers) for e in ty.elements)
    if markers.is_marker(ty, Marker.VARIADIC):
        return True
    return any(_contains_variadic(a, markers) for a in ty.args)

"""
Binding of a compiled aggregate to the Python object implementing its
operations. The result maps every generated function name to a callable with
the generated calling convention.
"""
import logging
from typing import Any, Callable

from ..compiler.compiler import CompiledAggregate
from ..model.aggregate import ArgumentList, Component, GeneratedFunction
from .varlena import Varlena

logger = logging.getLogger("aggdef.runtime")


class BindingError(TypeError):
    """The implementation does not provide a component its declaration names."""


class BoundAggregate:
    """
    Callables for one compiled aggregate.
      - bound[name] gives the wrapper generated under `name`
      - operation(component) gives the wrapper, or the stub for an absent component
    """

    def __init__(self, compiled: CompiledAggregate, implementation: Any,
                 functions: dict[str, Callable]):
        self.compiled = compiled
        self.implementation = implementation
        self._functions = functions

    def __getitem__(self, name: str) -> Callable:
        return self._functions[name]

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def names(self) -> list[str]:
        return list(self._functions)

    def operation(self, component: Component) -> Callable:
        fn = self.compiled.function(component)
        if fn is not None:
            return self._functions[fn.name]
        return self.compiled.stub(component)

    def __repr__(self) -> str:
        return f"BoundAggregate({self.compiled.descriptor.name}: {', '.join(self._functions)})"


def bind(compiled: CompiledAggregate, implementation: Any) -> BoundAggregate:
    """Bind generated functions to the operations of `implementation`.

    `implementation` is any object (usually a class) with one callable
    attribute per provided component, named after it: `state`, `combine`, ...

    Raises:
        BindingError: a provided component is missing from the implementation.
    """
    wrapped = compiled.spec.encoding.wrapped
    functions: dict[str, Callable] = {}
    for fn in compiled.functions:
        op = getattr(implementation, fn.component.value, None)
        if not callable(op):
            raise BindingError(
                f"`{compiled.spec.identity.full_path}` declares `{fn.component.value}` "
                f"but {implementation!r} does not provide it"
            )
        functions[fn.name] = _wrapper(fn, op, compiled.spec.args, wrapped)
        logger.debug("bound %s -> %r", fn.name, op)
    return BoundAggregate(compiled, implementation, functions)


def _decode(state: Any, wrapped: bool) -> Any:
    if not wrapped or state is None:
        return state
    if not isinstance(state, Varlena):
        raise TypeError(f"expected a Varlena state, got {type(state).__name__}")
    return state.value


def _encode(state: Any, wrapped: bool) -> Any:
    if not wrapped or state is None:
        return state
    return Varlena.wrap(state)


def _spread(args: ArgumentList, values: tuple, name: str) -> list:
    """Positional values for the user operation, variadic tail collected in a tuple."""
    if args.variadic_tail is None:
        if len(values) != len(args):
            raise TypeError(f"{name}() takes {len(args)} argument(s) after the state, got {len(values)}")
        return list(values)
    fixed = len(args) - 1
    if len(values) < fixed:
        raise TypeError(f"{name}() takes at least {fixed} argument(s) after the state, got {len(values)}")
    return list(values[:fixed]) + [tuple(values[fixed:])]


def _wrapper(fn: GeneratedFunction, op: Callable, args: ArgumentList, wrapped: bool) -> Callable:
    component = fn.component

    if component is Component.STATE:
        def wrapper(state, *values):
            result = op(_decode(state, wrapped), *_spread(args, values, fn.name))
            return _encode(result, wrapped)
    elif component is Component.COMBINE:
        def wrapper(state, other):
            return _encode(op(_decode(state, wrapped), _decode(other, wrapped)), wrapped)
    elif component is Component.FINALIZE:
        def wrapper(state):
            return op(_decode(state, wrapped))
    elif component is Component.SERIAL:
        def wrapper(state):
            return bytes(op(_decode(state, wrapped)))
    elif component is Component.DESERIAL:
        def wrapper(buf, internal=None):
            return _encode(op(bytes(buf), internal), wrapped)
    elif component in (Component.MOVING_STATE, Component.MOVING_STATE_INVERSE):
        def wrapper(mstate, *values):
            return op(mstate, *_spread(args, values, fn.name))
    elif component is Component.MOVING_FINALIZE:
        def wrapper(mstate):
            return op(mstate)
    else:
        raise ValueError(f"Unknown component: {component}")

    wrapper.__name__ = fn.name
    wrapper.__qualname__ = fn.name
    wrapper.__doc__ = f"{fn.signature()}\n\nDelegates to {fn.delegate}."
    return wrapper


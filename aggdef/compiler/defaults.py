import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import UnsupportedOperation
from ..model.aggregate import AggregateSpec, Component
from ..model.spec import ImplBlock, MethodItem, TypeItem
from ..model.types import UNIT

logger = logging.getLogger("aggdef.compiler.defaults")

# Associated types filled with the unit type when not declared
DEFAULTED_TYPES = ("MovingState", "OrderBy", "Finalize")

# Parameter names of the stub for each optional component
STUB_PARAMS = {
    Component.COMBINE: ("current", "_other"),
    Component.FINALIZE: ("current",),
    Component.SERIAL: ("current",),
    Component.DESERIAL: ("_buf", "_internal"),
    Component.MOVING_STATE: ("_mstate", "_v"),
    Component.MOVING_STATE_INVERSE: ("_mstate", "_v"),
    Component.MOVING_FINALIZE: ("_mstate",),
}


@dataclass(frozen=True)
class UnsupportedStub:
    """
    Stands in for a component the aggregate does not provide. Fails with
    UnsupportedOperation when called, never before.
    """
    component: Component

    def __call__(self, *args, **kwargs):
        raise UnsupportedOperation(self.component.value)

    def __repr__(self) -> str:
        return f"UnsupportedStub({self.component.value})"


@dataclass(frozen=True)
class DefaultedImpl:
    """
    - block: copy of the declaration completed with unit types and stubs
    - stubs: one stub per absent optional component, in component order
    """
    block: ImplBlock
    stubs: tuple[UnsupportedStub, ...]

    @property
    def absent(self) -> frozenset[Component]:
        return frozenset(s.component for s in self.stubs)

    def stub(self, component: Component) -> Optional[UnsupportedStub]:
        for stub in self.stubs:
            if stub.component is component:
                return stub
        return None


def apply_defaults(block: ImplBlock, spec: AggregateSpec) -> DefaultedImpl:
    """Complete `block` for every optional piece `spec` found missing.

    The original block is left as it is; the completed block is a new value.
    """
    extra = []
    for name in DEFAULTED_TYPES:
        if block.find_type(name) is None:
            extra.append(TypeItem(name, UNIT, block.span, synthesized=True))

    stubs = []
    for component in Component.optional():
        if spec.is_present(component):
            continue
        extra.append(MethodItem(component.value, STUB_PARAMS[component], block.span, synthesized=True))
        stubs.append(UnsupportedStub(component))

    logger.debug(
        "%s: stubbed %s",
        spec.identity,
        ", ".join(s.component.value for s in stubs) or "nothing",
    )
    return DefaultedImpl(block.extended(tuple(extra)), tuple(stubs))

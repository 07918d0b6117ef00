import logging
from typing import Optional

from ..errors import (
    InvalidConstantType,
    InvalidTraitTarget,
    MalformedTypePath,
    MissingRequiredComponent,
)
from ..model.aggregate import (
    Absent,
    AggregateSpec,
    Component,
    ComponentSlot,
    FinalizeModify,
    ParallelOption,
    Present,
    TypeIdentity,
)
from ..model.spec import ConstItem, ConstKind, ImplBlock, MethodItem, TypeItem
from ..model.types import TypePath, TypeRef, substitute_self
from .args import resolve_arguments
from .encoding import resolve_state_encoding
from .markers import Marker, MarkerRegistry, unwrap_path

logger = logging.getLogger("aggdef.compiler.validator")

ASSOCIATED_TYPES = ("State", "MovingState", "OrderBy", "Args", "Finalize")

# Expected literal kind of every constant an aggregate may declare.
CONSTANT_KINDS = {
    "NAME": ConstKind.STRING,
    "PARALLEL": ConstKind.EXPRESSION,
    "FINALIZE_MODIFY": ConstKind.EXPRESSION,
    "MOVING_FINALIZE_MODIFY": ConstKind.EXPRESSION,
    "INITIAL_CONDITION": ConstKind.STRING,
    "SORT_OPERATOR": ConstKind.STRING,
    "MOVING_INITIAL_CONDITION": ConstKind.STRING,
    "HYPOTHETICAL": ConstKind.BOOLEAN,
}

# Enumerations the expression constants name a member of.
EXPRESSION_OPTIONS = {
    "PARALLEL": ParallelOption,
    "FINALIZE_MODIFY": FinalizeModify,
    "MOVING_FINALIZE_MODIFY": FinalizeModify,
}


class SpecificationValidator:
    """
    Checks a raw declaration and resolves it into an AggregateSpec.
    The block is only read; nothing about it is changed.
    """

    def __init__(self, markers: MarkerRegistry):
        self.markers = markers

    def validate(self, block: ImplBlock) -> AggregateSpec:
        self._check_trait(block)
        target, target_wrapper = self._resolve_target(block)
        identity = TypeIdentity(full_path=target.qualified, name=target.name)
        self._warn_about_unused(block)

        args_item = block.find_type("Args")
        if args_item is None:
            raise MissingRequiredComponent("Args", block.span)
        state_method = block.find_method(Component.STATE.value)
        if state_method is None:
            raise MissingRequiredComponent(Component.STATE.value, block.span)

        state_type = self._optional_type(block, "State", target)
        args_type = substitute_self(args_item.type, target)
        args = resolve_arguments(args_type, self.markers, span=args_item.span)

        order_by_item = block.find_type("OrderBy")
        order_by = None
        if order_by_item is not None:
            order_by = resolve_arguments(
                substitute_self(order_by_item.type, target),
                self.markers,
                allow_variadic=False,
                span=order_by_item.span,
            )

        encoding = resolve_state_encoding(target, target_wrapper, state_type, self.markers)
        logger.debug("%s: %d argument(s), state encoding %r", identity, len(args), encoding)

        slots: list[ComponentSlot] = []
        for component in Component.optional():
            method = block.find_method(component.value)
            slots.append(Present(component, method) if method is not None else Absent(component))

        name = self._required_string(block, "NAME")
        return AggregateSpec(
            identity=identity,
            target=target,
            name=name,
            args=args,
            encoding=encoding,
            state=Present(Component.STATE, state_method),
            slots=tuple(slots),
            order_by=order_by,
            finalize_type=self._optional_type(block, "Finalize", target),
            moving_state_type=self._optional_type(block, "MovingState", target),
            parallel=self._option(block, "PARALLEL"),
            finalize_modify=self._option(block, "FINALIZE_MODIFY"),
            moving_finalize_modify=self._option(block, "MOVING_FINALIZE_MODIFY"),
            initial_condition=self._literal(block, "INITIAL_CONDITION"),
            sort_operator=self._literal(block, "SORT_OPERATOR"),
            moving_initial_condition=self._literal(block, "MOVING_INITIAL_CONDITION"),
            hypothetical=bool(self._literal(block, "HYPOTHETICAL", default=False)),
            attributes=block.attributes,
            span=block.span,
        )

    def _check_trait(self, block: ImplBlock) -> None:
        trait = block.trait
        if trait is None:
            return
        if trait.args or not self.markers.is_marker(trait, Marker.AGGREGATE):
            raise InvalidTraitTarget(trait.render(), trait.span)

    def _resolve_target(self, block: ImplBlock) -> tuple[TypePath, Optional[TypePath]]:
        """The target type path, unwrapped from `Varlena<T>` when declared that way."""
        target = block.target
        if not isinstance(target, TypePath) or not target.segments:
            raise MalformedTypePath(
                "aggregates can only be declared for types whose path has a final segment",
                getattr(target, "span", block.span),
            )
        if self.markers.is_marker(target, Marker.VARLENA):
            return unwrap_path(target, target.span), target
        if target.is_self():
            raise MalformedTypePath("`Self` cannot be the target of an aggregate", target.span)
        return target, None

    def _optional_type(self, block: ImplBlock, name: str, target: TypePath) -> Optional[TypeRef]:
        item = block.find_type(name)
        if item is None:
            return None
        return substitute_self(item.type, target)

    def _const(self, block: ImplBlock, name: str) -> Optional[ConstItem]:
        item = block.find_const(name)
        if item is None:
            return None
        expected = CONSTANT_KINDS[name]
        if item.value.kind != expected:
            raise InvalidConstantType(
                name, expected, item.span, detail=f"found {item.value.kind.value} {item.value.render()}"
            )
        return item

    def _required_string(self, block: ImplBlock, name: str) -> str:
        item = self._const(block, name)
        if item is None:
            raise MissingRequiredComponent(name, block.span)
        return item.value.value

    def _literal(self, block: ImplBlock, name: str, default=None):
        item = self._const(block, name)
        return item.value.value if item is not None else default

    def _option(self, block: ImplBlock, name: str):
        """Resolve an expression constant such as `ParallelOption.Safe`."""
        item = self._const(block, name)
        if item is None:
            return None
        options = EXPRESSION_OPTIONS[name]
        segments = item.value.value
        member = segments[-1]
        # `Safe`, `ParallelOption.Safe` or `aggdef.ParallelOption.Safe`
        qualifier_ok = len(segments) == 1 or segments[-2] == options.__name__
        known = [o.value for o in options]
        if not qualifier_ok or member not in known:
            raise InvalidConstantType(
                name,
                ConstKind.EXPRESSION,
                item.span,
                detail=f"expected one of {', '.join(f'{options.__name__}.{k}' for k in known)}",
            )
        return options(member)

    def _warn_about_unused(self, block: ImplBlock) -> None:
        known_methods = {c.value for c in Component}
        for item in block.items:
            if isinstance(item, TypeItem):
                known = item.name in ASSOCIATED_TYPES
                count = block.declared(TypeItem, item.name)
            elif isinstance(item, ConstItem):
                known = item.name in CONSTANT_KINDS
                count = block.declared(ConstItem, item.name)
            elif isinstance(item, MethodItem):
                known = item.name in known_methods
                count = block.declared(MethodItem, item.name)
            else:
                continue
            if not known:
                logger.debug("%s: ignoring `%s`, not part of an aggregate", item.span, item.name)
            elif count > 1 and block.find(type(item), item.name) is item:
                logger.warning("%s: `%s` declared %d times, using the last declaration",
                               item.span, item.name, count)

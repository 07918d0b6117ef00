from typing import Optional

from ..model.aggregate import (
    AggregateDescriptor,
    AggregateSpec,
    Component,
    GeneratedFunction,
    SourceLocation,
)
from ..model.types import TypePath, TypeRef


def type_name(ty: TypeRef) -> str:
    """Short name of a type path; the rendered type for anything else."""
    if isinstance(ty, TypePath) and ty.name is not None:
        return ty.name
    return ty.render()


def assemble_descriptor(
    spec: AggregateSpec,
    functions: tuple[GeneratedFunction, ...],
    entity_prefix: str,
) -> AggregateDescriptor:
    """
    Combine a validated aggregate and its generated functions into the record
    the SQL generator registers it from. Optional fields stay None unless the
    declaration provided the matching method or constant.
    """
    by_component = {fn.component: fn.name for fn in functions}

    def present(component: Component) -> Optional[str]:
        if not spec.is_present(component):
            return None
        return by_component[component]

    return AggregateDescriptor(
        name=spec.name,
        type_identity=spec.identity,
        args=spec.args,
        state_type_name=type_name(spec.encoding.state_type),
        state_function_name=by_component[Component.STATE],
        entity_name=f"{entity_prefix}{spec.identity.snake_name}",
        source=SourceLocation(spec.span.file, spec.span.line),
        order_by=spec.order_by,
        combine_function=present(Component.COMBINE),
        finalize_function=present(Component.FINALIZE),
        serial_function=present(Component.SERIAL),
        deserial_function=present(Component.DESERIAL),
        moving_state_function=present(Component.MOVING_STATE),
        moving_state_inverse_function=present(Component.MOVING_STATE_INVERSE),
        moving_finalize_function=present(Component.MOVING_FINALIZE),
        moving_state_type=(
            type_name(spec.moving_state_type) if spec.moving_state_type is not None else None
        ),
        sort_operator=spec.sort_operator,
        initial_condition=spec.initial_condition,
        moving_initial_condition=spec.moving_initial_condition,
        parallel_marker=spec.parallel,
        finalize_modify_marker=spec.finalize_modify,
        moving_finalize_modify_marker=spec.moving_finalize_modify,
        hypothetical=spec.hypothetical,
    )

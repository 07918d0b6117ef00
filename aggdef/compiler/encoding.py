from typing import Optional

from ..model.aggregate import Direct, StateEncoding, WrappedByValue
from ..model.types import TypePath, TypeRef
from .markers import Marker, MarkerRegistry, unwrap_path


def resolve_state_encoding(
    target: TypePath,
    target_wrapper: Optional[TypePath],
    state_type: Optional[TypeRef],
    markers: MarkerRegistry,
) -> StateEncoding:
    """
    Decide how the transition state appears in generated signatures.

    A target declared as `Varlena<T>` makes `T` the wrapped state. Otherwise
    the declared `State` type (the target itself when not declared) is used,
    wrapped when it is `Varlena<T>`.
    """
    if target_wrapper is not None:
        return WrappedByValue(target, wrapper=TypePath(target_wrapper.segments))
    declared = state_type if state_type is not None else target
    if isinstance(declared, TypePath) and markers.is_marker(declared, Marker.VARLENA):
        inner = unwrap_path(declared)
        return WrappedByValue(inner, wrapper=TypePath(declared.segments))
    return Direct(declared)

"""
Recognition of the types the compiler gives special meaning to: the aggregate
capability, the by-value wrapper and the variadic wrapper.

A type is a marker only when its full path is one of the configured qualified
paths (or, with the prelude enabled, exactly the bare marker name). A type that
merely shares the final name, such as `other.Varlena<T>`, is an ordinary type.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import MalformedTypePath
from ..model.types import SourceSpan, TypePath, TypeRef
from .config import Config, config as default_config


class Marker(str, Enum):
    AGGREGATE = "aggregate"
    VARLENA = "varlena"
    VARIADIC = "variadic"


@dataclass(frozen=True)
class MarkerRegistry:
    paths: tuple[tuple[tuple[str, ...], Marker], ...]

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None) -> "MarkerRegistry":
        cfg = cfg or default_config
        table: dict[tuple[str, ...], Marker] = {}
        for marker in Marker:
            for qualified in cfg.get_marker_paths(marker.value):
                segments = tuple(qualified.split("."))
                candidates = [segments]
                if cfg.prelude_enabled():
                    candidates.append(segments[-1:])
                for candidate in candidates:
                    owner = table.get(candidate)
                    if owner is not None and owner is not marker:
                        raise ValueError(
                            f"marker path `{'.'.join(candidate)}` configured for both "
                            f"{owner.value} and {marker.value}"
                        )
                    table[candidate] = marker
        return cls(tuple(sorted(table.items())))

    def classify(self, ty: TypeRef) -> Optional[Marker]:
        if not isinstance(ty, TypePath):
            return None
        for segments, marker in self.paths:
            if segments == ty.segments:
                return marker
        return None

    def is_marker(self, ty: TypeRef, marker: Marker) -> bool:
        return self.classify(ty) is marker


def unwrap(ty: TypePath, span: Optional[SourceSpan] = None) -> TypeRef:
    """The single type argument of a wrapper type."""
    if len(ty.args) != 1:
        raise MalformedTypePath(
            f"`{ty.render()}` must wrap exactly one type", span or ty.span
        )
    return ty.args[0]


def unwrap_path(ty: TypePath, span: Optional[SourceSpan] = None) -> TypePath:
    """The single type argument of a wrapper type, which must be a type path."""
    inner = unwrap(ty, span)
    if not isinstance(inner, TypePath) or not inner.segments:
        raise MalformedTypePath(
            f"`{ty.render()}` must wrap a type path with a final segment", span or ty.span
        )
    return inner

"""
Data model for aggregate declarations: raw declarations as parsed, and the
validated, compiled forms derived from them.
"""
from .types import SourceSpan, TypePath, TupleType, TypeRef, UNIT
from .attributes import Attribute, AttributeKind
from .spec import ConstKind, ConstValue, ConstItem, ImplBlock, MethodItem, TypeItem
from .aggregate import (
    Absent,
    AggregateDescriptor,
    AggregateSpec,
    Argument,
    ArgumentList,
    Component,
    ComponentSlot,
    Direct,
    FinalizeModify,
    GeneratedFunction,
    ParallelOption,
    Parameter,
    Present,
    StateEncoding,
    TypeIdentity,
    WrappedByValue,
)

__all__ = [
    'SourceSpan', 'TypePath', 'TupleType', 'TypeRef', 'UNIT',
    'Attribute', 'AttributeKind',
    'ConstKind', 'ConstValue', 'ConstItem', 'ImplBlock', 'MethodItem', 'TypeItem',
    'Absent', 'AggregateDescriptor', 'AggregateSpec', 'Argument', 'ArgumentList',
    'Component', 'ComponentSlot', 'Direct', 'FinalizeModify', 'GeneratedFunction',
    'ParallelOption', 'Parameter', 'Present', 'StateEncoding', 'TypeIdentity',
    'WrappedByValue',
]

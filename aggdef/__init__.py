"""
aggdef: compile declarative aggregate definitions into flat, individually
callable entry points and registration descriptors.
"""
from .compiler import AggregateCompiler, CompiledAggregate, collect_all, compile_aggregate, register
from .errors import (
    AggregateError,
    AggregateSyntaxError,
    DuplicateSymbol,
    InvalidConstantType,
    InvalidTraitTarget,
    MalformedTypePath,
    MisplacedVariadic,
    MissingRequiredComponent,
    UnsupportedArgCount,
    UnsupportedOperation,
)
from .parser import AggregateParser
from .runtime import Varlena, bind

__all__ = [
    'AggregateCompiler', 'CompiledAggregate', 'collect_all', 'compile_aggregate', 'register',
    'AggregateError', 'AggregateSyntaxError', 'DuplicateSymbol', 'InvalidConstantType',
    'InvalidTraitTarget', 'MalformedTypePath', 'MisplacedVariadic', 'MissingRequiredComponent',
    'UnsupportedArgCount', 'UnsupportedOperation',
    'AggregateParser',
    'Varlena', 'bind',
]

"""
The aggregate definition compiler: validation, defaulting, function synthesis
and descriptor assembly.
"""
from .args import ARG_NAMES, MAX_ARGS, resolve_arguments
from .compiler import AggregateCompiler, BuildResult, CompiledAggregate, CompileFailure, compile_aggregate
from .config import Config, config
from .defaults import DefaultedImpl, UnsupportedStub, apply_defaults
from .descriptor import assemble_descriptor
from .encoding import resolve_state_encoding
from .inventory import INVENTORY, AggregateInventory, collect_all, register, skips_inventory
from .markers import Marker, MarkerRegistry
from .synthesizer import FunctionSynthesizer
from .validator import SpecificationValidator

__all__ = [
    'ARG_NAMES', 'MAX_ARGS', 'resolve_arguments',
    'AggregateCompiler', 'BuildResult', 'CompiledAggregate', 'CompileFailure', 'compile_aggregate',
    'Config', 'config',
    'DefaultedImpl', 'UnsupportedStub', 'apply_defaults',
    'assemble_descriptor',
    'resolve_state_encoding',
    'INVENTORY', 'AggregateInventory', 'collect_all', 'register', 'skips_inventory',
    'Marker', 'MarkerRegistry',
    'FunctionSynthesizer',
    'SpecificationValidator',
]

import logging

import os
logger = logging.getLogger("aggdef.compiler")
log_level_str = os.environ.get("AGGDEF_DEBUG", "INFO").upper()
try:
    logger.setLevel(getattr(logging, log_level_str))
except AttributeError:
    logger.setLevel(logging.INFO)
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter('[%(levelname)s] %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..errors import AggregateError
from ..model.aggregate import AggregateDescriptor, AggregateSpec, Component, GeneratedFunction
from ..model.spec import ImplBlock
from ..parser.aggregate_parser import AggregateParser
from .config import Config, config as default_config
from .defaults import UnsupportedStub, apply_defaults
from .descriptor import assemble_descriptor
from .markers import MarkerRegistry
from .synthesizer import FunctionSynthesizer
from .validator import SpecificationValidator


@dataclass(frozen=True)
class CompiledAggregate:
    """
    Everything produced for one declaration:
      - spec: the validated declaration
      - block: the declaration completed with defaults (the input is untouched)
      - functions: wrappers for `state` and every provided component
      - descriptor: registration metadata for the SQL generator
      - stubs: runtime stand-ins for every absent optional component
    """
    spec: AggregateSpec
    block: ImplBlock
    functions: tuple[GeneratedFunction, ...]
    descriptor: AggregateDescriptor
    stubs: tuple[UnsupportedStub, ...]

    def function(self, component: Component) -> Optional[GeneratedFunction]:
        for fn in self.functions:
            if fn.component is component:
                return fn
        return None

    def stub(self, component: Component) -> Optional[UnsupportedStub]:
        for stub in self.stubs:
            if stub.component is component:
                return stub
        return None


@dataclass(frozen=True)
class CompileFailure:
    block: Optional[ImplBlock]
    error: AggregateError


@dataclass
class BuildResult:
    """Outcome of compiling several declarations independently."""
    compiled: list[CompiledAggregate] = field(default_factory=list)
    failures: list[CompileFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class AggregateCompiler:
    """
    Compiles aggregate declarations into generated functions and descriptors.

    Each call is a pure function of its input: no state is kept between
    declarations, so one compiler may be shared freely.
    """

    def __init__(self, markers: Optional[MarkerRegistry] = None, cfg: Optional[Config] = None):
        cfg = cfg or default_config
        self.markers = markers or MarkerRegistry.from_config(cfg)
        self.entity_prefix = cfg.get_entity_prefix()
        self.validator = SpecificationValidator(self.markers)
        self.synthesizer = FunctionSynthesizer()
        self._parser = None

    @property
    def parser(self) -> AggregateParser:
        if self._parser is None:
            self._parser = AggregateParser()
        return self._parser

    def compile(self, block: ImplBlock) -> CompiledAggregate:
        """Compile one declaration.

        Raises:
            AggregateError: the declaration is invalid; nothing is produced.
        """
        logger.debug("[COMPILE] %s at %s", block.target.render(), block.span)
        spec = self.validator.validate(block)
        defaulted = apply_defaults(block, spec)
        functions = self.synthesizer.synthesize(spec)
        descriptor = assemble_descriptor(spec, functions, self.entity_prefix)
        logger.debug(
            "[COMPILE] %s -> %s",
            spec.identity,
            ", ".join(fn.name for fn in functions),
        )
        return CompiledAggregate(
            spec=spec,
            block=defaulted.block,
            functions=functions,
            descriptor=descriptor,
            stubs=defaulted.stubs,
        )

    def compile_source(self, text: str, source: str = "<string>") -> list[CompiledAggregate]:
        """Parse and compile every declaration in `text`; the first error is raised."""
        return [self.compile(block) for block in self.parser.parse(text, source)]

    def compile_all(self, blocks: Iterable[ImplBlock]) -> BuildResult:
        """Compile declarations independently. A failure never stops the others."""
        result = BuildResult()
        for block in blocks:
            try:
                result.compiled.append(self.compile(block))
            except AggregateError as e:
                logger.error("%s", e)
                result.failures.append(CompileFailure(block, e))
        logger.info(
            "Compiled %d aggregate(s), %d failure(s)", len(result.compiled), len(result.failures)
        )
        return result


def compile_aggregate(block: ImplBlock) -> CompiledAggregate:
    """Compile one declaration with the default configuration."""
    return AggregateCompiler().compile(block)

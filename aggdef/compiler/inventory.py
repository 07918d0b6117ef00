# Inventory of compiled aggregates, read by the SQL generator once a build is done.
import logging

from ..errors import DuplicateSymbol
from ..model.attributes import AttributeKind
from ..model.aggregate import AggregateDescriptor, GeneratedFunction
from .compiler import CompiledAggregate

logger = logging.getLogger("aggdef.compiler.inventory")


class AggregateInventory:
    """
    Collects the output of every compiled aggregate in a build:
      - exported functions, keyed by their (unique) name
      - one descriptor per aggregate, keyed by entity name
    """

    def __init__(self):
        self._compiled: dict[str, CompiledAggregate] = {}
        self._owners: dict[str, str] = {}

    def submit(self, compiled: CompiledAggregate) -> None:
        """Add a compiled aggregate.

        Raises:
            DuplicateSymbol: the aggregate, or one of its functions, is already
                registered. The inventory is left unchanged.
        """
        descriptor = compiled.descriptor
        if descriptor.entity_name in self._compiled:
            raise DuplicateSymbol(
                f"aggregate `{descriptor.type_identity.full_path}` is already registered",
                compiled.spec.span,
            )
        for fn in compiled.functions:
            owner = self._owners.get(fn.name)
            if owner is not None:
                raise DuplicateSymbol(f"function `{fn.name}` is already exported by `{owner}`",
                                      compiled.spec.span)

        self._compiled[descriptor.entity_name] = compiled
        for fn in compiled.functions:
            self._owners[fn.name] = descriptor.type_identity.full_path
        logger.debug("Registered aggregate %s (%d functions)", descriptor.name, len(compiled.functions))

    def collect(self) -> list[AggregateDescriptor]:
        """Every registered descriptor, ordered by entity name."""
        return [self._compiled[key].descriptor for key in sorted(self._compiled)]

    def compiled(self) -> list[CompiledAggregate]:
        return [self._compiled[key] for key in sorted(self._compiled)]

    def functions(self) -> list[GeneratedFunction]:
        """Every exported function, grouped by aggregate in `collect()` order."""
        return [fn for compiled in self.compiled() for fn in compiled.functions]

    def clear(self) -> None:
        self._compiled.clear()
        self._owners.clear()

    def __len__(self) -> int:
        return len(self._compiled)

    def __contains__(self, entity_name: str) -> bool:
        return entity_name in self._compiled


def skips_inventory(compiled: CompiledAggregate) -> bool:
    """Declared with `@skip_inventory`: compiled, but kept out of the inventory."""
    return any(a.kind is AttributeKind.SKIP_INVENTORY for a in compiled.spec.attributes)


INVENTORY = AggregateInventory()


def register(compiled: CompiledAggregate) -> CompiledAggregate:
    if skips_inventory(compiled):
        logger.debug("Not registering %s, marked skip_inventory", compiled.descriptor.name)
        return compiled
    INVENTORY.submit(compiled)
    return compiled


def collect_all() -> list[AggregateDescriptor]:
    return INVENTORY.collect()

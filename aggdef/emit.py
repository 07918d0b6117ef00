"""
Plain-data and YAML renderings of compiled aggregates, for the SQL generator
and the exported-function registry. Key order is fixed so the same input
always produces the same text.
"""
from typing import Any, Iterable, Optional

import yaml

from .compiler.compiler import CompiledAggregate
from .compiler.config import Config, config as default_config
from .model.aggregate import AggregateDescriptor, ArgumentList, GeneratedFunction


def arguments_to_list(args: Optional[ArgumentList]) -> Optional[list[dict[str, Any]]]:
    if args is None:
        return None
    result = []
    for arg in args:
        entry = {"name": arg.name, "type": arg.type.render()}
        if arg.variadic:
            entry["variadic"] = True
            entry["element_type"] = arg.element_type.render()
        result.append(entry)
    return result


def descriptor_to_dict(descriptor: AggregateDescriptor) -> dict[str, Any]:
    def marker(value):
        return value.value if value is not None else None

    return {
        "name": descriptor.name,
        "entity_name": descriptor.entity_name,
        "type_identity": {
            "full_path": descriptor.type_identity.full_path,
            "name": descriptor.type_identity.name,
        },
        "source": {"file": descriptor.source.file, "line": descriptor.source.line},
        "args": arguments_to_list(descriptor.args),
        "order_by": arguments_to_list(descriptor.order_by),
        "state_type_name": descriptor.state_type_name,
        "state_function_name": descriptor.state_function_name,
        "combine_function": descriptor.combine_function,
        "finalize_function": descriptor.finalize_function,
        "serial_function": descriptor.serial_function,
        "deserial_function": descriptor.deserial_function,
        "moving_state_function": descriptor.moving_state_function,
        "moving_state_inverse_function": descriptor.moving_state_inverse_function,
        "moving_finalize_function": descriptor.moving_finalize_function,
        "moving_state_type": descriptor.moving_state_type,
        "sort_operator": descriptor.sort_operator,
        "initial_condition": descriptor.initial_condition,
        "moving_initial_condition": descriptor.moving_initial_condition,
        "parallel_marker": marker(descriptor.parallel_marker),
        "finalize_modify_marker": marker(descriptor.finalize_modify_marker),
        "moving_finalize_modify_marker": marker(descriptor.moving_finalize_modify_marker),
        "hypothetical": descriptor.hypothetical,
    }


def function_to_dict(fn: GeneratedFunction) -> dict[str, Any]:
    return {
        "name": fn.name,
        "component": fn.component.value,
        "signature": fn.signature(),
        "parameters": [
            {"name": p.name, "type": p.type.render(), "variadic": p.variadic} for p in fn.parameters
        ],
        "returns": fn.return_type.render(),
        "delegate": fn.delegate,
        "attributes": [repr(a) for a in fn.attributes],
    }


def compiled_to_dict(compiled: CompiledAggregate) -> dict[str, Any]:
    return {
        "descriptor": descriptor_to_dict(compiled.descriptor),
        "functions": [function_to_dict(fn) for fn in compiled.functions],
    }


def dump_yaml(compiled: Iterable[CompiledAggregate], cfg: Optional[Config] = None) -> str:
    cfg = cfg or default_config
    document = {"aggregates": [compiled_to_dict(c) for c in compiled]}
    return yaml.safe_dump(
        document,
        sort_keys=bool(cfg.get("emit.sort_keys", False)),
        default_flow_style=False,
        allow_unicode=True,
    )

import logging

from ..model.aggregate import AggregateSpec, Component, GeneratedFunction, Parameter
from ..model.types import UNIT, TypePath

logger = logging.getLogger("aggdef.compiler.synthesizer")

BYTES = TypePath(("bytes",))
INTERNAL = TypePath(("Internal",))


def function_name(spec: AggregateSpec, component: Component) -> str:
    return f"{spec.identity.snake_name}_{component.value}"


class FunctionSynthesizer:
    """
    Builds one flat wrapper per component the aggregate provides. `state` is
    always provided; absent optional components get no wrapper.
    """

    def synthesize(self, spec: AggregateSpec) -> tuple[GeneratedFunction, ...]:
        functions = tuple(self.synthesize_component(spec, c) for c in spec.present_components())
        for fn in functions:
            logger.debug("generated %s", fn.signature())
        return functions

    def synthesize_component(self, spec: AggregateSpec, component: Component) -> GeneratedFunction:
        state = spec.encoding.signature_type
        moving_state = spec.moving_state_type if spec.moving_state_type is not None else UNIT
        finalize = spec.finalize_type if spec.finalize_type is not None else UNIT

        if component is Component.STATE:
            params = (Parameter("state", state),) + self._arguments(spec)
            returns = state
        elif component is Component.COMBINE:
            params = (Parameter("state", state), Parameter("other", state))
            returns = state
        elif component is Component.FINALIZE:
            params = (Parameter("state", state),)
            returns = finalize
        elif component is Component.SERIAL:
            params = (Parameter("state", state),)
            returns = BYTES
        elif component is Component.DESERIAL:
            params = (Parameter("buf", BYTES), Parameter("internal", INTERNAL))
            returns = state
        elif component in (Component.MOVING_STATE, Component.MOVING_STATE_INVERSE):
            params = (Parameter("mstate", moving_state),) + self._arguments(spec)
            returns = moving_state
        elif component is Component.MOVING_FINALIZE:
            params = (Parameter("mstate", moving_state),)
            returns = finalize
        else:
            raise ValueError(f"Unknown component: {component}")

        return GeneratedFunction(
            name=function_name(spec, component),
            component=component,
            parameters=params,
            return_type=returns,
            delegate=f"{spec.identity.full_path}.{component.value}",
            attributes=spec.attributes,
        )

    @staticmethod
    def _arguments(spec: AggregateSpec) -> tuple[Parameter, ...]:
        return tuple(
            Parameter(arg.name, arg.signature_type, variadic=arg.variadic) for arg in spec.args
        )

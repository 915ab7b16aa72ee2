import re
from typing import Any, Iterable

from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from .errors import MappingError
from .models import EnvVar, LabelSelectorRequirement

# Kubernetes accepts any C identifier plus '-' and '.' in env var names.
ENV_NAME_PATTERN = re.compile(r"[-._a-zA-Z][-._a-zA-Z0-9]*")

_requirements_adapter = TypeAdapter(list[LabelSelectorRequirement])


def map_to_envs(env_map: dict[str, str]) -> list[EnvVar]:
    """
    Converts an env map into EnvVar entries, keeping the dict's insertion order.
    Raises MappingError on an invalid name or a non-string value.
    """
    envs: list[EnvVar] = []
    for name, value in env_map.items():
        if not isinstance(name, str) or not ENV_NAME_PATTERN.fullmatch(name):
            raise MappingError("SetEnvs err", ValueError(f"invalid env name {name!r}"), field="env")
        if not isinstance(value, str):
            raise MappingError("SetEnvs err", TypeError(f"env {name} value must be a string"), field="env")
        envs.append(EnvVar(name=name, value=value))
    return envs


def map_match_expressions(expressions: Iterable[Any]) -> list[LabelSelectorRequirement]:
    """
    Maps {key, operator, values} items (dicts or requirement models) into selector requirements.
    Raises MappingError wrapping the schema error.
    """
    items = [e.model_dump() if isinstance(e, LabelSelectorRequirement) else e for e in expressions]
    try:
        return _requirements_adapter.validate_python(items)
    except SchemaError as e:
        raise MappingError("SetMatchExpressions err", e, field="spec.selector.matchExpressions") from e

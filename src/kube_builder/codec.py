"""JSON / YAML decoding of complete Deployment descriptors, and Kubernetes-shaped output."""
from typing import Any

import yaml
from pydantic import ValidationError as SchemaError

from .errors import DecodeError
from .models import Deployment


def decode_json(data: bytes | str) -> tuple[Deployment | None, DecodeError | None]:
    try:
        return Deployment.model_validate_json(data), None
    except SchemaError as e:
        return None, DecodeError("json", e)


def decode_yaml(data: bytes | str) -> tuple[Deployment | None, DecodeError | None]:
    try:
        raw = yaml.safe_load(data)
    except yaml.YAMLError as e:
        return None, DecodeError("yaml", e)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        return None, DecodeError("yaml", TypeError(f"expected a mapping, got {type(raw).__name__}"))

    try:
        return Deployment.model_validate(raw), None
    except SchemaError as e:
        return None, DecodeError("yaml", e)


def to_dict(deployment: Deployment) -> dict[str, Any]:
    return deployment.model_dump(by_alias=True, exclude_none=True)


def to_yaml(deployment: Deployment) -> str:
    return yaml.safe_dump(to_dict(deployment), sort_keys=False)

"""Config loading and validation for JSON/YAML gateway config documents."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from starburst.core.errors import ConfigError, ConfigLoadError
from starburst.core.model import (
    DEFAULT_ITERATIONS,
    DEFAULT_MEMORY_COST_KIB,
    DEFAULT_PARALLELISM,
    Credential,
    Device,
    GatewayConfig,
)

_YAML_SUFFIXES = {".yml", ".yaml"}
_TYPE_NAMES = {
    "object": "an object",
    "array": "an array",
    "string": "a string",
    "integer": "an integer",
    "number": "a number",
}
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigLoadError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@lru_cache(maxsize=1)
def _schema() -> dict[str, Any]:
    schema_text = resources.files("starburst.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    return json.loads(schema_text)


def _load_schema_validator() -> Any:
    schema = _schema()
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _field_segments(error: ValidationError) -> list[str | int]:
    segments: list[str | int] = list(error.absolute_path)
    if error.validator == "required" and isinstance(error.instance, dict):
        missing = [key for key in error.validator_value if key not in error.instance]
        if missing:
            segments.append(missing[0])
    return segments


def _format_field(segments: list[str | int]) -> str:
    field = ""
    for segment in segments:
        if isinstance(segment, int):
            field += f"[{segment}]"
        elif field:
            field += f".{segment}"
        else:
            field = str(segment)
    return field


def _document_order(segments: list[str | int]) -> tuple[int, ...]:
    """Rank a field path by where the field sits in the schema's declared order.

    Parents rank before their children and array elements rank by index, so the
    smallest key is the first violation met when walking the document top-down.
    """
    schema: dict[str, Any] = _schema()
    order: list[int] = []
    for segment in segments:
        if isinstance(segment, int):
            order.append(segment)
            schema = schema.get("items", {})
            continue
        properties = schema.get("properties", {})
        names = list(properties)
        order.append(names.index(segment) if segment in properties else len(names))
        schema = properties.get(segment, {})
    return tuple(order)


def _reason(error: ValidationError) -> str:
    if error.validator == "required":
        return "is required"
    if error.validator == "type":
        expected = error.validator_value
        if isinstance(expected, list):
            return "must be " + " or ".join(_TYPE_NAMES.get(t, t) for t in expected)
        return f"must be {_TYPE_NAMES.get(expected, expected)}"
    if error.validator == "minimum":
        if error.validator_value == 0:
            return "must not be negative"
        return f"must be at least {error.validator_value}"
    if error.validator == "minLength":
        return "must not be empty"
    if "x-reason" in error.schema:
        return error.schema["x-reason"]
    return error.message


def validate_config(doc: Any) -> GatewayConfig:
    """Validate an untyped config document and build the immutable config model.

    Raises:
        ConfigError: for the first violation in document order, naming the
            offending field (e.g. ``servers[1].hostname``).
    """
    validator = _load_schema_validator()
    errors = list(validator.iter_errors(doc))
    if errors:
        first = min(errors, key=lambda e: _document_order(_field_segments(e)))
        segments = _field_segments(first)
        if not segments:
            raise ConfigError("", "config document must be an object")
        raise ConfigError(_format_field(segments), _reason(first))

    password = doc.get("password", {})
    advanced = password.get("advanced", {})

    credential: Credential | None = None
    if password.get("hash") and password.get("salt"):
        credential = Credential(
            hash=password["hash"].lower(),
            salt=password["salt"],
            memory_cost_kib=int(advanced.get("memory", DEFAULT_MEMORY_COST_KIB)),
            iterations=int(advanced.get("iterations", DEFAULT_ITERATIONS)),
            parallelism=int(advanced.get("parallelism", DEFAULT_PARALLELISM)),
        )
    elif "hash" in password or "salt" in password:
        LOGGER.warning("password.hash and password.salt must both be non-empty; wake requests will be denied")

    devices = tuple(
        Device(
            name=server["name"],
            hostname=server["hostname"],
            mac=server.get("mac"),
        )
        for server in doc["servers"]
    )

    return GatewayConfig(
        name=doc.get("name"),
        credential=credential,
        devices=devices,
    )


def _read_document(path: Path) -> Any:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    if path.suffix.lower() in _YAML_SUFFIXES:
        try:
            return yaml.load(content, Loader=UniqueKeyLoader)
        except yaml.YAMLError as exc:
            raise ConfigLoadError(f"Invalid YAML in {path}: {exc}") from exc

    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigLoadError(f"Invalid JSON in {path}: {exc}") from exc


def load_config(path: str | Path) -> GatewayConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigLoadError(f'Config file "{config_path}" does not exist')
    return validate_config(_read_document(config_path))

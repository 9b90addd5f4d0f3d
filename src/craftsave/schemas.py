"""JSON Schemas for the two JSON-based save formats.

Validation only rejects documents whose overall shape is wrong. Per-entry
oddities (non-array recipe lists, dangling indices, "Nothing" entries) are
left for the codecs to skip.
"""
from __future__ import annotations

import json
import logging
from copy import deepcopy
from typing import Any, Dict, List, Mapping, Sequence

from jsonschema import Draft202012Validator, exceptions as js_exceptions, validators

from .errors import MalformedPayloadError, SchemaValidationError

logger = logging.getLogger(__name__)

_NAMED_ITEM = {
    "type": "object",
    "required": ["text"],
    "properties": {
        "text": {"type": "string"},
    },
}

LEGACY_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "elements": {
            "type": "array",
            "default": [],
            "items": {
                **_NAMED_ITEM,
                "properties": {**_NAMED_ITEM["properties"], "discovered": {"type": "boolean"}},
            },
        },
        "recipes": {"type": "object", "default": {}},
    },
}

OFFICIAL_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["items"],
    "properties": {
        "name": {"type": "string"},
        "created": {"type": "number"},
        "items": {
            "type": "array",
            "items": {
                **_NAMED_ITEM,
                "required": ["id", "text"],
                "properties": {
                    **_NAMED_ITEM["properties"],
                    "id": {"type": "integer"},
                    "discovery": {"type": "boolean"},
                    "recipes": {"type": "array", "items": {"type": "array"}},
                },
            },
        },
    },
}


def _extend_with_default(validator_class):
    """Extend a jsonschema validator so missing properties get their schema default."""
    validate_properties = validator_class.VALIDATORS["properties"]

    def set_defaults(validator, properties, instance, schema):
        if isinstance(instance, dict):
            for prop, subschema in properties.items():
                if "default" in subschema and prop not in instance:
                    instance[prop] = deepcopy(subschema["default"])
        yield from validate_properties(validator, properties, instance, schema)

    return validators.extend(validator_class, {"properties": set_defaults})


DefaultingValidator = _extend_with_default(Draft202012Validator)


def _format_errors(fmt: str, errors: Sequence[js_exceptions.ValidationError]) -> str:
    lines = [f"Schema validation failed for {fmt} save file:"]
    for err in errors:
        where = ".".join(str(p) for p in err.absolute_path) or "root"
        lines.append(f" - At {where}: {err.message}")
    return "\n".join(lines)


def validate_document(fmt: str, data: Any, schema: Mapping[str, Any]) -> Any:
    """Validate ``data`` in place, filling schema defaults; raise SchemaValidationError on failure."""
    errors: List[js_exceptions.ValidationError] = sorted(
        DefaultingValidator(schema).iter_errors(data), key=lambda e: [str(p) for p in e.path]
    )
    if errors:
        for err in errors:
            logger.debug("%s schema error at %s: %s", fmt, list(err.path), err.message)
        raise SchemaValidationError(fmt, errors, _format_errors(fmt, errors))
    return data


def load_document(fmt: str, raw: bytes, schema: Mapping[str, Any]) -> Any:
    """Parse UTF-8 JSON bytes and validate them against ``schema``."""
    try:
        data = json.loads(bytes(raw).decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise MalformedPayloadError(f"{fmt} save file is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise MalformedPayloadError(
            f"Invalid JSON in {fmt} save file (line {exc.lineno}, column {exc.colno}): {exc.msg}"
        ) from exc
    return validate_document(fmt, data, schema)

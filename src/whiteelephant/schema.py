from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from jsonschema import Draft202012Validator
from jsonschema import exceptions as jsonschema_exceptions

from whiteelephant.paths import get_paths


class SchemaError(RuntimeError):
    pass


class ValidationFailed(ValueError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise SchemaError(f"Missing schema file: {path}") from e
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid JSON in {path}: {e}") from e


@lru_cache(maxsize=None)
def state_validator() -> Draft202012Validator:
    path = get_paths().schema_dir / "state.schema.json"
    schema = _load_json(path)
    try:
        Draft202012Validator.check_schema(schema)
    except jsonschema_exceptions.SchemaError as e:
        raise SchemaError(f"Invalid schema in {path}: {e.message}") from e
    return Draft202012Validator(schema)


def validate_json(instance: object, validator: Draft202012Validator, *, context: str) -> None:
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ValidationFailed("\n".join(lines))

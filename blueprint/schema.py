from __future__ import annotations

import json
import os
from typing import List

from pydantic import BaseModel, ConfigDict, FiniteFloat, ValidationError

from blueprint.constants import VERSION


class InvalidBlueprintError(ValueError):
    """Raised when blueprint JSON is malformed or has the wrong shape.

    JSON syntax errors and structural errors are reported the same way;
    ``errors`` holds pydantic's error list for callers that want details.
    """

    def __init__(self, message: str, errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []


class Room(BaseModel):
    # strict: numbers must be JSON numbers and names JSON strings
    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    name: str
    x: FiniteFloat
    y: FiniteFloat
    width: FiniteFloat
    height: FiniteFloat


class Blueprint(BaseModel):
    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    rooms: List[Room]


def parse_blueprint(json_data: str) -> Blueprint:
    """Parse blueprint JSON text, raising ``InvalidBlueprintError`` on failure."""
    try:
        return Blueprint.model_validate_json(json_data)
    except ValidationError as e:
        raise InvalidBlueprintError(
            f"Invalid blueprint JSON: {e.error_count()} error(s)",
            e.errors(include_url=False, include_context=False, include_input=False),
        ) from e


def emit_blueprint_schema(path: str) -> str:
    """Write the versioned JSON Schema for ``Blueprint`` to ``path``."""
    schema = Blueprint.model_json_schema()
    schema["$id"] = f"blueprint.{VERSION}.json"
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2)
    return path

"""
Schema checks for kanban.env settings and story decks.

Schemas live in kanban/schemas/<name>.schema.json and are compiled into a
Draft 7 validator on first use. Every violation is collected: the most
relevant one becomes the error message, the full list rides along on
ValidationError.problems so a front-end can show all of them at once.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema.exceptions import best_match

SCHEMAS_DIR = Path(__file__).resolve().parent.parent / "schemas"


class ValidationError(Exception):
    """Settings or a story deck did not match its schema."""

    def __init__(self, schema_name: str, message: str, path: str = None, problems: list[str] = None):
        self.schema_name = schema_name
        self.path = path
        self.problems = problems or []
        super().__init__(f"[{schema_name}] {message}" + (f" at {path}" if path else ""))


def _dotted(error: jsonschema.ValidationError) -> str:
    return ".".join(str(p) for p in error.absolute_path) or "(root)"


@lru_cache(maxsize=None)
def get_validator(schema_name: str) -> jsonschema.Draft7Validator:
    """Compile a bundled schema. Raises ValidationError if it is missing."""
    schema_path = SCHEMAS_DIR / f"{schema_name}.schema.json"
    if not schema_path.exists():
        raise ValidationError(schema_name, f"Schema file not found: {schema_path}")
    schema = json.loads(schema_path.read_text())
    jsonschema.Draft7Validator.check_schema(schema)
    return jsonschema.Draft7Validator(schema)


def validate(data: Any, schema_name: str) -> None:
    """
    Check parsed data against a bundled schema ("game" or "catalog").

    Raises:
        ValidationError: With the best-matching violation as message and
            every violation, sorted by path, in .problems
    """
    errors = list(get_validator(schema_name).iter_errors(data))
    if not errors:
        return

    worst = best_match(errors)
    problems = sorted(f"{_dotted(e)}: {e.message}" for e in errors)
    raise ValidationError(schema_name, worst.message, _dotted(worst), problems)

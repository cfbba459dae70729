"""
Safe .env file parser for game settings.

Parses KEY=value files without shell execution. Values are returned as
strings; typing happens in config.py. Anything that looks like shell
expansion is rejected so a settings file can never run code.
"""

import re
from pathlib import Path

FORBIDDEN_PATTERNS = [
    r'`',           # backticks
    r'\$\(',        # command substitution
    r'\$\{',        # variable expansion
    r';',           # command chaining
    r'&&',          # AND chaining
    r'\|',          # pipe / OR chaining
]

KEY_PATTERN = re.compile(r'^[A-Z][A-Z0-9_]*$')


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    # Unquoted values may carry a trailing comment
    if ' #' in value:
        value = value.split(' #', 1)[0].rstrip()
    return value


def parse_env(text: str) -> dict[str, str]:
    """
    Parse env-file content, return dict.

    Raises:
        ValueError: if syntax invalid, a key is duplicated or a forbidden
            pattern is found
    """
    result: dict[str, str] = {}

    for lineno, line in enumerate(text.splitlines(), 1):
        line = line.strip()

        if not line or line.startswith('#'):
            continue

        if line.startswith('export '):
            line = line[len('export '):].lstrip()

        if '=' not in line:
            raise ValueError(f"Line {lineno}: Invalid syntax (no '=')")

        key, _, value = line.partition('=')
        key = key.strip()
        value = _unquote(value.strip())

        if not KEY_PATTERN.match(key):
            raise ValueError(f"Line {lineno}: Invalid key '{key}'")

        if key in result:
            raise ValueError(f"Line {lineno}: Duplicate key '{key}'")

        for pattern in FORBIDDEN_PATTERNS:
            if re.search(pattern, value):
                raise ValueError(f"Line {lineno}: Forbidden pattern in value of '{key}'")

        result[key] = value

    return result


def load_env(filepath: str) -> dict[str, str]:
    """
    Read and parse an env file.

    Raises:
        FileNotFoundError: if file doesn't exist
        ValueError: see parse_env()
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Env file not found: {filepath}")
    return parse_env(path.read_text())

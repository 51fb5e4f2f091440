import re
from typing import Dict, Mapping

import structlog

logger = structlog.get_logger(__name__)

_SEPARATOR = re.compile(r"\s*[=:]\s*")
_VARIABLE = re.compile(r"^\$\{?(?P<name>[A-Za-z_][A-Za-z0-9_.]*)\}?$")


def parse_properties(text: str | None) -> Dict[str, str]:
    """Parse 'key=value' lines; lines starting with '#' or '!' are comments"""
    properties = {}
    for line in (text or "").splitlines():
        line = line.strip()
        if not line or line[0] in "#!":
            continue
        parts = _SEPARATOR.split(line, maxsplit=1)
        properties[parts[0]] = parts[1] if len(parts) > 1 else ""
    return properties


def resolve_env_parameters(properties: Dict[str, str], env: Mapping[str, str]) -> Dict[str, str]:
    """Replace '$NAME' / '${NAME}' values with the build's environment value"""
    resolved = {}
    for key, value in properties.items():
        if match := _VARIABLE.match(value):
            name = match["name"]
            if name not in env:
                logger.debug(f"Environment variable {name} not set, dropping '{key}'")
                continue
            value = env[name]
        resolved[key] = value
    return resolved

from enum import Enum
from slugify import slugify

class NameFormat(Enum):
    RAW = "raw"
    UNDERSCORE = "underscore"
    SLUG = "slug"

def format_name(name: str, format_style: NameFormat = NameFormat.SLUG) -> str:
    """Flatten a job path such as 'folder/My Job' into a single identifier"""
    if format_style == NameFormat.RAW:
        return name
    elif format_style == NameFormat.UNDERSCORE:
        return name.replace('/', '_').replace(' ', '_')
    elif format_style == NameFormat.SLUG:
        return slugify(name, separator="_", lowercase=False)
    return name

def prefixed(prefix: str | None, name: str) -> str:
    return f"{prefix}_{name}" if prefix else name

from typing import Optional, Protocol

import structlog

from influxdb_publisher.models.build import BuildContext
from influxdb_publisher.utils.formatters import NameFormat, format_name, prefixed

logger = structlog.get_logger(__name__)

DEFAULT_PROJECT_NAME = "unknown_project"


class MeasurementRenderer(Protocol):
    def render(self, build: BuildContext) -> str:
        ...


class ProjectNameRenderer:
    """Renders the project name every point is tagged with"""

    def __init__(
        self,
        custom_prefix: Optional[str] = None,
        custom_project_name: Optional[str] = None,
        name_format: NameFormat = NameFormat.SLUG,
    ):
        self.custom_prefix = custom_prefix or None
        self.custom_project_name = custom_project_name or None
        self.name_format = name_format

    def render(self, build: BuildContext) -> str:
        if self.custom_project_name:
            return prefixed(self.custom_prefix, self.custom_project_name)

        path = getattr(build, "full_name", None) or getattr(build, "job_name", None)
        name = format_name(path, self.name_format) if isinstance(path, str) else ""
        if not name:
            logger.debug(f"Cannot derive project name from {path!r}, using default")
            name = DEFAULT_PROJECT_NAME
        return prefixed(self.custom_prefix, name)

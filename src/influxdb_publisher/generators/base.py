from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type, TypeVar

import structlog
from pydantic import BaseModel

from influxdb_publisher.errors import GeneratorUnavailable
from influxdb_publisher.models.build import BuildContext
from influxdb_publisher.models.metrics import Point
from influxdb_publisher.models.reports import Report
from influxdb_publisher.renderers.project_name import MeasurementRenderer
from influxdb_publisher.utils.time import convert_iso_to_timestamp
from influxdb_publisher.utils.utils import parse_model

logger = structlog.get_logger(__name__)

ReportT = TypeVar("ReportT", bound=BaseModel)

PROJECT_NAME = "project_name"
PROJECT_PATH = "project_path"
BUILD_NUMBER = "build_number"
CUSTOM_PREFIX = "prefix"


class PointGenerator(ABC):
    """Turns one optional source of build data into time series points.

    Subclasses reading a report set `report_attr` (the BuildContext attribute
    holding the raw report) and `plugin` (the host integration that produces
    it). A missing integration makes the generator behave as if the report
    were absent.
    """

    name: str = ""
    plugin: Optional[str] = None
    report_attr: Optional[str] = None

    def __init__(self, renderer: MeasurementRenderer, custom_prefix: Optional[str], timestamp: int):
        self.renderer = renderer
        self.custom_prefix = custom_prefix or None
        self.timestamp = timestamp

    def has_report(self, build: BuildContext) -> bool:
        try:
            return self.raw_report(build) is not None
        except GeneratorUnavailable as e:
            logger.debug(f"Generator skipped: {e}")
            return False

    @abstractmethod
    def generate(self, build: BuildContext) -> List[Point]:
        """Generate the points for this source; only called when has_report is true"""
        pass

    def raw_report(self, build: BuildContext) -> Any:
        if not build.has_plugin(self.plugin):
            raise GeneratorUnavailable(self.plugin)
        if self.report_attr is None:
            return None
        return getattr(build, self.report_attr, None)

    def load_report(self, build: BuildContext, model: Type[ReportT]) -> ReportT:
        return parse_model(self.raw_report(build), model=model)

    def report_timestamp(self, report: Report) -> int:
        if report.timestamp:
            if (ts := convert_iso_to_timestamp(report.timestamp)) is not None:
                return ts
            logger.warning(f"{self.name}: ignoring unparsable report timestamp {report.timestamp!r}")
        return self.timestamp

    def build_point(
        self,
        measurement: str,
        build: BuildContext,
        fields: Optional[Dict[str, Any]] = None,
        tags: Optional[Dict[str, Any]] = None,
        timestamp: Optional[int] = None,
    ) -> Point:
        project_name = self.renderer.render(build)
        point_tags = {PROJECT_NAME: project_name, PROJECT_PATH: build.project_path}
        if self.custom_prefix:
            point_tags[CUSTOM_PREFIX] = self.custom_prefix
        point_tags.update(tags or {})

        point_fields = {
            PROJECT_NAME: project_name,
            PROJECT_PATH: build.project_path,
            BUILD_NUMBER: build.build_number,
        }
        point_fields.update(fields or {})

        return Point(
            measurement=measurement,
            timestamp=self.timestamp if timestamp is None else timestamp,
            fields=point_fields,
            tags=point_tags,
        )

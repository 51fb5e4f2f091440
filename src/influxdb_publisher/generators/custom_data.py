from typing import Any, Dict, List, Optional

from influxdb_publisher.models.build import BuildContext
from influxdb_publisher.models.metrics import Point
from influxdb_publisher.renderers.project_name import MeasurementRenderer
from influxdb_publisher.utils.time import now_ms

from .base import PointGenerator
from .jenkins_base import BUILD_TIME, build_time

DEFAULT_MEASUREMENT = "jenkins_custom_data"


class CustomDataPointGenerator(PointGenerator):
    """Caller supplied fields and tags, written as a single point"""

    name = "Custom data"

    def __init__(
        self,
        renderer: MeasurementRenderer,
        custom_prefix: Optional[str],
        timestamp: int,
        custom_data: Optional[Dict[str, Any]] = None,
        custom_data_tags: Optional[Dict[str, str]] = None,
        measurement_name: Optional[str] = None,
    ):
        super().__init__(renderer, custom_prefix, timestamp)
        self.custom_data = custom_data or {}
        self.custom_data_tags = custom_data_tags or {}
        self.measurement = f"custom_{measurement_name}" if measurement_name else DEFAULT_MEASUREMENT

    def has_report(self, build: BuildContext) -> bool:
        return bool(self.custom_data)

    def generate(self, build: BuildContext) -> List[Point]:
        fields = {BUILD_TIME: build_time(build, now_ms())}
        fields.update(self.custom_data)
        return [self.build_point(self.measurement, build, fields=fields, tags=self.custom_data_tags)]


class CustomDataMapPointGenerator(PointGenerator):
    """One point per entry of a measurement name -> fields mapping"""

    name = "Custom data map"

    def __init__(
        self,
        renderer: MeasurementRenderer,
        custom_prefix: Optional[str],
        timestamp: int,
        custom_data_map: Optional[Dict[str, Dict[str, Any]]] = None,
        custom_data_map_tags: Optional[Dict[str, Dict[str, str]]] = None,
    ):
        super().__init__(renderer, custom_prefix, timestamp)
        self.custom_data_map = custom_data_map or {}
        self.custom_data_map_tags = custom_data_map_tags or {}

    def has_report(self, build: BuildContext) -> bool:
        return bool(self.custom_data_map)

    def generate(self, build: BuildContext) -> List[Point]:
        points = []
        for measurement, fields in self.custom_data_map.items():
            if not fields:
                continue
            tags = self.custom_data_map_tags.get(measurement, {})
            points.append(self.build_point(measurement, build, fields=fields, tags=tags))
        return points

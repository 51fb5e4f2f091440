from typing import List, Optional

import structlog

from influxdb_publisher.models.build import BuildContext, BuildResult
from influxdb_publisher.models.metrics import Point
from influxdb_publisher.renderers.project_name import MeasurementRenderer
from influxdb_publisher.utils.properties import parse_properties, resolve_env_parameters
from influxdb_publisher.utils.time import now_ms

from .base import PointGenerator

logger = structlog.get_logger(__name__)

DEFAULT_MEASUREMENT = "jenkins_data"

BUILD_TIME = "build_time"
BUILD_RESULT = "build_result"


class JenkinsBasePointGenerator(PointGenerator):
    """Build metadata: always available, always exactly one point"""

    name = "Jenkins base data"

    def __init__(
        self,
        renderer: MeasurementRenderer,
        custom_prefix: Optional[str],
        timestamp: int,
        env_parameter_field: Optional[str] = None,
        env_parameter_tag: Optional[str] = None,
        measurement_name: Optional[str] = None,
    ):
        super().__init__(renderer, custom_prefix, timestamp)
        self.env_parameter_field = env_parameter_field
        self.env_parameter_tag = env_parameter_tag
        self.measurement_name = measurement_name or DEFAULT_MEASUREMENT

    def has_report(self, build: BuildContext) -> bool:
        return True

    def generate(self, build: BuildContext) -> List[Point]:
        measured_time = now_ms()
        result: Optional[BuildResult] = build.result

        fields = {
            BUILD_TIME: build_time(build, measured_time),
            "build_scheduled_time": build.scheduled_time,
            "build_exec_time": build.start_time,
            "build_measured_time": measured_time,
            "build_status_message": build.status_message,
            BUILD_RESULT: result.value if result else "?",
            "build_result_ordinal": result.ordinal if result else 5,
            "build_successful": result == BuildResult.SUCCESS,
            "build_agent_name": build.node_name,
            "build_branch_name": build.branch_name,
            "project_build_health": build.build_health,
            "last_successful_build": build.last_successful_build,
            "last_stable_build": build.last_stable_build,
            "build_causer": build.causer,
            "build_user": build.user,
            "time_in_queue": build.time_in_queue,
        }
        if build.test_results is not None:
            fields["tests_failed"] = build.test_results.failed
            fields["tests_skipped"] = build.test_results.skipped
            fields["tests_total"] = build.test_results.total

        tags = {BUILD_RESULT: fields[BUILD_RESULT]}

        if self.env_parameter_field:
            fields.update(self._env_parameters(self.env_parameter_field, build))
        if self.env_parameter_tag:
            tags.update(self._env_parameters(self.env_parameter_tag, build))

        return [self.build_point(self.measurement_name, build, fields=fields, tags=tags)]

    @staticmethod
    def _env_parameters(text: str, build: BuildContext):
        return resolve_env_parameters(parse_properties(text), build.environment)


def build_time(build: BuildContext, measured_time: int) -> int:
    """Duration of a finished build, elapsed time of a running one"""
    if build.duration or build.start_time is None:
        return build.duration
    return max(measured_time - build.start_time, 0)

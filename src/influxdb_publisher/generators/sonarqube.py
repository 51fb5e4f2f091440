from typing import List

from influxdb_publisher.models.build import BuildContext
from influxdb_publisher.models.metrics import Point
from influxdb_publisher.models.reports import SonarQubeReport

from .base import PointGenerator


class SonarQubePointGenerator(PointGenerator):
    """Quality gate status and issue counts of the analysis run by the build"""

    name = "SonarQube"
    plugin = "sonar"
    report_attr = "sonarqube"

    def generate(self, build: BuildContext) -> List[Point]:
        report = self.load_report(build, SonarQubeReport)
        fields = {
            "sonar_quality_gate_status": report.quality_gate_status,
            "sonar_blocker_issues": report.blocker_issues,
            "sonar_critical_issues": report.critical_issues,
            "sonar_major_issues": report.major_issues,
            "sonar_minor_issues": report.minor_issues,
            "sonar_info_issues": report.info_issues,
            "sonar_lines_of_code": report.lines_of_code,
            "sonar_coverage": report.coverage,
        }
        tags = {"sonar_project_key": report.project_key}
        return [self.build_point("sonarqube_data", build, fields=fields, tags=tags, timestamp=self.report_timestamp(report))]

from collections import defaultdict
from typing import Any, Dict, List

import jsonpath_ng.ext as jsonpath
import structlog

from influxdb_publisher.models.build import BuildContext
from influxdb_publisher.models.metrics import Point
from influxdb_publisher.models.reports import RobotFrameworkReport

from .base import PointGenerator

logger = structlog.get_logger(__name__)

# every suite, however deeply nested
ALL_SUITES = jsonpath.parse("$..suites[*]")


def percentage(part: int, total: int) -> float:
    return round(part * 100.0 / total, 2) if total else 0.0


class RobotFrameworkPointGenerator(PointGenerator):
    name = "Robot Framework"
    plugin = "robot"
    report_attr = "robot_framework"

    def generate(self, build: BuildContext) -> List[Point]:
        report = self.load_report(build, RobotFrameworkReport)
        timestamp = self.report_timestamp(report)
        suites = [match.value for match in ALL_SUITES.find(report.model_dump())]
        logger.debug(f"Robot Framework report with {len(suites)} suites")

        points = [self._summary_point(build, report, len(suites), timestamp)]
        points.extend(self._suite_point(build, suite, timestamp) for suite in suites)
        points.extend(self._tag_points(build, suites, timestamp))
        for suite in suites:
            points.extend(self._case_point(build, suite["name"], case, timestamp) for case in suite["cases"])
        return points

    def _summary_point(self, build: BuildContext, report: RobotFrameworkReport, suite_count: int, timestamp: int) -> Point:
        fields = {
            "rf_failed": report.failed,
            "rf_passed": report.passed,
            "rf_skipped": report.skipped,
            "rf_total": report.total,
            "rf_critical_failed": report.critical_failed,
            "rf_critical_passed": report.critical_passed,
            "rf_critical_total": report.critical_total,
            "rf_pass_percentage": percentage(report.passed, report.total),
            "rf_critical_pass_percentage": percentage(report.critical_passed, report.critical_total),
            "rf_duration": report.duration,
            "rf_suites": suite_count,
        }
        return self.build_point("rf_results", build, fields=fields, timestamp=timestamp)

    def _suite_point(self, build: BuildContext, suite: Dict[str, Any], timestamp: int) -> Point:
        counts = _count(suite["cases"])
        fields = {"rf_suite_name": suite["name"], "rf_duration": suite["duration"], **counts}
        return self.build_point("suite_result", build, fields=fields, tags={"suite_name": suite["name"]}, timestamp=timestamp)

    def _tag_points(self, build: BuildContext, suites: List[Dict[str, Any]], timestamp: int) -> List[Point]:
        cases_by_tag = defaultdict(list)
        for suite in suites:
            for case in suite["cases"]:
                for tag in case["tags"]:
                    cases_by_tag[tag].append(case)

        points = []
        for tag, cases in sorted(cases_by_tag.items()):
            fields = {
                "rf_tag_name": tag,
                "rf_duration": sum(case["duration"] for case in cases),
                **_count(cases),
            }
            points.append(self.build_point("tag_point", build, fields=fields, tags={"rf_tag_name": tag}, timestamp=timestamp))
        return points

    def _case_point(self, build: BuildContext, suite_name: str, case: Dict[str, Any], timestamp: int) -> Point:
        fields = {
            "rf_name": case["name"],
            "rf_suite_name": suite_name,
            "rf_passed": case["passed"],
            "rf_critical": case["critical"],
            "rf_duration": case["duration"],
            "rf_tags": ",".join(case["tags"]),
        }
        tags = {"rf_name": case["name"], "rf_suite_name": suite_name}
        return self.build_point("testcase_point", build, fields=fields, tags=tags, timestamp=timestamp)


def _count(cases: List[Dict[str, Any]]) -> Dict[str, int]:
    passed = sum(1 for case in cases if case["passed"])
    critical = [case for case in cases if case["critical"]]
    critical_passed = sum(1 for case in critical if case["passed"])
    return {
        "rf_passed": passed,
        "rf_failed": len(cases) - passed,
        "rf_total": len(cases),
        "rf_critical_passed": critical_passed,
        "rf_critical_failed": len(critical) - critical_passed,
    }

from typing import List

from influxdb_publisher.models.build import BuildContext
from influxdb_publisher.models.metrics import Point
from influxdb_publisher.models.reports import PerfPublisherReport, PerformanceReport

from .base import PointGenerator


class PerformancePointGenerator(PointGenerator):
    """Response time statistics of a load test run"""

    name = "Performance"
    plugin = "performance"
    report_attr = "performance"

    def generate(self, build: BuildContext) -> List[Point]:
        report = self.load_report(build, PerformanceReport)
        fields = {
            "average": report.average,
            "median": report.median,
            "90Percentile": report.percentile_90,
            "95Percentile": report.percentile_95,
            "min": report.min,
            "max": report.max,
            "total_requests": report.total_requests,
            "error_count": report.error_count,
            "error_percent": report.error_percent,
            "size": report.size,
        }
        tags = {"performance_report": report.name}
        return [self.build_point("performance_data", build, fields=fields, tags=tags, timestamp=self.report_timestamp(report))]


class PerfPublisherPointGenerator(PointGenerator):
    """Custom test report: a summary point, one point per test and per test metric"""

    name = "Performance Publisher"
    plugin = "perfpublisher"
    report_attr = "perf_publisher"

    def generate(self, build: BuildContext) -> List[Point]:
        report = self.load_report(build, PerfPublisherReport)
        timestamp = self.report_timestamp(report)

        points = [self.build_point("perfpublisher_summary", build, fields=self._summary(report), timestamp=timestamp)]
        for test in report.tests:
            fields = {
                "test_name": test.name,
                "successful": test.successful,
                "executed": test.executed,
                "message": test.message,
                "compile_time": test.compile_time,
                "execution_time": test.execution_time,
                "performance": test.performance,
            }
            tags = {"test_name": test.name}
            points.append(self.build_point("perfpublisher_test", build, fields=fields, tags=tags, timestamp=timestamp))
            for metric, value in test.metrics.items():
                metric_tags = {"test_name": test.name, "metric_name": metric}
                points.append(
                    self.build_point("perfpublisher_test_metric", build, fields={"value": value}, tags=metric_tags, timestamp=timestamp)
                )
        return points

    @staticmethod
    def _summary(report: PerfPublisherReport):
        executed = [test for test in report.tests if test.executed]
        passed = [test for test in executed if test.successful]
        summary = {
            "number_of_files": report.files,
            "number_of_tests": len(report.tests),
            "number_of_executed_tests": len(executed),
            "number_of_not_executed_tests": len(report.tests) - len(executed),
            "number_of_passed_tests": len(passed),
            "number_of_failed_tests": len(executed) - len(passed),
        }
        for metric in ("compile_time", "execution_time", "performance"):
            values = [(getattr(test, metric), test.name) for test in executed if getattr(test, metric) is not None]
            if not values:
                continue
            best, worst = min(values), max(values)
            summary[f"best_{metric}_test_value"] = best[0]
            summary[f"best_{metric}_test_name"] = best[1]
            summary[f"worst_{metric}_test_value"] = worst[0]
            summary[f"worst_{metric}_test_name"] = worst[1]
            summary[f"avg_{metric}"] = sum(value for value, _ in values) / len(values)
        return summary

from typing import List

from influxdb_publisher.models.build import BuildContext
from influxdb_publisher.models.metrics import Point
from influxdb_publisher.models.reports import CoberturaReport, JacocoReport

from .base import PointGenerator


class CoberturaPointGenerator(PointGenerator):
    name = "Cobertura"
    plugin = "cobertura"
    report_attr = "cobertura"

    def generate(self, build: BuildContext) -> List[Point]:
        report = self.load_report(build, CoberturaReport)
        fields = {
            "cobertura_number_of_packages": report.packages,
            "cobertura_number_of_source_files": report.files,
            "cobertura_number_of_classes": report.classes,
            "cobertura_line_coverage_rate": report.line_coverage,
            "cobertura_branch_coverage_rate": report.branch_coverage,
            "cobertura_package_coverage_rate": report.package_coverage,
            "cobertura_class_coverage_rate": report.class_coverage,
        }
        return [self.build_point("cobertura_data", build, fields=fields, timestamp=self.report_timestamp(report))]


class JacocoPointGenerator(PointGenerator):
    name = "JaCoCo"
    plugin = "jacoco"
    report_attr = "jacoco"

    def generate(self, build: BuildContext) -> List[Point]:
        report = self.load_report(build, JacocoReport)
        fields = {
            "jacoco_instruction_coverage_rate": report.instruction_coverage,
            "jacoco_branch_coverage_rate": report.branch_coverage,
            "jacoco_complexity_coverage_rate": report.complexity_coverage,
            "jacoco_line_coverage_rate": report.line_coverage,
            "jacoco_method_coverage_rate": report.method_coverage,
            "jacoco_class_coverage_rate": report.class_coverage,
        }
        return [self.build_point("jacoco_data", build, fields=fields, timestamp=self.report_timestamp(report))]

from influxdb_publisher.generators.base import PointGenerator
from influxdb_publisher.models.build import BuildContext
from influxdb_publisher.generators.registry import GeneratorRegistry
from influxdb_publisher.services.collector import PointCollector

from conftest import TIMESTAMP


class RecordingGenerator(PointGenerator):
    def __init__(self, renderer, name, present=True, error=None):
        super().__init__(renderer, None, TIMESTAMP)
        self.name = name
        self.present = present
        self.error = error
        self.generated = False

    def has_report(self, build):
        return self.present

    def generate(self, build):
        self.generated = True
        if self.error:
            raise self.error
        return [self.build_point(self.name, build, fields={"value": 1})]


def test_collects_in_order(renderer, build):
    generators = [RecordingGenerator(renderer, "first"), RecordingGenerator(renderer, "second")]
    points = PointCollector(generators).collect(build)
    assert [p.measurement for p in points] == ["first", "second"]


def test_absent_report_is_never_generated(renderer, build):
    absent = RecordingGenerator(renderer, "absent", present=False)
    points = PointCollector([absent]).collect(build)
    assert points == []
    assert not absent.generated


def test_failing_generator_only_loses_its_points(renderer, build):
    generators = [
        RecordingGenerator(renderer, "before"),
        RecordingGenerator(renderer, "broken", error=ValueError("bad report")),
        RecordingGenerator(renderer, "after"),
    ]
    points = PointCollector(generators).collect(build)
    assert [p.measurement for p in points] == ["before", "after"]


def test_default_registry_order(renderer):
    registry = GeneratorRegistry.default(renderer, TIMESTAMP)
    assert [g.name for g in registry] == [
        "Jenkins base data",
        "Custom data",
        "Custom data map",
        "Cobertura",
        "Robot Framework",
        "JaCoCo",
        "Performance",
        "SonarQube",
        "Change Log",
        "Performance Publisher",
    ]
    assert [g.plugin for g in registry][3:] == ["cobertura", "robot", "jacoco", "performance", "sonar", None, "perfpublisher"]


def test_every_collected_point_is_well_formed(renderer):
    build = BuildContext(
        job_name="demo",
        build_number=7,
        result="UNSTABLE",
        cobertura={},
        jacoco={},
        robot_framework={},
        performance={},
        sonarqube={},
        change_log={},
        perf_publisher={},
    )
    registry = GeneratorRegistry.default(renderer, TIMESTAMP, custom_data={"a": 1}, custom_data_map={"m": {"b": 2}})
    points = PointCollector(registry).collect(build)
    assert len(points) == 10
    assert all(p.measurement and p.fields for p in points)
    assert {p.timestamp for p in points} == {TIMESTAMP}

import pytest

from influxdb_publisher.errors import ReportParseError
from influxdb_publisher.generators.change_log import ChangeLogPointGenerator
from influxdb_publisher.generators.coverage import CoberturaPointGenerator, JacocoPointGenerator
from influxdb_publisher.generators.custom_data import CustomDataMapPointGenerator, CustomDataPointGenerator
from influxdb_publisher.generators.jenkins_base import JenkinsBasePointGenerator
from influxdb_publisher.generators.performance import PerfPublisherPointGenerator, PerformancePointGenerator
from influxdb_publisher.generators.robot_framework import RobotFrameworkPointGenerator
from influxdb_publisher.generators.sonarqube import SonarQubePointGenerator
from influxdb_publisher.models.build import BuildContext

from conftest import TIMESTAMP


def make_build(**kwargs):
    defaults = dict(job_name="demo", build_number=42, result="SUCCESS", duration=1000)
    defaults.update(kwargs)
    return BuildContext(**defaults)


def test_base_point(renderer, build):
    points = JenkinsBasePointGenerator(renderer, None, TIMESTAMP).generate(build)

    assert len(points) == 1
    point = points[0]
    assert point.measurement == "jenkins_data"
    assert point.timestamp == TIMESTAMP
    assert point.fields["build_number"] == 42
    assert point.fields["build_time"] == 1000
    assert point.fields["build_result"] == "SUCCESS"
    assert point.fields["build_result_ordinal"] == 0
    assert point.fields["build_successful"] is True
    assert point.fields["project_name"] == "demo"
    assert point.tags == {"project_name": "demo", "project_path": "demo", "build_result": "SUCCESS"}
    assert "tests_total" not in point.fields


def test_base_point_always_present(renderer):
    generator = JenkinsBasePointGenerator(renderer, None, TIMESTAMP)
    running = BuildContext(job_name="x", build_number=1)
    assert generator.has_report(running)
    [point] = generator.generate(running)
    assert point.fields["build_result"] == "?"
    assert point.fields["build_successful"] is False


def test_base_point_with_tests_prefix_and_measurement_override(renderer):
    build = make_build(test_results={"failed": 1, "skipped": 2, "total": 10})
    [point] = JenkinsBasePointGenerator(renderer, "nightly", TIMESTAMP, measurement_name="ci").generate(build)
    assert point.measurement == "ci"
    assert point.tags["prefix"] == "nightly"
    assert (point.fields["tests_failed"], point.fields["tests_skipped"], point.fields["tests_total"]) == (1, 2, 10)


def test_base_point_env_parameters(renderer):
    build = make_build(environment={"NODE_NAME": "agent-1", "GIT_COMMIT": "abc123"})
    generator = JenkinsBasePointGenerator(
        renderer, None, TIMESTAMP,
        env_parameter_field="commit=$GIT_COMMIT\nmissing=$NOPE",
        env_parameter_tag="node=${NODE_NAME}\nteam=core",
    )
    [point] = generator.generate(build)
    assert point.fields["commit"] == "abc123"
    assert "missing" not in point.fields
    assert point.tags["node"] == "agent-1"
    assert point.tags["team"] == "core"


def test_base_point_running_build_uses_elapsed_time(renderer, monkeypatch):
    monkeypatch.setattr("influxdb_publisher.generators.jenkins_base.now_ms", lambda: 5000)
    build = make_build(duration=0, start_time=2000, result=None)
    [point] = JenkinsBasePointGenerator(renderer, None, TIMESTAMP).generate(build)
    assert point.fields["build_time"] == 3000


def test_custom_data(renderer, build):
    generator = CustomDataPointGenerator(renderer, None, TIMESTAMP, {"field_a": 11}, {"tag_1": "foo"})
    assert generator.has_report(build)
    [point] = generator.generate(build)
    assert point.measurement == "jenkins_custom_data"
    assert point.fields["field_a"] == 11
    assert point.tags["tag_1"] == "foo"


def test_custom_data_measurement_override(renderer, build):
    generator = CustomDataPointGenerator(renderer, None, TIMESTAMP, {"a": 1}, measurement_name="deploy")
    assert generator.generate(build)[0].measurement == "custom_deploy"


def test_custom_data_empty(renderer, build):
    assert not CustomDataPointGenerator(renderer, None, TIMESTAMP, {}).has_report(build)
    assert not CustomDataPointGenerator(renderer, None, TIMESTAMP, None).has_report(build)


def test_custom_data_map(renderer, build):
    generator = CustomDataMapPointGenerator(
        renderer, None, TIMESTAMP,
        {"series_1": {"field_a": 11}, "series_2": {"field_c": 21}, "series_3": {}},
        {"series_1": {"buildResult": "SUCCESS"}},
    )
    points = generator.generate(build)
    assert [p.measurement for p in points] == ["series_1", "series_2"]
    assert points[0].tags["buildResult"] == "SUCCESS"
    assert "buildResult" not in points[1].tags
    assert points[1].fields["field_c"] == 21


def test_cobertura(renderer):
    build = make_build(cobertura={"packages": 3, "files": 12, "classes": 20, "line_coverage": 81.5, "branch_coverage": 60})
    generator = CoberturaPointGenerator(renderer, None, TIMESTAMP)
    assert generator.has_report(build)
    [point] = generator.generate(build)
    assert point.measurement == "cobertura_data"
    assert point.fields["cobertura_number_of_source_files"] == 12
    assert point.fields["cobertura_line_coverage_rate"] == 81.5
    assert point.fields["cobertura_class_coverage_rate"] == 0.0


def test_jacoco_empty_report_yields_zero_point(renderer):
    [point] = JacocoPointGenerator(renderer, None, TIMESTAMP).generate(make_build(jacoco={}))
    assert point.measurement == "jacoco_data"
    assert point.fields["jacoco_line_coverage_rate"] == 0.0


def test_malformed_report_raises(renderer):
    build = make_build(cobertura={"line_coverage": 250})
    with pytest.raises(ReportParseError):
        CoberturaPointGenerator(renderer, None, TIMESTAMP).generate(build)


def test_report_absent(renderer, build):
    for generator_cls in (
        CoberturaPointGenerator,
        JacocoPointGenerator,
        RobotFrameworkPointGenerator,
        PerformancePointGenerator,
        SonarQubePointGenerator,
        ChangeLogPointGenerator,
        PerfPublisherPointGenerator,
    ):
        assert not generator_cls(renderer, None, TIMESTAMP).has_report(build)


def test_missing_integration_behaves_as_absent(renderer):
    build = make_build(jacoco={"line_coverage": 50}, installed_plugins={"cobertura"})
    assert not JacocoPointGenerator(renderer, None, TIMESTAMP).has_report(build)


def test_report_timestamp_overrides_run_timestamp(renderer):
    build = make_build(performance={"average": 120, "timestamp": "2024-01-02T00:00:00Z"})
    [point] = PerformancePointGenerator(renderer, None, TIMESTAMP).generate(build)
    assert point.timestamp == 1704153600000


def test_performance(renderer):
    build = make_build(performance={"name": "api", "average": 120.5, "90Percentile": 300, "total_requests": 1000, "error_count": 5, "error_percent": 0.5})
    [point] = PerformancePointGenerator(renderer, None, TIMESTAMP).generate(build)
    assert point.measurement == "performance_data"
    assert point.tags["performance_report"] == "api"
    assert point.fields["90Percentile"] == 300
    assert point.fields["total_requests"] == 1000
    assert point.timestamp == TIMESTAMP


def test_robot_framework(renderer):
    report = {
        "passed": 2,
        "failed": 1,
        "critical_passed": 2,
        "critical_failed": 1,
        "duration": 900,
        "suites": [
            {
                "name": "Top",
                "duration": 900,
                "cases": [{"name": "login", "passed": True, "duration": 100, "tags": ["smoke"]}],
                "suites": [
                    {
                        "name": "Nested",
                        "duration": 500,
                        "cases": [
                            {"name": "logout", "passed": False, "duration": 200, "tags": ["smoke", "slow"]},
                            {"name": "search", "passed": True, "critical": False, "duration": 300},
                        ],
                    }
                ],
            }
        ],
    }
    points = RobotFrameworkPointGenerator(renderer, None, TIMESTAMP).generate(make_build(robot_framework=report))
    by_measurement = {}
    for point in points:
        by_measurement.setdefault(point.measurement, []).append(point)

    [summary] = by_measurement["rf_results"]
    assert summary.fields["rf_total"] == 3
    assert summary.fields["rf_suites"] == 2
    assert summary.fields["rf_pass_percentage"] == 66.67

    suites = {p.tags["suite_name"]: p for p in by_measurement["suite_result"]}
    assert suites["Nested"].fields["rf_failed"] == 1
    assert suites["Nested"].fields["rf_critical_passed"] == 0
    assert suites["Top"].fields["rf_total"] == 1

    tags = {p.tags["rf_tag_name"]: p for p in by_measurement["tag_point"]}
    assert tags["smoke"].fields["rf_total"] == 2
    assert tags["smoke"].fields["rf_duration"] == 300
    assert tags["slow"].fields["rf_failed"] == 1

    assert len(by_measurement["testcase_point"]) == 3


def test_robot_framework_empty_report(renderer):
    points = RobotFrameworkPointGenerator(renderer, None, TIMESTAMP).generate(make_build(robot_framework={}))
    assert [p.measurement for p in points] == ["rf_results"]
    assert points[0].fields["rf_pass_percentage"] == 0.0


def test_sonarqube(renderer):
    build = make_build(sonarqube={"project_key": "org:demo", "quality_gate_status": "OK", "major_issues": 4})
    [point] = SonarQubePointGenerator(renderer, None, TIMESTAMP).generate(build)
    assert point.measurement == "sonarqube_data"
    assert point.tags["sonar_project_key"] == "org:demo"
    assert point.fields["sonar_major_issues"] == 4
    assert point.fields["sonar_quality_gate_status"] == "OK"
    assert "sonar_coverage" not in point.fields


def test_change_log(renderer):
    change_log = {
        "commits": [
            {"id": "1", "author": "alice", "message": "fix build", "affected_paths": ["a.py", "b.py"]},
            {"id": "2", "author": "bob", "message": "docs", "affected_paths": ["a.py"]},
        ]
    }
    [point] = ChangeLogPointGenerator(renderer, None, TIMESTAMP).generate(make_build(change_log=change_log))
    assert point.fields["commit_count"] == 2
    assert point.fields["affected_path_count"] == 2
    assert point.fields["culprits"] == "alice, bob"


def test_empty_change_log_yields_zero_point(renderer):
    generator = ChangeLogPointGenerator(renderer, None, TIMESTAMP)
    build = make_build(change_log={"commits": []})
    assert generator.has_report(build)
    [point] = generator.generate(build)
    assert point.fields["commit_count"] == 0
    assert point.fields["affected_path_count"] == 0


def test_perf_publisher(renderer):
    report = {
        "files": 1,
        "tests": [
            {"name": "t1", "execution_time": 2.0, "metrics": {"throughput": 10.0}},
            {"name": "t2", "execution_time": 4.0, "successful": False},
            {"name": "t3", "executed": False},
        ],
    }
    points = PerfPublisherPointGenerator(renderer, None, TIMESTAMP).generate(make_build(perf_publisher=report))
    summary = points[0]
    assert summary.measurement == "perfpublisher_summary"
    assert summary.fields["number_of_tests"] == 3
    assert summary.fields["number_of_executed_tests"] == 2
    assert summary.fields["number_of_failed_tests"] == 1
    assert summary.fields["best_execution_time_test_name"] == "t1"
    assert summary.fields["worst_execution_time_test_value"] == 4.0
    assert summary.fields["avg_execution_time"] == 3.0
    assert [p.measurement for p in points[1:]] == [
        "perfpublisher_test",
        "perfpublisher_test_metric",
        "perfpublisher_test",
        "perfpublisher_test",
    ]
    assert points[2].tags["metric_name"] == "throughput"

"""
Validated shapes of the optional reports a build may carry.

The host hands reports over as plain mappings; each generator validates its
own report with one of these models so a malformed report only affects the
generator reading it.
"""

from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, Field, NonNegativeFloat, NonNegativeInt

Percentage = Annotated[float, Field(ge=0.0, le=100.0)]


class Report(BaseModel):
    # ISO-8601, overrides the run timestamp for this report's points
    timestamp: Optional[str] = None


class JUnitResults(BaseModel):
    failed: NonNegativeInt = 0
    skipped: NonNegativeInt = 0
    total: NonNegativeInt = 0


class CoberturaReport(Report):
    packages: NonNegativeInt = 0
    files: NonNegativeInt = 0
    classes: NonNegativeInt = 0
    line_coverage: Percentage = 0.0
    branch_coverage: Percentage = 0.0
    package_coverage: Percentage = 0.0
    class_coverage: Percentage = 0.0


class JacocoReport(Report):
    instruction_coverage: Percentage = 0.0
    branch_coverage: Percentage = 0.0
    complexity_coverage: Percentage = 0.0
    line_coverage: Percentage = 0.0
    method_coverage: Percentage = 0.0
    class_coverage: Percentage = 0.0


class RobotCase(BaseModel):
    name: str
    passed: bool
    critical: bool = True
    duration: NonNegativeInt = 0
    tags: List[str] = []


class RobotSuite(BaseModel):
    name: str
    duration: NonNegativeInt = 0
    cases: List[RobotCase] = []
    suites: List["RobotSuite"] = []


class RobotFrameworkReport(Report):
    passed: NonNegativeInt = 0
    failed: NonNegativeInt = 0
    skipped: NonNegativeInt = 0
    critical_passed: NonNegativeInt = 0
    critical_failed: NonNegativeInt = 0
    duration: NonNegativeInt = 0
    suites: List[RobotSuite] = []

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.skipped

    @property
    def critical_total(self) -> int:
        return self.critical_passed + self.critical_failed


class PerformanceReport(Report):
    name: str = ""
    average: NonNegativeFloat = 0.0
    median: NonNegativeFloat = 0.0
    percentile_90: NonNegativeFloat = Field(default=0.0, alias="90Percentile")
    percentile_95: NonNegativeFloat = Field(default=0.0, alias="95Percentile")
    min: NonNegativeFloat = 0.0
    max: NonNegativeFloat = 0.0
    total_requests: NonNegativeInt = 0
    error_count: NonNegativeInt = 0
    error_percent: Percentage = 0.0
    size: NonNegativeFloat = 0.0

    model_config = {"populate_by_name": True}


class SonarQubeReport(Report):
    project_key: str = ""
    quality_gate_status: Optional[str] = None
    blocker_issues: NonNegativeInt = 0
    critical_issues: NonNegativeInt = 0
    major_issues: NonNegativeInt = 0
    minor_issues: NonNegativeInt = 0
    info_issues: NonNegativeInt = 0
    lines_of_code: Optional[NonNegativeInt] = None
    coverage: Optional[float] = Field(default=None, ge=0.0, le=100.0)


class Commit(BaseModel):
    id: str = ""
    author: str = ""
    message: str = ""
    affected_paths: List[str] = []


class ChangeLog(Report):
    commits: List[Commit] = []


class PerfPublisherTest(BaseModel):
    name: str
    executed: bool = True
    successful: bool = True
    message: str = ""
    compile_time: Optional[NonNegativeFloat] = None
    execution_time: Optional[NonNegativeFloat] = None
    performance: Optional[float] = None
    metrics: Dict[str, float] = {}


class PerfPublisherReport(Report):
    files: NonNegativeInt = 0
    tests: List[PerfPublisherTest] = []

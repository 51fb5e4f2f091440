from enum import Enum
from typing import Any, Dict, Optional, Set

from pydantic import BaseModel

from .reports import JUnitResults


class BuildResult(str, Enum):
    SUCCESS = "SUCCESS"
    UNSTABLE = "UNSTABLE"
    FAILURE = "FAILURE"
    NOT_BUILT = "NOT_BUILT"
    ABORTED = "ABORTED"

    @property
    def ordinal(self) -> int:
        return list(BuildResult).index(self)


class BuildContext(BaseModel):
    """Read-only view of a finished (or running) build handed over by the CI host"""

    job_name: str
    full_name: Optional[str] = None
    build_number: int
    result: Optional[BuildResult] = None
    duration: int = 0
    scheduled_time: Optional[int] = None
    start_time: Optional[int] = None
    time_in_queue: Optional[int] = None
    status_message: Optional[str] = None
    node_name: Optional[str] = None
    branch_name: Optional[str] = None
    build_health: Optional[int] = None
    last_successful_build: Optional[int] = None
    last_stable_build: Optional[int] = None
    causer: Optional[str] = None
    user: Optional[str] = None
    environment: Dict[str, str] = {}

    # None means every report integration is available
    installed_plugins: Optional[Set[str]] = None

    test_results: Optional[JUnitResults] = None

    # Raw report handles, validated by the generator that reads them
    cobertura: Optional[Any] = None
    jacoco: Optional[Any] = None
    robot_framework: Optional[Any] = None
    performance: Optional[Any] = None
    sonarqube: Optional[Any] = None
    change_log: Optional[Any] = None
    perf_publisher: Optional[Any] = None

    model_config = {"frozen": True}

    def has_plugin(self, plugin: Optional[str]) -> bool:
        if plugin is None or self.installed_plugins is None:
            return True
        return plugin in self.installed_plugins

    @property
    def project_path(self) -> str:
        return self.full_name or self.job_name

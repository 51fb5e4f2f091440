from typing import Any, Dict, Iterator, List, Optional
import structlog
from .base import PointGenerator
from .change_log import ChangeLogPointGenerator
from .coverage import CoberturaPointGenerator, JacocoPointGenerator
from .custom_data import CustomDataMapPointGenerator, CustomDataPointGenerator
from .jenkins_base import JenkinsBasePointGenerator
from .performance import PerfPublisherPointGenerator, PerformancePointGenerator
from .sonarqube import SonarQubePointGenerator
from .robot_framework import RobotFrameworkPointGenerator
from influxdb_publisher.renderers.project_name import MeasurementRenderer

logger = structlog.get_logger(__name__)

class GeneratorRegistry:
    """Generators in the order they run"""

    def __init__(self):
        self.generators: List[PointGenerator] = []

    def register(self, generator: PointGenerator):
        self.generators.append(generator)

    def __iter__(self) -> Iterator[PointGenerator]:
        return iter(self.generators)

    def __len__(self) -> int:
        return len(self.generators)

    @classmethod
    def default(cls, renderer: MeasurementRenderer, timestamp: int,
                custom_prefix: Optional[str] = None,
                custom_data: Optional[Dict[str, Any]] = None,
                custom_data_tags: Optional[Dict[str, str]] = None,
                custom_data_map: Optional[Dict[str, Dict[str, Any]]] = None,
                custom_data_map_tags: Optional[Dict[str, Dict[str, str]]] = None,
                env_parameter_field: Optional[str] = None,
                env_parameter_tag: Optional[str] = None,
                measurement_name: Optional[str] = None) -> "GeneratorRegistry":
        """Register every known report source"""
        registry = cls()
        common = (renderer, custom_prefix, timestamp)
        registry.register(JenkinsBasePointGenerator(*common, env_parameter_field, env_parameter_tag, measurement_name))
        registry.register(CustomDataPointGenerator(*common, custom_data, custom_data_tags, measurement_name))
        registry.register(CustomDataMapPointGenerator(*common, custom_data_map, custom_data_map_tags))
        for generator_cls in (
            CoberturaPointGenerator,
            RobotFrameworkPointGenerator,
            JacocoPointGenerator,
            PerformancePointGenerator,
            SonarQubePointGenerator,
            ChangeLogPointGenerator,
            PerfPublisherPointGenerator,
        ):
            registry.register(generator_cls(*common))
        logger.debug(f"Registered {len(registry)} point generators")
        return registry

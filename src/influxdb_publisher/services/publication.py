from typing import Any, Dict, Iterable, Optional

import structlog

from influxdb_publisher.config import settings
from influxdb_publisher.errors import InvalidTargetURL, PublishError
from influxdb_publisher.generators.registry import GeneratorRegistry
from influxdb_publisher.models.build import BuildContext
from influxdb_publisher.models.metrics import PointBatch
from influxdb_publisher.models.target import ProxyConfig, Target
from influxdb_publisher.renderers.project_name import ProjectNameRenderer
from influxdb_publisher.services.collector import PointCollector
from influxdb_publisher.services.connection import InfluxConnectionFactory, parse_target_url
from influxdb_publisher.utils.formatters import NameFormat
from influxdb_publisher.utils.time import now_ms

logger = structlog.get_logger(__name__)

WRITE_PRECISION = "ms"
WRITE_CONSISTENCY = "any"

# Shared across services so client connection pools are reused between runs
_default_connections: Optional[InfluxConnectionFactory] = None


def default_connections(proxy: Optional[ProxyConfig] = None) -> InfluxConnectionFactory:
    global _default_connections
    if _default_connections is None or _default_connections.proxy != proxy:
        if _default_connections is not None:
            _default_connections.close()
        _default_connections = InfluxConnectionFactory(
            proxy=proxy, timeout=settings.client_timeout_s, retries=settings.client_retries
        )
    return _default_connections


class PublicationService:
    """Collects the points of one build and writes them to every target.

    Args:
        custom_project_name: replaces the job name in the project_name tag/field.
        custom_prefix: prepended to the project name and tagged as 'prefix',
            e.g. to tell apart branches of a multibranch pipeline.
        name_format: how the job path is flattened into the project name.
        custom_data / custom_data_tags: extra fields and tags written to
            'jenkins_custom_data' (or 'custom_<measurement_name>').
        custom_data_map / custom_data_map_tags: measurement name -> fields
            (and tags), one point per measurement.
        timestamp: epoch milliseconds shared by the run's points; defaults to now.
        jenkins_env_parameter_field / jenkins_env_parameter_tag: 'key=value'
            lines added to the base point; '$VAR' values come from the build
            environment.
        measurement_name: replaces the default 'jenkins_data' measurement.
        proxy: used for targets with use_proxy set.
        connections: client factory; a shared pooled one by default.
    """

    def __init__(
        self,
        custom_project_name: Optional[str] = None,
        custom_prefix: Optional[str] = None,
        name_format: NameFormat = NameFormat.SLUG,
        custom_data: Optional[Dict[str, Any]] = None,
        custom_data_tags: Optional[Dict[str, str]] = None,
        custom_data_map: Optional[Dict[str, Dict[str, Any]]] = None,
        custom_data_map_tags: Optional[Dict[str, Dict[str, str]]] = None,
        timestamp: Optional[int] = None,
        jenkins_env_parameter_field: Optional[str] = None,
        jenkins_env_parameter_tag: Optional[str] = None,
        measurement_name: Optional[str] = None,
        proxy: Optional[ProxyConfig] = None,
        connections: Optional[InfluxConnectionFactory] = None,
    ):
        self.custom_project_name = custom_project_name
        self.custom_prefix = custom_prefix
        self.name_format = name_format
        self.custom_data = custom_data
        self.custom_data_tags = custom_data_tags
        self.custom_data_map = custom_data_map
        self.custom_data_map_tags = custom_data_map_tags
        self.timestamp = timestamp if timestamp is not None else now_ms()
        self.jenkins_env_parameter_field = jenkins_env_parameter_field
        self.jenkins_env_parameter_tag = jenkins_env_parameter_tag
        self.measurement_name = measurement_name
        self.connections = connections or default_connections(proxy)

    def generators(self) -> GeneratorRegistry:
        renderer = ProjectNameRenderer(self.custom_prefix, self.custom_project_name, self.name_format)
        return GeneratorRegistry.default(
            renderer,
            self.timestamp,
            custom_prefix=self.custom_prefix,
            custom_data=self.custom_data,
            custom_data_tags=self.custom_data_tags,
            custom_data_map=self.custom_data_map,
            custom_data_map_tags=self.custom_data_map_tags,
            env_parameter_field=self.jenkins_env_parameter_field,
            env_parameter_tag=self.jenkins_env_parameter_tag,
            measurement_name=self.measurement_name,
        )

    def publish(self, build: BuildContext, targets: Iterable[Target]) -> None:
        """Write the build's points to each target, in order.

        Raises PublishError only for a target with expose_exceptions set;
        later targets are then not attempted.
        """
        points = PointCollector(self.generators()).collect(build)

        for target in targets:
            try:
                parse_target_url(target.url)
            except InvalidTargetURL:
                logger.warning(f"Skipping target '{target.description}' due to invalid URL '{target.url}'")
                continue

            logger.info(f"Publishing data to target {target}")
            self._write(target, points)

        logger.info("Completed.")

    def _write(self, target: Target, points: PointBatch) -> None:
        # one request, no client side batching: the target gets all points or none
        try:
            client = self.connections.connect(target)
            client.write_points(
                [point.to_dict() for point in points],
                time_precision=WRITE_PRECISION,
                database=target.database,
                retention_policy=target.retention_policy,
                consistency=WRITE_CONSISTENCY,
            )
        except Exception as e:
            if target.expose_exceptions:
                raise PublishError(f"Could not report to InfluxDB target '{target.description}': {e}", target=target.description) from e
            logger.warning(f"Could not report to InfluxDB target '{target.description}'. Ignoring exception: {e!r}")

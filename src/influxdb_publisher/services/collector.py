from typing import Iterable, List

import structlog

from influxdb_publisher.generators.base import PointGenerator
from influxdb_publisher.models.build import BuildContext
from influxdb_publisher.models.metrics import Point, PointBatch

logger = structlog.get_logger(__name__)


class PointCollector:
    """Runs every generator against one build and gathers their points.

    A generator that fails only loses its own points; the others still
    contribute to the batch.
    """

    def __init__(self, generators: Iterable[PointGenerator]):
        self.generators = list(generators)

    def collect(self, build: BuildContext) -> PointBatch:
        logger.info("Collecting data...")
        batch: PointBatch = []
        for generator in self.generators:
            batch.extend(self._points_from(generator, build))
        logger.info(f"Collected {len(batch)} points", build_number=build.build_number)
        return batch

    def _points_from(self, generator: PointGenerator, build: BuildContext) -> List[Point]:
        if not generator.has_report(build):
            logger.debug(f"Data source empty: {generator.name}")
            return []

        logger.info(f"{generator.name} data found")
        try:
            return list(generator.generate(build))
        except Exception as e:
            logger.warning(f"Failed to collect {generator.name} data. Ignoring exception: {e!r}")
            return []

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from influxdb_publisher.config import settings
from influxdb_publisher.errors import PublishError
from influxdb_publisher.models.build import BuildContext
from influxdb_publisher.models.target import Target
from influxdb_publisher.services.publication import PublicationService
from influxdb_publisher.utils.formatters import NameFormat
from influxdb_publisher.utils.log import configure_logging

logger = structlog.get_logger(__name__)

TARGETS = TypeAdapter(List[Target])


class CustomDataFile(BaseModel):
    fields: Dict[str, Any] = {}
    tags: Dict[str, Any] = {}


class CustomDataMapFile(BaseModel):
    # keyed by measurement name
    fields: Dict[str, Dict[str, Any]] = {}
    tags: Dict[str, Dict[str, Any]] = {}


def load_json(path: Optional[str]) -> Any:
    if path is None:
        return None
    with open(path, "r") as f:
        return json.load(f)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="influxdb-publish",
        description="Publish the metrics of a CI build to InfluxDB targets",
    )
    parser.add_argument("build", help="JSON file describing the build and its reports")
    parser.add_argument("targets", help="JSON file with the list of targets")
    parser.add_argument("--custom-data", help="JSON file: {'fields': {...}, 'tags': {...}}")
    parser.add_argument("--custom-data-map", help="JSON file: {'fields': {measurement: {...}}, 'tags': {measurement: {...}}}")
    parser.add_argument("--project-name", help="Override the project name")
    parser.add_argument("--prefix", help="Prefix for the project name")
    parser.add_argument(
        "--name-format",
        type=NameFormat,
        choices=list(NameFormat),
        default=settings.name_format,
        help="How the job path is flattened into the project name",
    )
    parser.add_argument("--measurement-name", help="Override the 'jenkins_data' measurement name")
    parser.add_argument("--env-field", help="'key=value' lines added as fields, '$VAR' values resolved from the build environment")
    parser.add_argument("--env-tag", help="'key=value' lines added as tags, '$VAR' values resolved from the build environment")
    parser.add_argument("--timestamp", type=int, help="Epoch milliseconds for the points (default: now)")
    parser.add_argument("--log-level", default=settings.log_level)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        build = BuildContext.model_validate_json(Path(args.build).read_text())
        targets = TARGETS.validate_json(Path(args.targets).read_text())
        custom_data = CustomDataFile.model_validate(load_json(args.custom_data) or {})
        custom_data_map = CustomDataMapFile.model_validate(load_json(args.custom_data_map) or {})
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Invalid input: {e}")
        return 2

    service = PublicationService(
        custom_project_name=args.project_name,
        custom_prefix=args.prefix,
        name_format=args.name_format,
        custom_data=custom_data.fields,
        custom_data_tags=custom_data.tags,
        custom_data_map=custom_data_map.fields,
        custom_data_map_tags=custom_data_map.tags,
        timestamp=args.timestamp,
        jenkins_env_parameter_field=args.env_field,
        jenkins_env_parameter_tag=args.env_tag,
        measurement_name=args.measurement_name,
        proxy=settings.proxy_config(),
    )
    try:
        service.publish(build, targets)
    except PublishError as e:
        logger.error(f"Publishing failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

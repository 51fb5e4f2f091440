from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from influxdb_publisher.errors import ReportParseError

ModelT = TypeVar("ModelT", bound="BaseModel")

logger = structlog.get_logger(__name__)


def parse_model(raw: Any, *, model: type[ModelT]) -> ModelT:
    """Validate a raw report handle, which may be a mapping, a JSON string or a model"""
    if isinstance(raw, model):
        return raw

    try:
        if isinstance(raw, (str, bytes)):
            return model.model_validate_json(raw)
        return model.model_validate(raw)
    except ValidationError as e:
        logger.debug("Failed to validate report", model=model.__name__, errors=e.errors())
        raise ReportParseError(f"Malformed {model.__name__}: {e}") from e

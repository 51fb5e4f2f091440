from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

FieldValue = Union[int, float, str, bool]


def _normalize_tags(tags: Dict[str, Any]) -> Dict[str, str]:
    # InfluxDB rejects empty tag values
    return {
        str(key): str(value)
        for key, value in tags.items()
        if value is not None and str(value) != ""
    }


def _normalize_fields(fields: Dict[str, Any]) -> Dict[str, FieldValue]:
    normalized = {}
    for key, value in fields.items():
        if value is None:
            continue
        if not isinstance(value, (bool, int, float, str)):
            value = str(value)
        normalized[str(key)] = value
    return normalized


@dataclass
class Point:
    measurement: str
    timestamp: int
    fields: Dict[str, FieldValue]
    tags: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.measurement:
            raise ValueError("Point requires a measurement name")
        self.tags = _normalize_tags(self.tags)
        self.fields = _normalize_fields(self.fields)
        if not self.fields:
            raise ValueError(f"Point '{self.measurement}' has no fields")

    def to_dict(self) -> Dict[str, Any]:
        """Render the point in the shape accepted by InfluxDBClient.write_points"""
        return {
            "measurement": self.measurement,
            "tags": dict(self.tags),
            "fields": dict(self.fields),
            "time": self.timestamp,
        }


PointBatch = List[Point]

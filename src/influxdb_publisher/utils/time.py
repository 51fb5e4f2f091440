from datetime import datetime, timezone
import structlog
from typing import Optional
logger = structlog.get_logger(__name__)

def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)

def convert_iso_to_timestamp(iso_date_str: str) -> Optional[int]:
    """Convert ISO date string to Unix timestamp in milliseconds"""
    try:
        dt = datetime.fromisoformat(iso_date_str.replace("Z", "+00:00"))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return int(dt.timestamp() * 1000)
    except (AttributeError, ValueError) as e:
        logger.error(f"Failed to convert date: {str(e)}")
        return None

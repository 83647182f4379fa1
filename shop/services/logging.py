import json
import logging
from datetime import datetime, timezone

_event_logger = logging.getLogger("shop.events")


def log_event(level: str, event: str, **fields) -> None:
    """Emit one JSON line describing a cart or checkout event."""
    payload = {
        "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "level": level.lower(),
        "event": event,
    }
    payload.update(fields or {})
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    _event_logger.log(numeric_level, json.dumps(payload, ensure_ascii=False, default=str))

from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dailydare.infra.config.settings import settings
from dailydare.core.logger.logger import get_logger

logger = get_logger(__name__)


class SystemClock:
    """Calendar-day clock for a given IANA time zone"""

    def __init__(self, tz_name: Optional[str] = None):
        self.tz = resolve_timezone(tz_name)

    def today(self) -> date:
        return datetime.now(self.tz).date()


def resolve_timezone(tz_name: Optional[str]) -> ZoneInfo:
    """Resolve a zone name, falling back to the configured default"""
    if tz_name:
        try:
            return ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown time zone, using default", extra={"tz_name": tz_name})
    return ZoneInfo(settings.DARE_TIMEZONE)

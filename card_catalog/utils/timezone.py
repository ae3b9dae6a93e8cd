import logging
import zoneinfo
from datetime import date, datetime

from card_catalog.config import settings

logger = logging.getLogger(__name__)


def get_today(tz_name: str | None = None) -> date:
    """Get today's calendar date in the requested or configured timezone.

    An explicit ``tz_name`` wins over ``settings.timezone``; when neither names a
    usable zone the host's local date is returned.
    """
    for candidate in (tz_name, settings.timezone):
        if not candidate:
            continue
        try:
            tz = zoneinfo.ZoneInfo(candidate)
            return datetime.now(tz).date()
        except (KeyError, ValueError, zoneinfo.ZoneInfoNotFoundError):
            logger.warning("Unknown timezone %r, falling back", candidate)

    return date.today()

from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.core.config import settings


def today() -> date:
    """Current calendar date in the business timezone.

    Used as a FastAPI dependency so tests can pin "today" with
    ``app.dependency_overrides[today] = lambda: date(2024, 12, 10)``.
    """
    return datetime.now(ZoneInfo(settings.business_timezone)).date()

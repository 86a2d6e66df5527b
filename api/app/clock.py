from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import Depends

from app.config import Settings, get_settings


def get_now(settings: Settings = Depends(get_settings)) -> datetime:
    """Current instant in the configured timezone, read once per request."""
    return datetime.now(ZoneInfo(settings.timezone))

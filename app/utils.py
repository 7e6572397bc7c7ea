from datetime import datetime
from typing import Optional

from dateutil import tz

from app.settings import settings

# pt-BR abbreviated month names, as the listing shows them
MONTHS_PT_BR = [
    "jan",
    "fev",
    "mar",
    "abr",
    "mai",
    "jun",
    "jul",
    "ago",
    "set",
    "out",
    "nov",
    "dez",
]


def to_display_time(value: datetime) -> datetime:
    """Shift aware timestamps into the readers' timezone; naive ones are kept."""
    if value.tzinfo is None:
        return value
    return value.astimezone(tz.gettz(settings.DISPLAY_TIMEZONE))


def format_date(value: Optional[datetime]) -> str:
    """``25 mar 2021`` style date, empty when the post was never published."""
    if value is None:
        return ""
    value = to_display_time(value)
    return f"{value.day} {MONTHS_PT_BR[value.month - 1]} {value.year}"


def format_edited_at(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    value = to_display_time(value)
    return f"* editado em {format_date(value)}, às {value.strftime('%I:%M')}"

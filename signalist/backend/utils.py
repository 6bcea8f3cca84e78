from __future__ import annotations

from datetime import date
from typing import Optional


def get_formatted_today_date(today: Optional[date] = None) -> str:
    """e.g. ``Sunday, October 18, 2026``."""
    today = today or date.today()
    return f"{today:%A}, {today:%B} {today.day}, {today.year}"

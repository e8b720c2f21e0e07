"""
Formatting utilities for the console UI.
"""
from datetime import datetime
from typing import Optional


def parse_datetime(date_str: Optional[str]) -> Optional[datetime]:
    """Parse an ISO datetime string from the API, None when unparsable."""
    try:
        if not date_str:
            return None
        return datetime.fromisoformat(date_str.replace('Z', '+00:00'))
    except (AttributeError, TypeError, ValueError):
        return None


def format_date(date_str: Optional[str], fmt: str = "%d/%m/%Y %H:%M") -> str:
    """Format ISO date string for display."""
    dt = parse_datetime(date_str)
    if dt is None:
        return "-"
    return dt.strftime(fmt)


def admin_label(is_admin: bool) -> str:
    """Chip text of the admin column."""
    return "Admin" if is_admin else "Utilisateur"


def verified_label(is_verified: bool) -> str:
    """Chip text of the verified column."""
    return "Vérifié" if is_verified else "Non Vérifié"


def format_count(value: Optional[int]) -> str:
    """Integer with thin thousands separators, '-' when unknown."""
    if value is None:
        return "-"
    return f"{value:,}".replace(",", " ")


def user_display_name(user: dict) -> str:
    """Readable name for dialogs: full name, else email, else uid."""
    return user.get("full_name") or user.get("email") or user.get("uid") or "Utilisateur"

"""
CSV export of the user management table.
"""
from datetime import datetime, timezone
from typing import Optional

import pandas as pd

from app.schemas.user import UserRow

CSV_COLUMNS = [
    "UID",
    "FullName",
    "Email",
    "Matricule",
    "Year",
    "Speciality",
    "PhoneNumber",
    "Section",
    "Group",
    "ProfilePicUrl",
    "CreatedAt",
    "IsAdmin",
    "IsVerified",
]


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def build_export_records(rows: list[UserRow]) -> list[dict]:
    """One CSV record per table row, in CSV_COLUMNS order."""
    return [
        {
            "UID": row.uid,
            "FullName": row.full_name,
            "Email": row.email,
            "Matricule": row.matricule,
            "Year": row.year,
            "Speciality": row.speciality,
            "PhoneNumber": row.phone_number,
            "Section": row.section,
            "Group": row.group,
            "ProfilePicUrl": row.profile_pic_url,
            "CreatedAt": row.created_at.isoformat() if row.created_at else None,
            "IsAdmin": _yes_no(row.is_admin),
            "IsVerified": _yes_no(row.is_verified),
        }
        for row in rows
    ]


def users_to_csv(rows: list[UserRow]) -> str:
    """Render rows as CSV text (header included even when empty)."""
    df = pd.DataFrame(build_export_records(rows), columns=CSV_COLUMNS)
    return df.to_csv(index=False)


def export_filename(now: Optional[datetime] = None) -> str:
    """Download name, e.g. users_export_20240115T093000Z.csv."""
    now = now or datetime.now(timezone.utc)
    return f"users_export_{now.strftime('%Y%m%dT%H%M%SZ')}.csv"

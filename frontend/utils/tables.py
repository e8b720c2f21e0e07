"""
Shaping of API rows for the users table and edit form.

No Streamlit import here so the functions can be tested on their own.
"""
from typing import Optional

import pandas as pd

from .formatters import admin_label, format_date, verified_label

SELECT_COLUMN = "Sélection"

# API field -> column header, in display order
COLUMN_LABELS = {
    "full_name": "Nom Complet",
    "email": "Email",
    "matricule": "Matricule",
    "year": "Année",
    "speciality": "Spécialité",
    "phone_number": "Téléphone",
    "section": "Section",
    "group": "Groupe",
    "profile_pic_url": "Photo URL",
    "created_at": "Créé le",
    "is_verified": "Vérifié",
    "is_admin": "Admin",
}

# Table headers the sort selector offers, mapped to the API sort_by value
SORT_OPTIONS = {
    "Nom Complet": "full_name",
    "Email": "email",
    "Matricule": "matricule",
    "Année": "year",
    "Spécialité": "speciality",
    "Créé le": "created_at",
}

PROFILE_FIELDS = (
    "full_name",
    "email",
    "matricule",
    "year",
    "speciality",
    "phone_number",
    "section",
    "group",
    "profile_pic_url",
)


def build_users_dataframe(
    users: list[dict], selected: Optional[set[str]] = None
) -> pd.DataFrame:
    """
    Table rows for st.data_editor, indexed by uid.

    The first column is the selection checkbox; flags are shown as labels.
    """
    selected = selected or set()
    records = []
    for user in users:
        record = {SELECT_COLUMN: user.get("uid") in selected}
        for field, label in COLUMN_LABELS.items():
            value = user.get(field)
            if field == "created_at":
                value = format_date(value) if value else ""
            elif field == "is_admin":
                value = admin_label(bool(value))
            elif field == "is_verified":
                value = verified_label(bool(value))
            record[label] = value if value is not None else ""
        records.append(record)

    columns = [SELECT_COLUMN, *COLUMN_LABELS.values()]
    index = pd.Index([user.get("uid") for user in users], name="uid")
    return pd.DataFrame(records, columns=columns, index=index)


def selected_uids(table: pd.DataFrame) -> list[str]:
    """Uids whose selection checkbox is ticked, in table order."""
    if table.empty or SELECT_COLUMN not in table:
        return []
    return [str(uid) for uid in table.index[table[SELECT_COLUMN].astype(bool).to_numpy()]]


def profile_form_defaults(user: dict) -> dict[str, str]:
    """Edit form initial values; missing fields become empty strings."""
    return {field: user.get(field) or "" for field in PROFILE_FIELDS}


def build_profile_payload(values: dict) -> dict[str, Optional[str]]:
    """PATCH body from form values; blank inputs are sent as null."""
    payload = {}
    for field in PROFILE_FIELDS:
        value = values.get(field)
        if isinstance(value, str):
            value = value.strip()
        payload[field] = value or None
    return payload


def missing_required_fields(values: dict) -> list[str]:
    """Required form fields left blank (full name and email)."""
    return [
        field for field in ("full_name", "email")
        if not (values.get(field) or "").strip()
    ]


def summarize_bulk_result(result: dict, action_label: str) -> tuple[str, str]:
    """
    (level, message) for a BulkActionResponse, level being
    "success", "warning" or "error".
    """
    succeeded = result.get("succeeded") or []
    failed = result.get("failed") or {}
    if not failed:
        return "success", f"{action_label} : {len(succeeded)} utilisateur(s)."
    details = ", ".join(f"{uid} ({error})" for uid, error in failed.items())
    if not succeeded:
        return "error", f"Échec de {action_label.lower()} pour la sélection : {details}"
    return (
        "warning",
        f"{action_label} : {len(succeeded)} réussi(s), {len(failed)} en échec : {details}",
    )

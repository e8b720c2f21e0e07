"""
Auth database configuration.
Stores console credentials, keyed by the same uid as the user profiles.
"""

DB_NAME = "auth_db"


class Collections:
    """Collection names in auth_db."""
    ACCOUNTS = "accounts"
    METADATA = "_metadata"


# Manifest for registry
DB_MANIFEST = {
    "db_name": DB_NAME,
    "purpose": "Console credentials and account status",
    "collections": [Collections.ACCOUNTS, Collections.METADATA],
    "access_level": "restricted",
}

"""
System database configuration.
Registry of the databases the console reads and writes.
"""

DB_NAME = "system_db"


class Collections:
    """Collection names in system_db."""
    DB_REGISTRY = "db_registry"  # one entry per database, _id is the db name
    METADATA = "_metadata"


DB_MANIFEST = {
    "db_name": DB_NAME,
    "purpose": "Registry of the admin console databases",
    "collections": [Collections.DB_REGISTRY, Collections.METADATA],
    "access_level": "system",
}

"""
Campus database configuration.
Stores user profiles and the admin flags that sit beside them.

Structure:
- users: One profile document per user, _id is the uid (camelCase fields
  shared with the mobile clients)
- admins: One document per admin, _id is the uid; presence is the flag
- _metadata: Database metadata
"""

DB_NAME = "campus_db"


class Collections:
    """Collection names in campus_db."""
    USERS = "users"
    ADMINS = "admins"
    METADATA = "_metadata"
    
    # Index definitions for each collection
    INDEXES = {
        "users": [
            {"keys": [("fullName", 1)]},
            {"keys": [("email", 1)]},
            {"keys": [("matricule", 1)]},
            {"keys": [("isVerified", 1)]},
        ],
    }


# Manifest for registry
DB_MANIFEST = {
    "db_name": DB_NAME,
    "purpose": "User profiles, verification and admin flags",
    "collections": [
        Collections.USERS,
        Collections.ADMINS,
        Collections.METADATA,
    ],
    "access_level": "restricted",
}

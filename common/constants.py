"""Project-wide constants (storage names, tier keys, builtin account)."""

DATABASE_NAME: str = "medsocks_files_db"
FILES_COLLECTION: str = "files"
SCHEMA_VERSION: int = 1

SESSION_KEY: str = "labsky_user"
ACCOUNTS_KEY: str = "labsky_accounts"
INTENDED_KEY: str = "medsocks_intended"

DOWNLOAD_HANDLE_PREFIX: str = "blob:locker/"

# Demo credential checked after the registry, never stored in it.
DEMO_ACCOUNT = {
    "email": "adams.tebes@gmail.com",
    "password": "soccerkid098",
    "name": "Adams Tebes",
}

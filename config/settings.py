import os
from dotenv import load_dotenv

# Load environment variables from the project root
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "..", ".env"))


def _bool_env(name: str, default: str = "1") -> bool:
    value = os.getenv(name, default).strip().lower()
    return value not in {"0", "false", "no"}


DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    pg_host = os.getenv("PGHOST")
    pg_port = os.getenv("PGPORT", "5432")
    pg_db = os.getenv("PGDATABASE")
    pg_user = os.getenv("PGUSER")
    pg_password = os.getenv("PGPASSWORD")

    if all([pg_host, pg_db, pg_user, pg_password]):
        DATABASE_URL = (
            f"postgresql+asyncpg://{pg_user}:{pg_password}@{pg_host}:{pg_port}/{pg_db}"
        )

SQL_ECHO = _bool_env("SQL_ECHO", "false")

# Document store backend configuration
DOCUMENT_STORE_MODE = os.getenv("DOCUMENT_STORE_MODE", "sql").lower()

API_AUTH_TOKEN = os.getenv("API_AUTH_TOKEN")
APP_ENV = os.getenv("APP_ENV", "prod").lower()
IS_DEV_MODE = APP_ENV in {"dev", "development"}

# Hard limit of the store's array-membership query, not a tuning knob.
MEMBERSHIP_QUERY_LIMIT = 10

# Top dishes compete among the most up-voted approved dishes only.
TOP_DISHES_POOL_SIZE = 30

# Search configuration
SEARCH_FETCH_LIMIT = int(os.getenv("SEARCH_FETCH_LIMIT", "100"))
# Hard ceiling on search results; the env value can only lower it.
SEARCH_RESULT_CAP = 30
SEARCH_MAX_RESULTS = min(int(os.getenv("SEARCH_MAX_RESULTS", "30")), SEARCH_RESULT_CAP)
SEARCH_PREFER_IMAGES = _bool_env("SEARCH_PREFER_IMAGES", "false")

# Menu ingestion
RESOLUTION_CACHE_TTL_SECONDS = float(os.getenv("RESOLUTION_CACHE_TTL_SECONDS", "60"))

DISHES_COLLECTION = "dishes"
MENUS_COLLECTION = "menus"

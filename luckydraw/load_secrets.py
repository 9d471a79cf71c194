import os
import pathlib
from dotenv import load_dotenv

load_dotenv()

database_url = os.getenv("DATABASE_URL")
user = os.getenv("DB_USER")
password = os.getenv("DB_PASSWORD")
host = os.getenv("DB_HOST")
port = os.getenv("DB_PORT") or "5432"
db_name = os.getenv("DB_NAME") or "luckydraw"
sqlite_path = os.getenv("SQLITE_PATH") or str(
    pathlib.Path(__file__).parents[1] / "luckydraw.sqlite3"
)
pool_size = int(os.getenv("DB_POOL_SIZE", "20"))
max_overflow = int(os.getenv("DB_MAX_OVERFLOW", "20"))

draw_max_attempts = int(os.getenv("DRAW_MAX_ATTEMPTS", "2"))
api_draw_scheme = os.getenv("API_DRAW_SCHEME", "v2").strip().lower()
prize_image_base_url = os.getenv("PRIZE_IMAGE_BASE_URL") or None

frontend_origin = os.getenv("FRONTEND_ORIGIN")
cors_origin = os.getenv("CORS_ORIGIN")
create_tables_on_startup = os.getenv("CREATE_TABLES_ON_STARTUP", "false").lower() in (
    "1",
    "true",
    "yes",
)
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
server_port = int(os.getenv("PORT", "3000"))

if __name__ == "__main__":
    print(user, host, port, db_name, sqlite_path, draw_max_attempts, api_draw_scheme)

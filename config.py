import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() not in ("0", "false", "no", "")


class Config:
    # --------------------------
    # 🔹 Flask Configuration
    # --------------------------
    SECRET_KEY = os.environ.get("SECRET_KEY", "secret123")
    # Trust X-Forwarded-* headers when running behind a reverse proxy (nginx/caddy/traefik)
    TRUST_PROXY = _flag("TRUST_PROXY", "0")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    PORT = int(os.environ.get("PORT", "3000"))

    # --------------------------
    # 🔹 MySQL Database
    # --------------------------
    # A single URL wins over the discrete DB_* values when present.
    DATABASE_URL = os.environ.get("DATABASE_URL", "").strip()
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_NAME = os.environ.get("DB_NAME", "school_fee_db")

    DB_POOL_NAME = os.environ.get("DB_POOL_NAME", "fees_pool")
    DB_POOL_SIZE = int(os.environ.get("DB_POOL_SIZE", "5"))
    # How long a request waits for a free pooled connection before failing
    DB_POOL_WAIT_SECONDS = float(os.environ.get("DB_POOL_WAIT_SECONDS", "5"))
    DB_CONNECT_TIMEOUT = int(os.environ.get("DB_CONNECT_TIMEOUT", "10"))

    # TLS towards the database. DATABASE_URL deployments always require TLS.
    DB_SSL_REQUIRE = _flag("DB_SSL_REQUIRE", "0")
    DB_SSL_CA = os.environ.get("DB_SSL_CA", "").strip() or None
    DB_SSL_CERT = os.environ.get("DB_SSL_CERT", "").strip() or None
    DB_SSL_KEY = os.environ.get("DB_SSL_KEY", "").strip() or None
    # Self-signed server certificates need DB_SSL_VERIFY_CERT=0; off is never the default.
    DB_SSL_VERIFY_CERT = _flag("DB_SSL_VERIFY_CERT", "1")

    # --------------------------
    # 🔹 Reports
    # --------------------------
    REPORT_TITLE = os.environ.get("REPORT_TITLE", "Student Fee Report")
    PDF_RENDER_TIMEOUT_MS = int(os.environ.get("PDF_RENDER_TIMEOUT_MS", "30000"))

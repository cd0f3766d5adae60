import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./security.db")
    DB_AUTO_CREATE = bool(data.get("DB_AUTO_CREATE", True))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_EXPIRES_MINUTES = int(data.get("JWT_EXPIRES_MINUTES", 60 * 24 * 7))
    MFA_TOKEN_EXPIRES_MINUTES = int(data.get("MFA_TOKEN_EXPIRES_MINUTES", 5))

    # Detection
    BRUTE_FORCE_THRESHOLD = int(data.get("BRUTE_FORCE_THRESHOLD", 5))
    BRUTE_FORCE_WINDOW_MINUTES = int(data.get("BRUTE_FORCE_WINDOW_MINUTES", 10))

    # Audit log reads
    AUDIT_PAGE_SIZE_DEFAULT = int(data.get("AUDIT_PAGE_SIZE_DEFAULT", 50))
    AUDIT_PAGE_SIZE_MAX = int(data.get("AUDIT_PAGE_SIZE_MAX", 200))
    AUDIT_EXPORT_MAX_ROWS = int(data.get("AUDIT_EXPORT_MAX_ROWS", 10000))

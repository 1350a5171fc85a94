import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./hubaccess.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_EXPIRE_MINUTES = int(data.get("JWT_EXPIRE_MINUTES", 15))
    RESOLUTION_TIMEOUT_SECONDS = float(data.get("RESOLUTION_TIMEOUT_SECONDS", 10))
    ACCESS_CACHE_TTL_SECONDS = float(data.get("ACCESS_CACHE_TTL_SECONDS", 30))
    MEMBER_SECTIONS = data.get(
        "MEMBER_SECTIONS",
        [
            "feed",
            "announcements",
            "events",
            "groups",
            "resources",
            "programs",
            "notifications",
            "profile",
        ],
    )

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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")
    # No default: startup fails without a signing secret
    DOWNLOAD_TOKEN_SECRET = data.get("DOWNLOAD_TOKEN_SECRET")
    DOWNLOAD_LINK_TTL_MINUTES = data.get("DOWNLOAD_LINK_TTL_MINUTES", 15)
    DOWNLOAD_BASE_PATH = data.get("DOWNLOAD_BASE_PATH", "/products/download")
    BCRYPT_ROUNDS = data.get("BCRYPT_ROUNDS", 12)

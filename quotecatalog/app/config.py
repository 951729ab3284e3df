import os

from dotenv import load_dotenv

load_dotenv()


def _cafe24_base_url() -> str:
    # An explicit base URL wins; otherwise derive it from the mall id.
    explicit = os.getenv("CAFE24_BASE_URL", "").strip()
    if explicit:
        return explicit.rstrip("/")
    mall_id = os.getenv("CAFE24_MALL_ID", "").strip()
    if not mall_id:
        return ""
    return f"https://{mall_id}.cafe24api.com/api/v2/admin"


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JSON_SORT_KEYS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Comma-separated list
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

    APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT = int(os.getenv("APP_PORT", "8080"))

    # Upstream (Cafe24 Admin API)
    CAFE24_BASE_URL = _cafe24_base_url()
    CAFE24_ACCESS_TOKEN = os.getenv("CAFE24_ACCESS_TOKEN", "")
    CAFE24_API_VERSION = os.getenv("CAFE24_API_VERSION", "2024-06-01")
    CAFE24_TIMEOUT_SECONDS = float(os.getenv("CAFE24_TIMEOUT_SECONDS", "10"))

    # Catalog page
    CATALOG_PRODUCT_LIMIT = int(os.getenv("CATALOG_PRODUCT_LIMIT", "50"))
    CATALOG_SEARCH_DEBOUNCE_MS = int(os.getenv("CATALOG_SEARCH_DEBOUNCE_MS", "300"))

    # Simulated quote intake
    QUOTE_SUBMIT_DELAY_SECONDS = float(os.getenv("QUOTE_SUBMIT_DELAY_SECONDS", "1.0"))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    CAFE24_BASE_URL = "https://testmall.cafe24api.com/api/v2/admin"
    CAFE24_ACCESS_TOKEN = "test-token"
    QUOTE_SUBMIT_DELAY_SECONDS = 0.0

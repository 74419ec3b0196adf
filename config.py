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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./recurring.db")
    TEST_DB_URI = data.get("TEST_DB_URI", os.environ.get("TEST_DB_URI"))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Invoice numbering
    DEFAULT_INVOICE_PREFIX = data.get("DEFAULT_INVOICE_PREFIX", "INV-")
    INVOICE_NUMBER_WIDTH = data.get("INVOICE_NUMBER_WIDTH", 5)

    # Generated invoice defaults
    DEFAULT_PAYMENT_TERMS_DAYS = data.get("DEFAULT_PAYMENT_TERMS_DAYS", 30)
    DEFAULT_CURRENCY = data.get("DEFAULT_CURRENCY", "USD")

    # Due-template trigger
    RECURRING_GENERATION_ENABLED = bool(data.get("RECURRING_GENERATION_ENABLED", True))
    RECURRING_GENERATION_INTERVAL_SECONDS = data.get("RECURRING_GENERATION_INTERVAL_SECONDS", 86400)  # Daily

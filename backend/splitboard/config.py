import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the package directory or the backend directory
env_path = Path(__file__).parent / '.env'
if not env_path.exists():
    env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)


def _env_bool(name, default):
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    # Splitwise (upstream bookkeeping API)
    SPLITWISE_API_KEY = os.getenv('SPLITWISE_API_KEY')
    SPLITWISE_BASE_URL = os.getenv('SPLITWISE_BASE_URL', 'https://secure.splitwise.com/api/v3.0')
    UPSTREAM_TIMEOUT = float(os.getenv('UPSTREAM_TIMEOUT', '10'))

    # MongoDB
    MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017/expense-tracker')

    # Discord notifications
    DISCORD_WEBHOOK_URL = os.getenv('DISCORD_WEBHOOK_URL')
    NOTIFICATIONS_ENABLED = _env_bool('NOTIFICATIONS_ENABLED', 'true')
    DASHBOARD_URL = os.getenv('DASHBOARD_URL', 'http://localhost:5000/')

    # Sync and response behaviour
    SYNC_EXPENSE_LIMIT = int(os.getenv('SYNC_EXPENSE_LIMIT', '10'))
    CACHE_MAX_AGE = int(os.getenv('CACHE_MAX_AGE', '1800'))
    DEFAULT_CURRENCY = os.getenv('DEFAULT_CURRENCY', 'CAD')
    LOCALES = [loc.strip() for loc in os.getenv('LOCALES', 'en,zh').split(',') if loc.strip()]

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', 'http://localhost:5173').split(',') if o.strip()]

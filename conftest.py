import os

# Settings are read once and cached, so test defaults must be in place
# before anything under libs/ or services/ is imported.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./store-test.db")
os.environ.setdefault("ADMIN_CHAT_IDS", "111,222")
os.environ.setdefault("BOT_TOKEN", "")
os.environ.setdefault("CASHBACK_RATE", "0")

from libs.common.config import get_settings  # noqa: E402

get_settings.cache_clear()

"""
LotteryMaster configuration.

Every value can be overridden from the environment or a local .env file.
Components read these as defaults only; all of them accept explicit
arguments, so tests never depend on the environment.
"""
import logging
import os

from dotenv import load_dotenv

load_dotenv()


def _env_float(name, default):
    value = os.environ.get(name)
    return float(value) if value not in (None, "") else default


def _env_int(name, default):
    value = os.environ.get(name)
    return int(value) if value not in (None, "") else default


def _env_optional_float(name):
    value = os.environ.get(name)
    return float(value) if value not in (None, "") else None


PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# -- Storage --------------------------------------------------------------

DATA_DIR = os.environ.get("LOTTERY_DATA_PATH", os.path.join(PROJECT_ROOT, "lottery_data"))
DATASET_EXT = "csv"

FILE_PREFIXES = {
    "SSQ": os.environ.get("SSQ_FILE_PREFIX", "ssq_data_"),
    "DLT": os.environ.get("DLT_FILE_PREFIX", "dlt_data_"),
    "FC3D": os.environ.get("FC3D_FILE_PREFIX", "fc3d_data_"),
}

# -- Sources --------------------------------------------------------------

SOURCE_URLS = {
    "SSQ": os.environ.get("SSQ_URL", "https://datachart.500.com/ssq/history/newinc/history.php"),
    "DLT": os.environ.get("DLT_URL", "https://datachart.500.com/dlt/history/newinc/history.php"),
    "FC3D": os.environ.get("FC3D_URL", "https://datachart.500.com/sd/history/inc/history.php"),
}

HISTORY_LIMIT = _env_int("HISTORY_LIMIT", 100)
REQUEST_TIMEOUT = _env_float("REQUEST_TIMEOUT", 15.0)
REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "text/html,application/xhtml+xml,*/*",
}

# Class carried by the period cell of each FC3D result row
FC3D_ROW_MARKER = os.environ.get("FC3D_ROW_MARKER", "t_tr1")

# -- Statistics / cache ---------------------------------------------------

CACHE_TTL_SECONDS = _env_float("CACHE_DURATION", 3600.0)
DEFAULT_PERIOD_COUNT = _env_int("DEFAULT_PERIOD_COUNT", 100)
RECENT_DATA_COUNT = _env_int("RECENT_DATA_COUNT", 20)

# -- Analysis providers ---------------------------------------------------

API_PROVIDER = os.environ.get("API_PROVIDER", "qwen").lower()
API_KEY = os.environ.get("API_KEY", "")
API_URL = os.environ.get(
    "API_URL", "https://dashscope.aliyuncs.com/compatible-mode/v1/chat/completions"
)
API_MODEL = os.environ.get("API_MODEL", "qwen-plus")
API_TIMEOUT = _env_float("API_TIMEOUT", 30.0)
API_TEMPERATURE = _env_float("API_TEMPERATURE", 0.3)
API_MAX_TOKENS = _env_int("API_MAX_TOKENS", 1000)
API_TOP_P = _env_optional_float("API_TOP_P")
API_PRESENCE_PENALTY = _env_optional_float("API_PRESENCE_PENALTY")

CLAUDE_API_KEY = os.environ.get("CLAUDE_API_KEY", "")
CLAUDE_API_URL = os.environ.get("CLAUDE_API_URL", "https://api.anthropic.com/v1/messages")
CLAUDE_API_VERSION = os.environ.get("CLAUDE_API_VERSION", "2023-06-01")
CLAUDE_MODEL = os.environ.get("CLAUDE_MODEL", "")
CLAUDE_TEMPERATURE = _env_float("CLAUDE_TEMPERATURE", 0.3)
CLAUDE_MAX_TOKENS = _env_int("CLAUDE_MAX_TOKENS", 4000)
CLAUDE_TIMEOUT = _env_float("CLAUDE_TIMEOUT", 60.0)

# -- Logging --------------------------------------------------------------

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level=None):
    """Configure root logging for the command-line scripts."""
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)

"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("DB_PATH", str(PROJECT_ROOT / "data" / "db" / "calendar-requests.db")))
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# SCHEDULING DEFAULTS
# =============================================================================

DEFAULT_WORK_START = "09:00"
DEFAULT_LUNCH_TIME = "12:00"
DEFAULT_LUNCH_DURATION_MINUTES = 60
DEFAULT_CALL_START = "09:00"
DEFAULT_CALL_DURATION_MINUTES = 30
DEFAULT_ENTRY_HOURS = 1.0
DEFAULT_CALL_TYPE = "Teams"

# Current week (from Sunday) plus the next four weeks
VISIBLE_WINDOW_DAYS = 35

WEEKDAY_NAMES = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]

# =============================================================================
# EVENT PRESENTATION
# =============================================================================

LUNCH_TITLE = "🍽️ Lunch Break"
CALL_ICONS = {"Teams": "💬", "Phone": "📞"}
DEFAULT_CALL_ICON = "🎥"

AGENDA_HEADERS = ["Date", "Start", "End", "Category", "Title"]
TOTALS_CATEGORIES = ["task", "recurring", "timeEntry", "call"]

# =============================================================================
# API CONFIGURATION
# =============================================================================

CALENDAR_API_KEY = os.environ.get("CALENDAR_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

import os
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ============================================================================
# SEASON RANGE
# ============================================================================

START_YEAR = int(os.getenv("WORKSHOP_START_YEAR", "2010"))
END_YEAR = int(os.getenv("WORKSHOP_END_YEAR", str(datetime.now().year - 1)))

# ============================================================================
# PATHS
# ============================================================================

PROJECT_ROOT = Path(__file__).resolve().parent.parent

CACHE_DIR = str(Path(os.getenv("WORKSHOP_CACHE_DIR", PROJECT_ROOT / "cache")).resolve())
OUTPUT_DIR = str(Path(os.getenv("WORKSHOP_OUTPUT_DIR", PROJECT_ROOT / "output")).resolve())
LOG_DIR = str(Path(os.getenv("WORKSHOP_LOG_DIR", PROJECT_ROOT / "logs")).resolve())

# ============================================================================
# LOGGING
# ============================================================================

LOG_LEVEL = os.getenv("WORKSHOP_LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("WORKSHOP_LOG_JSON", "0").lower() in ("1", "true", "yes")

# ============================================================================
# PLAY-BY-PLAY
# ============================================================================

# Columns kept from nflverse play-by-play for the efficiency study
PBP_COLUMNS = ["season", "season_type", "posteam", "defteam", "down", "play_type", "penalty", "epa"]

# Only plain dropbacks and handoffs count toward efficiency
ELIGIBLE_PLAY_TYPES = ("pass", "run")

ROLES = ("Offense", "Defense")

EPA_METRICS = ("epa_per_pass", "epa_per_rush")

MIN_REGRESSION_SAMPLES = 3

# ============================================================================
# DRAFT BOARD SCRAPING
# ============================================================================

REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko)"
                  " Chrome/120.0.0.0 Safari/537.36",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}

REQUEST_TIMEOUT = float(os.getenv("WORKSHOP_REQUEST_TIMEOUT", "20"))

# Big board published as an HTML table (one placeholder row after every prospect)
TABLE_BOARD_NAME = os.getenv("WORKSHOP_TABLE_BOARD_NAME", "drafttek")
TABLE_BOARD_URL = os.getenv(
    "WORKSHOP_TABLE_BOARD_URL",
    "https://www.drafttek.com/2024-NFL-Draft-Big-Board/Top-NFL-Draft-Prospects-2024-Page-1.asp",
)

# Big board published as an article, one "<rank>. <name>, <pos>, <notes>" paragraph per prospect
TEXT_BOARD_NAME = os.getenv("WORKSHOP_TEXT_BOARD_NAME", "nfl_com")
TEXT_BOARD_URL = os.getenv(
    "WORKSHOP_TEXT_BOARD_URL",
    "https://www.nfl.com/news/daniel-jeremiah-s-top-50-2024-nfl-draft-prospect-rankings-1-0",
)
TEXT_BOARD_SELECTOR = os.getenv("WORKSHOP_TEXT_BOARD_SELECTOR", "div.nfl-c-body-part--text h3")

# Header aliases seen on table boards, mapped to the canonical board schema
BOARD_COLUMN_ALIASES = {
    "rank": "overall_rank",
    "rk": "overall_rank",
    "overall": "overall_rank",
    "overall_rank": "overall_rank",
    "ovr": "overall_rank",
    "player": "player_name",
    "name": "player_name",
    "prospect": "player_name",
    "player_name": "player_name",
    "pos": "position",
    "position": "position",
    "pos_rank": "position_rank",
    "pos_rk": "position_rank",
    "position_rank": "position_rank",
    "college": "school",
    "school": "school",
    "ht": "height",
    "height": "height",
    "wt": "weight",
    "weight": "weight",
}

# Generational suffixes ignored when matching names across boards
NAME_SUFFIXES = ("jr", "sr", "ii", "iii", "iv", "v")

# ============================================================================
# REPORTING
# ============================================================================

PARSE_FAILURE_SAMPLES = 3
DEFAULT_TOP_N = 25

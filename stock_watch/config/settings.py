# stock_watch/config/settings.py

"""Central configuration for the stock_watch tracker."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the stock_watch tracker."""

    # --- Source ---
    LISTING_URL: str = os.getenv(
        "STOCK_WATCH_URL",
        "https://www.titan.fitness/on/demandware.store/"
        "Sites-TitanFitness-Site/default/Search-UpdateGrid"
        "?cgid=in-stock-items&start=0&viewall=true",
    )
    BASE_ORIGIN: str = os.getenv(
        "STOCK_WATCH_BASE_ORIGIN", "https://www.titan.fitness"
    )
    LISTING_LAYOUT: str = "titan_fitness"  # Key into selectors.json

    # --- Fetching ---
    FETCH_RETRIES: int = 5              # Extra attempts after the first
    RETRY_DELAY: float = 5.0            # Fixed seconds between attempts
    REQUEST_TIMEOUT: int = 30           # Seconds before a request times out

    # --- Change detection / export ---
    REFRESH_THRESHOLD: int = 24 * 60 * 60      # Seconds of absence
    EXPORT_WINDOW: int = 30 * 24 * 60 * 60     # Seconds back from now

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "X-Requested-With": "XMLHttpRequest",
    }

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv("STOCK_WATCH_LOG_LEVEL", "WARNING")

    # --- Paths ---
    # Relative paths resolve against the working directory of the run
    SELECTORS_PATH: Path = Path(__file__).resolve().parent / "selectors.json"
    LOGS_DIR: Path = Path(
        os.getenv("STOCK_WATCH_LOGS_DIR", "logs")
    )
    DIAGNOSTICS_DIR: Path = Path(
        os.getenv("STOCK_WATCH_DIAGNOSTICS_DIR", ".")
    )

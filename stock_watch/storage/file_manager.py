# stock_watch/storage/file_manager.py

"""Writes diagnostic artefacts (bad payloads, debug HTML) to disk."""

import logging
from datetime import datetime
from pathlib import Path

from stock_watch.config.settings import Settings

logger = logging.getLogger("stock_watch.storage")


class FileManager:
    """Handles saving diagnostic files for offline inspection."""

    def __init__(self, diagnostics_dir: Path | None = None) -> None:
        self.diagnostics_dir: Path = (
            diagnostics_dir or Settings.DIAGNOSTICS_DIR
        )
        logger.debug(
            "FileManager initialised, diagnostics_dir=%s",
            self.diagnostics_dir,
        )

    def write_item_payload(self, index: int, payload: str) -> Path:
        """Save the raw JSON payload of product node ``index``."""
        self.diagnostics_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.diagnostics_dir / f"item-{index}.json"
        filepath.write_text(payload, encoding="utf-8")
        logger.info("Saved unparsed payload %d to %s", index, filepath)
        return filepath

    def write_debug_html(
        self, text: str, debug_dir: Path, started_at: datetime
    ) -> Path:
        """Dump the fetched listing HTML, named by the run start time."""
        debug_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{started_at.strftime('%Y%m%d_%H%M%S')}.html"
        filepath = debug_dir / filename
        filepath.write_text(text, encoding="utf-8")
        logger.info("Wrote debug html to %s", filepath)
        return filepath

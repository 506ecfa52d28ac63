"""Raw payload snapshots for debugging."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_DEBUG_DIR = Path("debug")


class DebugSink:
    """Write fetched JSON payloads to timestamped files. Never read back."""

    def __init__(self, directory: Path = DEFAULT_DEBUG_DIR) -> None:
        self.directory = directory

    def write(self, label: str, payload: Any) -> Path:
        """Dump one payload as pretty JSON and return its path."""
        self.directory.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S%fZ")
        path = self.directory / f"{timestamp}-{label}.json"
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.debug("Wrote debug snapshot %s", path)
        return path

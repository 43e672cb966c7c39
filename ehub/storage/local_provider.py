"""
Local filesystem token storage.
Keeps named slots in a small JSON file so a token survives process restarts.
"""
import json
from pathlib import Path
from typing import Dict, Optional

import structlog

from ..config import settings
from .provider import TokenStorage

logger = structlog.get_logger(__name__)


class LocalTokenStorage(TokenStorage):
    """JSON-file backed storage for development and CLI use."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.token_store_path)

    def _read(self) -> Dict[str, str]:
        """Load all slots; a missing or corrupt file reads as empty."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("token_store_unreadable", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

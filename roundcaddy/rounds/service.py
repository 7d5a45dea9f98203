from __future__ import annotations

import json
import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import ValidationError

from roundcaddy.config import get_settings
from roundcaddy.storage.kv import atomic_write_text

from .models import Round
from .strokes_gained import with_strokes_gained

logger = logging.getLogger(__name__)


class RoundNotFound(Exception):
    pass


class RoundOwnershipError(Exception):
    pass


class RoundAlreadyExists(Exception):
    pass


SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def _sanitize_id(value: str) -> str:
    """Reject ids that are not safe to use as a path component."""

    if not SAFE_ID_RE.match(value):
        raise ValueError(f"Invalid id for filesystem usage: {value!r}")
    return value


class RoundService:
    """File-backed round history, one JSON document per round under its user."""

    def __init__(self, base_dir: Path | str | None = None):
        default = get_settings().data_dir / "rounds"
        base = Path(base_dir or os.getenv("ROUNDCADDY_ROUNDS_DIR", default))
        self._base_dir = base.expanduser().resolve()

    def save_round(self, round_: Round) -> Round:
        round_ = with_strokes_gained(round_)
        path = self._round_path(round_.user_id, round_.id)
        if path.exists() or self._find_round_path(round_.id) is not None:
            raise RoundAlreadyExists(round_.id)
        atomic_write_text(path, round_.model_dump_json(indent=2))
        logger.info(
            "round saved", extra={"round_id": round_.id, "user_id": round_.user_id}
        )
        return round_

    def get_round(self, round_id: str, user_id: str | None = None) -> Round:
        path = self._find_round_path(round_id)
        if path is None:
            raise RoundNotFound(round_id)
        record = self._read_round(path)
        if record is None:
            raise RoundNotFound(round_id)
        if user_id is not None and record.user_id != user_id:
            raise RoundOwnershipError(round_id)
        return record

    def list_rounds(self, user_id: str, limit: int = 20) -> List[Round]:
        user_dir = self._base_dir / _sanitize_id(user_id)
        if not user_dir.exists():
            return []

        rounds: List[Round] = []
        for path in user_dir.glob("*.json"):
            record = self._read_round(path)
            if record is not None:
                rounds.append(record)
        rounds.sort(key=lambda r: r.played_at, reverse=True)
        return rounds[:limit]

    # Internal helpers
    def _round_path(self, user_id: str, round_id: str) -> Path:
        return self._base_dir / _sanitize_id(user_id) / f"{_sanitize_id(round_id)}.json"

    def _find_round_path(self, round_id: str) -> Path | None:
        name = f"{_sanitize_id(round_id)}.json"
        for user_dir in self._base_dir.glob("*"):
            candidate = user_dir / name
            if candidate.exists():
                return candidate
        return None

    def _read_round(self, path: Path) -> Round | None:
        try:
            return Round.model_validate(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError, ValidationError):
            logger.warning("skipping unreadable round", extra={"path": str(path)})
            return None


@lru_cache(maxsize=1)
def get_round_service() -> RoundService:
    return RoundService()


__all__ = [
    "RoundAlreadyExists",
    "RoundNotFound",
    "RoundOwnershipError",
    "RoundService",
    "get_round_service",
]

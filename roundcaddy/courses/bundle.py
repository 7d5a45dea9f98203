"""Loading of the course list shipped with the service."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .models import BundleMetadata, Course, CourseBundle

logger = logging.getLogger(__name__)

EPOCH_FLOOR = datetime.min.replace(tzinfo=timezone.utc)


class CourseBundleError(ValueError):
    """Raised when a course bundle file is structurally invalid."""


def _read_bundle_payload(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise CourseBundleError("bundle root must be an object")
    if not isinstance(payload.get("courses"), list):
        raise CourseBundleError("bundle is missing a courses array")
    if not isinstance(payload.get("metadata"), dict):
        raise CourseBundleError("bundle is missing metadata")
    return payload


def read_bundle(path: Path) -> CourseBundle:
    """Parse a bundle file, raising on any structural or decode problem."""

    try:
        payload = _read_bundle_payload(path)
    except json.JSONDecodeError as exc:
        raise CourseBundleError(f"bundle is not valid JSON: {exc}") from exc
    try:
        return CourseBundle.model_validate(payload)
    except ValidationError as exc:
        raise CourseBundleError(f"bundle failed validation: {exc}") from exc


def load_bundled_courses(path: Path) -> List[Course]:
    if not path.exists():
        logger.warning("course bundle not found", extra={"path": str(path)})
        return []
    try:
        bundle = read_bundle(path)
    except (CourseBundleError, OSError):
        logger.exception("failed to load bundled courses", extra={"path": str(path)})
        return []

    logger.info(
        "loaded bundled courses",
        extra={
            "count": len(bundle.courses),
            "export_date": bundle.metadata.export_date,
            "version": bundle.metadata.version,
        },
    )
    return bundle.courses


def load_bundle_metadata(path: Path) -> Optional[BundleMetadata]:
    if not path.exists():
        return None
    try:
        payload = _read_bundle_payload(path)
        return BundleMetadata.model_validate(payload["metadata"])
    except (CourseBundleError, OSError, json.JSONDecodeError, ValidationError):
        logger.warning("unreadable bundle metadata", extra={"path": str(path)})
        return None


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse ISO-8601 strings as written by the backend (``Z`` or offsets)."""

    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def bundle_export_date(metadata: Optional[BundleMetadata]) -> datetime:
    if metadata is None:
        return EPOCH_FLOOR
    return parse_timestamp(metadata.export_date) or EPOCH_FLOOR


__all__ = [
    "CourseBundleError",
    "EPOCH_FLOOR",
    "bundle_export_date",
    "load_bundle_metadata",
    "load_bundled_courses",
    "parse_timestamp",
    "read_bundle",
]

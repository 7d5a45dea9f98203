import platform
import time
from typing import Any, Dict

from roundcaddy.config import get_settings
from roundcaddy.courses.sync import get_course_sync_service
from roundcaddy.metrics import BUILD_VERSION, GIT_SHA


async def health() -> Dict[str, Any]:
    service = get_course_sync_service()
    last_sync = service.last_synced_at()
    return {
        "status": "ok",
        "version": BUILD_VERSION,
        "git": GIT_SHA,
        "ts": time.time(),
        "courses": {
            "bundle": str(get_settings().course_bundle_path),
            "last_sync": last_sync.isoformat() if last_sync else None,
            "syncing": service.is_syncing,
        },
        "runtime": {
            "python": platform.python_version(),
        },
    }

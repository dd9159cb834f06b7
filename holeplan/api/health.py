import platform
import time
from typing import Any, Dict

from holeplan.config import get_settings
from holeplan.metrics import BUILD_VERSION, GIT_SHA


async def health() -> Dict[str, Any]:
    settings = get_settings()
    return {
        "status": "ok",
        "version": BUILD_VERSION,
        "git": GIT_SHA,
        "ts": time.time(),
        "env": {
            "planning_strategy": settings.planning_strategy,
            "backward_fallback": settings.backward_fallback,
            "top_sequences": settings.top_sequences,
        },
        "runtime": {
            "python": platform.python_version(),
        },
    }

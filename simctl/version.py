from __future__ import annotations

import platform
from typing import List

from simctl import __version__

GIT_COMMIT = "unknown"
GIT_BRANCH = "unknown"
BUILD_DATE = "unknown"


def info() -> List[str]:
    return [
        f"Version: {__version__}",
        f"GitCommit: {GIT_COMMIT}",
        f"GitBranch: {GIT_BRANCH}",
        f"BuildDate: {BUILD_DATE}",
        f"PythonVersion: {platform.python_version()}",
        f"Implementation: {platform.python_implementation()}",
        f"Platform: {platform.system().lower()}/{platform.machine()}",
    ]


__all__ = ["info"]

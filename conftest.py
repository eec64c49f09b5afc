from __future__ import annotations

import os
import sys
from pathlib import Path


ROOT_DIR = Path(__file__).resolve().parent

root_path = str(ROOT_DIR)
if root_path not in sys.path:
    sys.path.insert(0, root_path)


def _ensure_test_env() -> None:
    # Settings must not pick up a developer's .env during tests
    os.environ.setdefault("DOCKER_CONTAINER", "true")
    os.environ.setdefault("ENVIRONMENT", "test")


_ensure_test_env()

import os
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_SAMPLE_2XX", "1")

import logging  # noqa: E402

import pytest  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_root_log_level():
    # Importing canteen.app.main during collection runs configure_logging,
    # which lowers the root logger to INFO for the whole session. Give each
    # test the interpreter's default root level and restore it afterwards.
    root = logging.getLogger()
    saved = root.level
    root.setLevel(logging.WARNING)
    yield
    root.setLevel(saved)

"""Root conftest.py for pytest."""

import os
import sys
import tempfile
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.resolve()
sys.path.insert(0, str(project_root))

# Settings are read at import time, so test defaults must be in place before
# anything imports rollfetch
_test_root = Path(tempfile.mkdtemp(prefix="rollfetch-tests-"))
os.environ.setdefault("TESTING", "True")
os.environ.setdefault("DOWNLOADS_DIR", str(_test_root / "downloads"))
os.environ.setdefault("MERGED_DIR", str(_test_root / "merged"))
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")

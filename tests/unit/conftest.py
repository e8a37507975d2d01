"""Unit test configuration - environment for isolated testing"""

import os
import tempfile
from pathlib import Path

# CRITICAL: Set env vars BEFORE importing search_tuner.main
# main.py reads CORPUS_PATH and LOG_FILE at module level (on import)
os.environ.setdefault("CORPUS_PATH", str(Path(__file__).parent.parent / "fixtures" / "locations.json"))
os.environ.setdefault("LOG_FILE", str(Path(tempfile.gettempdir()) / "search-tuner-tests" / "search-tuner.log"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

"""
Pytest bootstrap: import paths and environment for the ChefOS suite.

Runs before any test module imports ``app.config``, so the settings object is
built for the testing environment and never talks to a real LLM.
"""

import os
import sys
from pathlib import Path

tests_dir = Path(__file__).parent
project_root = tests_dir.parent
for path in (project_root, tests_dir):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.pop("OPENAI_API_KEY", None)

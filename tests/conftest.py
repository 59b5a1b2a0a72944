# tests/conftest.py

import sys
from pathlib import Path

# Add src to path for imports when the package is not installed
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

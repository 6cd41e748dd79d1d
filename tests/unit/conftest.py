from __future__ import annotations

import os
import sys
from pathlib import Path


# Settings are instantiated at import time. Unit tests never reach a real server:
# motor connects lazily and the app lifespan does not run under ASGITransport.
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017/unit")
os.environ.setdefault("API_TOKEN", "unit-token")

# Ensure the monorepo root is importable (so `import services.*` works in tests).
REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT))

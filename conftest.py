import os
import sys
from pathlib import Path

# Ensure repo root on sys.path for imports from anywhere in tests tree.
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SLOT_STORE_BACKEND", "memory")
os.environ.setdefault("GCP_PROJECT", "test-project")
os.environ.setdefault("FIRESTORE_EMULATOR_HOST", "localhost:8080")

from outfit_engines.slot_store.repository import InMemorySlotStoreRepository  # noqa: E402
from outfit_engines.slot_store.state import set_slot_store_repo  # noqa: E402

set_slot_store_repo(InMemorySlotStoreRepository())

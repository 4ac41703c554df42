import os
from datetime import datetime, timedelta
from pathlib import Path
import sys
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Ensure src/ is on sys.path for direct test invocation without an editable install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from atmospheric_clock.database_manager import DBConfig, DatabaseManager


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)

    def set(self, when: datetime) -> None:
        self.now = when

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def db(tmp_path: Path):
    config = DBConfig(path=tmp_path / "test.sqlite")
    manager = DatabaseManager(config)
    manager.init_db()
    yield manager
    manager.close()


@pytest.fixture()
def clock():
    # Monday
    return FakeClock(datetime(2025, 1, 6, 6, 59, 0))


def test_init_idempotent(db: DatabaseManager):
    # Second call should not raise and should not duplicate migrations
    db.init_db()
    rows = db.query_all("SELECT COUNT(*) as c FROM schema_migrations")
    assert rows[0]["c"] == 1

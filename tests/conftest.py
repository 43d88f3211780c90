"""测试公用工具。"""
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator

import pytest

from hydration_planner.entries.models import WaterEntry
from hydration_planner.entries.plist_file import EntryFile
from hydration_planner.entries.store import EntryStore


@pytest.fixture
def make_entry() -> Callable[..., WaterEntry]:
    def _make(amount: float, note: str, when: datetime, **kwargs) -> WaterEntry:
        return WaterEntry(timestamp=when, amount_ml=amount, note=note, **kwargs)

    return _make


@pytest.fixture
def store() -> Iterator[EntryStore]:
    with tempfile.TemporaryDirectory() as tmp:
        yield EntryStore(EntryFile(data_dir=Path(tmp)))

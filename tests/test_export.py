"""导出测试。"""
import tempfile
from datetime import datetime
from pathlib import Path

from hydration_planner.entries.models import WaterEntry
from hydration_planner.entries.plist_file import EntryFile
from hydration_planner.entries.store import EntryStore
from hydration_planner.export.service import ExportService


def test_export_copies_identical_bytes_and_overwrites() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        base = Path(tmp)
        entry_file = EntryFile(data_dir=base / "data")
        store = EntryStore(entry_file)
        store.add(WaterEntry(timestamp=datetime(2024, 1, 1, 8, 0), amount_ml=250, note="morning"))
        service = ExportService(entry_file)

        dest = base / "out.xml"
        assert service.export(dest) is True
        assert dest.read_bytes() == entry_file.path.read_bytes()

        store.add(WaterEntry(timestamp=datetime(2024, 1, 1, 9, 0), amount_ml=500, note=""))
        assert service.export(str(dest)) is True
        assert dest.read_bytes() == entry_file.path.read_bytes()


def test_export_without_entries_file_fails() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        service = ExportService(EntryFile(data_dir=Path(tmp) / "empty"))
        dest = Path(tmp) / "out.xml"
        assert service.export(dest) is False
        assert not dest.exists()


def test_export_to_missing_directory_fails() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        entry_file = EntryFile(data_dir=Path(tmp))
        assert entry_file.save([WaterEntry(timestamp=datetime(2024, 1, 1, 8, 0), amount_ml=1, note="")])
        service = ExportService(entry_file)
        assert service.export(Path(tmp) / "no" / "such" / "dir" / "out.xml") is False


def test_export_onto_source_is_refused() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        entry_file = EntryFile(data_dir=Path(tmp))
        assert entry_file.save([WaterEntry(timestamp=datetime(2024, 1, 1, 8, 0), amount_ml=1, note="")])
        before = entry_file.path.read_bytes()
        assert ExportService(entry_file).export(entry_file.path) is False
        assert entry_file.path.read_bytes() == before


def test_export_metadata() -> None:
    assert ExportService.content_type == "application/xml"
    assert ExportService.default_filename.endswith(".xml")

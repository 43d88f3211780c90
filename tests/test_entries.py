"""饮水记录模型、文件与存储测试。"""
import plistlib
import tempfile
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from hydration_planner.entries.models import WaterEntry, parse_amount
from hydration_planner.entries.plist_file import EntryFile
from hydration_planner.entries.store import EntryStore

MORNING = datetime(2024, 1, 1, 8, 0)
NINE = datetime(2024, 1, 1, 9, 0)


def test_entry_ids_are_generated_and_distinct() -> None:
    a = WaterEntry(timestamp=MORNING, amount_ml=250, note="")
    b = WaterEntry(timestamp=MORNING, amount_ml=250, note="")
    assert a.id and b.id
    assert a.id != b.id


def test_entry_accepts_file_keys_and_drops_microseconds() -> None:
    entry = WaterEntry.model_validate(
        {"id": "X", "date": datetime(2024, 1, 1, 8, 0, 0, 123456), "amount": 300, "note": "n"}
    )
    assert entry.timestamp == MORNING
    assert entry.amount_ml == 300.0
    assert entry.amount_label == "300 ml"


def test_entry_aware_timestamp_becomes_local() -> None:
    aware = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    entry = WaterEntry(timestamp=aware, amount_ml=100, note="")
    assert entry.timestamp.tzinfo is None
    assert entry.timestamp == aware.astimezone().replace(tzinfo=None)


def test_parse_amount() -> None:
    assert parse_amount("250") == 250.0
    assert parse_amount(" 12,5 ") == 12.5
    assert parse_amount("") is None
    assert parse_amount("abc") is None
    assert parse_amount("0") is None
    assert parse_amount("-5") is None
    assert parse_amount("nan") is None


def test_add_sorts_descending(store: EntryStore, make_entry) -> None:
    first = make_entry(250, "morning", MORNING)
    second = make_entry(500, "", NINE)
    store.add(first)
    store.add(second)
    listed = store.list()
    assert [e.amount_ml for e in listed] == [500, 250]
    assert [e.timestamp for e in listed] == [NINE, MORNING]


def test_add_duplicate_id_is_ignored(store: EntryStore, make_entry) -> None:
    entry = make_entry(250, "a", MORNING)
    assert store.add(entry) is True
    assert store.add(entry.model_copy(update={"note": "b"})) is False
    assert len(store.list()) == 1
    assert store.list()[0].note == "a"


def test_round_trip_through_file(make_entry) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        entry_file = EntryFile(data_dir=Path(tmp))
        store = EntryStore(entry_file)
        store.add(make_entry(250, "morning", MORNING))
        store.add(make_entry(500, "", NINE))
        assert entry_file.path.read_bytes().startswith(b"<?xml")

        reloaded = EntryStore(EntryFile(data_dir=Path(tmp)))
        assert reloaded.list() == store.list()


def test_update_replaces_by_id(store: EntryStore, make_entry) -> None:
    entry = make_entry(250, "morning", MORNING)
    store.add(entry)
    changed = entry.model_copy(update={"amount_ml": 330.0, "note": "coffee"})
    assert store.update(changed) is True
    assert store.list() == [changed]
    reloaded = EntryStore(store.entry_file)
    assert reloaded.list()[0].note == "coffee"


def test_update_missing_id_leaves_list_unchanged(store: EntryStore, make_entry) -> None:
    store.add(make_entry(250, "morning", MORNING))
    before = store.list()
    assert store.update(make_entry(999, "ghost", NINE)) is False
    assert store.list() == before


def test_update_resorts_when_timestamp_changes(store: EntryStore, make_entry) -> None:
    early = make_entry(250, "a", MORNING)
    late = make_entry(500, "b", NINE)
    store.add(early)
    store.add(late)
    store.update(early.model_copy(update={"timestamp": NINE + timedelta(hours=1)}))
    assert [e.id for e in store.list()] == [early.id, late.id]


def test_remove_is_idempotent(store: EntryStore, make_entry) -> None:
    keep = make_entry(500, "", NINE)
    gone = make_entry(250, "morning", MORNING)
    store.add(keep)
    store.add(gone)
    assert store.remove(gone.id) == 1
    assert store.remove(gone.id) == 0
    assert store.list() == [keep]
    assert EntryStore(store.entry_file).list() == [keep]


def test_filter_by_keyword_is_case_insensitive(store: EntryStore, make_entry) -> None:
    morning = make_entry(250, "Morning run", MORNING)
    store.add(morning)
    store.add(make_entry(500, "", NINE))
    assert store.filter_by_keyword("morn") == [morning]
    assert store.filter_by_keyword("MORN") == [morning]
    assert store.filter_by_keyword("evening") == []


def test_filter_by_day_keeps_list_order(store: EntryStore, make_entry) -> None:
    a = make_entry(250, "a", MORNING)
    b = make_entry(500, "b", NINE)
    other_day = make_entry(100, "c", MORNING + timedelta(days=1))
    for entry in (a, b, other_day):
        store.add(entry)
    assert store.filter_by_day(date(2024, 1, 1)) == [b, a]
    assert store.filter_by_day(datetime(2024, 1, 2, 23, 59)) == [other_day]
    assert store.filter_by_day(date(2023, 12, 31)) == []


def test_keyword_takes_precedence_over_day(store: EntryStore, make_entry) -> None:
    today = make_entry(250, "tea", MORNING)
    tomorrow = make_entry(500, "Tea again", MORNING + timedelta(days=1))
    store.add(today)
    store.add(tomorrow)
    assert store.filtered("tea", date(2024, 1, 1)) == [tomorrow, today]
    assert store.filtered("", date(2024, 1, 1)) == [today]


def test_subscribers_see_every_mutation(store: EntryStore, make_entry) -> None:
    seen = []
    unsubscribe = store.subscribe(lambda entries: seen.append(len(entries)))
    entry = make_entry(250, "", MORNING)
    store.add(entry)
    store.update(entry.model_copy(update={"note": "x"}))
    store.remove(entry.id)
    unsubscribe()
    store.add(make_entry(100, "", NINE))
    assert seen == [1, 1, 0]


def test_missing_file_loads_empty() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        store = EntryStore(EntryFile(data_dir=Path(tmp)))
        assert store.list() == []


def test_corrupt_file_loads_empty() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        entry_file = EntryFile(data_dir=Path(tmp))
        entry_file.path.write_text("<plist><array><dict>", encoding="utf-8")
        assert entry_file.load() == []
        assert EntryStore(entry_file).list() == []


def test_malformed_date_loads_empty() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        entry_file = EntryFile(data_dir=Path(tmp))
        entry_file.path.write_text(
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<plist version="1.0"><array><dict>'
            "<key>id</key><string>A</string>"
            "<key>date</key><date>garbage</date>"
            "<key>amount</key><real>250</real>"
            "<key>note</key><string></string>"
            "</dict></array></plist>\n",
            encoding="utf-8",
        )
        assert entry_file.load() == []
        assert EntryStore(entry_file).list() == []


def test_invalid_record_discards_whole_file() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        entry_file = EntryFile(data_dir=Path(tmp))
        valid = {"id": "A", "date": datetime(2024, 1, 1, 7, 0), "amount": 200.0, "note": ""}
        with open(entry_file.path, "wb") as f:
            plistlib.dump(
                [valid, {"id": "B", "date": datetime(2024, 1, 1, 7, 0), "amount": "lots", "note": ""}],
                f,
                fmt=plistlib.FMT_XML,
            )
        assert entry_file.load() == []

        with open(entry_file.path, "wb") as f:
            plistlib.dump([valid, "not a record"], f, fmt=plistlib.FMT_XML)
        assert entry_file.load() == []
        assert EntryStore(entry_file).list() == []


def test_file_dates_are_stored_in_utc() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        entry_file = EntryFile(data_dir=Path(tmp))
        utc_moment = datetime(2024, 1, 1, 8, 0)
        with open(entry_file.path, "wb") as f:
            plistlib.dump(
                [{"id": "A", "date": utc_moment, "amount": 250.0, "note": "x"}], f, fmt=plistlib.FMT_XML
            )
        entry = entry_file.load()[0]
        expected = utc_moment.replace(tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        assert entry.timestamp == expected

        assert entry_file.save([entry])
        with open(entry_file.path, "rb") as f:
            raw = plistlib.load(f)
        assert raw[0]["date"] == utc_moment
        assert set(raw[0]) == {"id", "date", "amount", "note"}


def test_write_failure_keeps_memory_list(make_entry) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        blocker = Path(tmp) / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = EntryStore(EntryFile(data_dir=blocker))
        entry = make_entry(250, "morning", MORNING)
        store.add(entry)
        assert store.list() == [entry]
        assert not store.entry_file.exists()

import json
from datetime import datetime, timezone

from surfsensei.feedback import FeedbackStore, record_feedback
from surfsensei.models import FeedbackRecord


def test_missing_file_is_empty_history(tmp_path):
    assert FeedbackStore(tmp_path / "nope.json").all() == []


def test_append_preserves_order(tmp_path):
    store = FeedbackStore(tmp_path / "data" / "feedback.json")
    first = FeedbackRecord(timestamp="1", accuracy="accurate", comments="")
    second = FeedbackRecord(timestamp="2", accuracy="inaccurate", comments="too big")
    third = FeedbackRecord(timestamp="3", accuracy="inaccurate", comments="too big")
    for record in (first, second, third):
        assert store.append(record) is True
    assert store.all() == [first, second, third]


def test_file_format(tmp_path):
    path = tmp_path / "feedback.json"
    store = FeedbackStore(path)
    record_feedback(store, "inaccurate", "onshore", now=datetime(2026, 10, 19, 6, 30, tzinfo=timezone.utc))
    assert json.loads(path.read_text()) == [
        {"timestamp": "2026-10-19T06:30:00+00:00", "accuracy": "inaccurate", "comments": "onshore"}
    ]


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "feedback.json"
    path.write_text("{not json")
    assert FeedbackStore(path).all() == []
    path.write_text('{"accuracy": "accurate"}')
    assert FeedbackStore(path).all() == []


def test_non_object_entries_are_skipped(tmp_path):
    path = tmp_path / "feedback.json"
    path.write_text(json.dumps(["junk", {"timestamp": "1", "accuracy": "inaccurate", "comments": "flat"}]))
    assert FeedbackStore(path).all() == [FeedbackRecord(timestamp="1", accuracy="inaccurate", comments="flat")]


def test_append_to_corrupt_file_degrades_without_raising(tmp_path):
    path = tmp_path / "feedback.json"
    path.write_text("{not json")
    store = FeedbackStore(path)
    assert store.append(FeedbackRecord(timestamp="1", accuracy="accurate")) is False
    assert path.read_text() == "{not json"


def test_unwritable_location_degrades_without_raising(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    store = FeedbackStore(blocker / "feedback.json")
    record = record_feedback(store, "inaccurate", "closed out")
    assert record.comments == "closed out"
    assert store.all() == []

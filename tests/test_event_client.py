"""Tests for the JSONL event client."""

import json

from polyscript.event_client import EventClient


class TestEventClient:
    def test_creates_parent_directory(self, tmp_path):
        log_path = tmp_path / "nested" / "events.jsonl"
        EventClient(log_path)
        assert log_path.parent.is_dir()

    def test_log_event(self, tmp_path):
        client = EventClient(tmp_path / "events.jsonl")

        client.log_event(
            event_type="script.failed",
            correlation_id="run-1",
            status="failed",
            payload={"source": "a.py"},
            error_message="boom",
        )

        lines = (tmp_path / "events.jsonl").read_text().splitlines()
        assert len(lines) == 1
        event = json.loads(lines[0])
        assert event["event_type"] == "script.failed"
        assert event["correlation_id"] == "run-1"
        assert event["payload"] == {"source": "a.py"}
        assert event["error_message"] == "boom"
        assert "timestamp" in event

    def test_optional_fields_omitted(self, tmp_path):
        """Should leave payload and error_message out when not given."""
        client = EventClient(tmp_path / "events.jsonl")
        client.log_event(event_type="run.started", correlation_id="run-1", status="running")

        event = client.read_events()[0]
        assert "payload" not in event
        assert "error_message" not in event

    def test_read_events_by_run(self, tmp_path):
        client = EventClient(tmp_path / "events.jsonl")
        client.log_event(event_type="run.started", correlation_id="run-1", status="running")
        client.log_event(event_type="run.started", correlation_id="run-2", status="running")

        assert len(client.read_events()) == 2
        assert [e["correlation_id"] for e in client.read_events("run-2")] == ["run-2"]

    def test_read_events_missing_file(self, tmp_path):
        client = EventClient(tmp_path / "events.jsonl")
        assert client.read_events() == []

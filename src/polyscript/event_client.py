# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""JSONL event log for polyscript runs.

One line per event:
    {"timestamp": ..., "event_type": "script.completed",
     "correlation_id": <run id>, "status": "succeeded", "payload": {...}}
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class EventClient:
    """Appends run events to a JSONL file."""

    def __init__(self, log_path: Union[str, Path]):
        self.log_path = Path(log_path).expanduser()
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log_event(
        self,
        event_type: str,
        correlation_id: str,
        status: str,
        payload: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
    ) -> None:
        """Append one event."""
        event = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
            "correlation_id": correlation_id,
            "status": status,
        }
        if payload:
            event["payload"] = payload
        if error_message:
            event["error_message"] = error_message

        with open(self.log_path, "a") as f:
            f.write(json.dumps(event, default=str) + "\n")

    def read_events(self, correlation_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Read logged events, optionally only those of one run."""
        if not self.log_path.exists():
            return []
        with open(self.log_path) as f:
            events = [json.loads(line) for line in f if line.strip()]
        if correlation_id is not None:
            events = [e for e in events if e.get("correlation_id") == correlation_id]
        return events

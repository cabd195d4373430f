# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Run schemas for polyscript.

Every script a run touches produces a ScriptOutcome:
- completed: the engine evaluated the script
- skipped: no engine handles the script's extension, the run continues
- failed: the script could not be evaluated, the run stops
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

COMPLETED = "completed"
SKIPPED = "skipped"
FAILED = "failed"

INLINE_SOURCE = "inline"


@dataclass
class ScriptOutcome:
    """Result of executing a single script file or the inline script."""
    source: str  # file path, or "inline"
    engine_key: Optional[str]
    status: str  # "completed", "skipped", "failed"
    error: Optional[str] = None
    cause: Optional[BaseException] = None
    duration_ms: int = 0


@dataclass
class RunRecord:
    """Result of one orchestration run."""
    run_id: str
    success: bool
    started_at: datetime
    completed_at: Optional[datetime] = None
    outcomes: List[ScriptOutcome] = field(default_factory=list)

    def by_status(self, status: str) -> List[ScriptOutcome]:
        return [o for o in self.outcomes if o.status == status]

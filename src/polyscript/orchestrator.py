# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Orchestrator - discover scripts, run each through its engine, then the inline script.

Per-script outcomes drive the run:
- skipped (no engine for the file's extension): warn and continue
- failed (the script could not be read or evaluated): stop the run
- completed: continue

The inline script has no fallback, so any problem resolving or evaluating it
stops the run. Every stop surfaces as one ExecutionFailure carrying the
original cause.
"""

import logging
import time
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

from polyscript.config import ConfigurationError, ExecutionConfig
from polyscript.discovery import FilterSpec, ScriptFile, discover
from polyscript.engines import (
    EngineCache,
    EngineKind,
    EngineNotFoundError,
    EngineRegistry,
    ScriptEngine,
)
from polyscript.event_client import EventClient
from polyscript.schemas import (
    COMPLETED,
    FAILED,
    INLINE_SOURCE,
    SKIPPED,
    RunRecord,
    ScriptOutcome,
)

# Event status per outcome status
_EVENT_STATUS = {COMPLETED: "succeeded", SKIPPED: "skipped", FAILED: "failed"}


class ScriptEvaluationError(Exception):
    """Raised when a script cannot be read or its engine raises during evaluation."""

    def __init__(self, source: str, cause: BaseException):
        self.source = source
        self.cause = cause
        super().__init__(f"Error evaluating {source}: {type(cause).__name__}: {cause}")


class ExecutionFailure(Exception):
    """Raised when a run stops. The original error is kept in ``cause``."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        record: Optional[RunRecord] = None,
    ):
        super().__init__(message)
        self.cause = cause
        self.record = record


class RunState(Enum):
    IDLE = "idle"
    DISCOVERING = "discovering"
    EXECUTING_FILES = "executing_files"
    EXECUTING_INLINE = "executing_inline"
    DONE = "done"
    FAILED = "failed"


def _utcnow() -> datetime:
    """Return current UTC time."""
    return datetime.now(timezone.utc)


class ScriptOrchestrator:
    """Runs the scripts of one configuration, once."""

    def __init__(
        self,
        config: ExecutionConfig,
        cache: Optional[EngineCache] = None,
        registry: Optional[EngineRegistry] = None,
        event_client: Optional[EventClient] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: What to run
            cache: Engine cache for this run (default: a new cache over registry)
            registry: Registry for the default cache (default: built-ins plus plugins)
            event_client: Event log (default: config.event_log, if set)
        """
        self.config = config
        if cache is None:
            cache = EngineCache(
                registry or EngineRegistry(),
                project=config.project,
                pass_project_as_property=config.pass_project_as_property,
                name_of_project_property=config.name_of_project_property,
            )
        self.cache = cache
        if event_client is None and config.event_log:
            event_client = EventClient(config.event_log)
        self.event_client = event_client
        self.state = RunState.IDLE
        self.record: Optional[RunRecord] = None
        self.logger = logging.getLogger(__name__)

    def get_engine(self, key: str) -> Optional[ScriptEngine]:
        """Return the engine cached under key, or None if the run never used it."""
        return self.cache.get(key)

    def execute(self) -> RunRecord:
        """
        Run every discovered script, then the inline script.

        Returns:
            RunRecord with one outcome per script touched

        Raises:
            ExecutionFailure: If discovery fails, a script fails, or the
                inline script cannot be resolved or evaluated
            RuntimeError: If this orchestrator has already run
        """
        if self.state != RunState.IDLE:
            raise RuntimeError("ScriptOrchestrator runs once; create a new one per run")

        project = self.config.project
        roots = project.resolved_script_source_roots()
        self.record = RunRecord(run_id=str(uuid.uuid4()), success=False, started_at=_utcnow())
        self._emit(
            "run.started",
            "running",
            payload={"project": project.name, "roots": [str(r) for r in roots]},
        )

        self.state = RunState.DISCOVERING
        filter_spec = FilterSpec(
            includes=tuple(self.config.includes),
            excludes=tuple(self.config.excludes),
        )
        try:
            scripts = discover(roots, filter_spec)
        except OSError as e:
            raise self._fail(f"Script discovery failed: {e}", e) from e

        self.state = RunState.EXECUTING_FILES
        self.logger.info(f"Found {len(scripts)} script(s) in {len(roots)} root(s)")
        for script_file in scripts:
            outcome = self._execute_file(script_file)
            self._record(outcome)

            if outcome.status == SKIPPED:
                self.logger.warning(f"Skipping {outcome.source}: {outcome.error}")
                continue
            if outcome.status == FAILED:
                raise self._fail(outcome.error, outcome.cause) from outcome.cause

        if self.config.script is not None:
            self.state = RunState.EXECUTING_INLINE
            outcome = self._execute_inline()
            self._record(outcome)
            if outcome.status != COMPLETED:
                raise self._fail(outcome.error, outcome.cause) from outcome.cause

        self.state = RunState.DONE
        self.record.success = True
        self.record.completed_at = _utcnow()
        self._emit(
            "run.completed",
            "succeeded",
            payload={
                "completed": len(self.record.by_status(COMPLETED)),
                "skipped": len(self.record.by_status(SKIPPED)),
            },
        )
        return self.record

    def _execute_file(self, script_file: ScriptFile) -> ScriptOutcome:
        key = script_file.extension
        source = str(script_file.path)
        try:
            engine = self.cache.get_or_create(key, EngineKind.EXTENSION)
        except EngineNotFoundError as e:
            return ScriptOutcome(source=source, engine_key=key, status=SKIPPED, error=str(e), cause=e)

        return self._evaluate(
            engine, key, source, lambda: script_file.path.read_text(encoding="utf-8")
        )

    def _execute_inline(self) -> ScriptOutcome:
        declared = self.config.inline_engine()
        if declared is None:
            error = ConfigurationError(
                "An inline script requires one of language|extension|mime_type"
            )
            return ScriptOutcome(
                source=INLINE_SOURCE, engine_key=None, status=FAILED, error=str(error), cause=error
            )

        key, kind = declared
        try:
            engine = self.cache.get_or_create(key, kind)
        except EngineNotFoundError as e:
            return ScriptOutcome(
                source=INLINE_SOURCE, engine_key=key, status=FAILED, error=str(e), cause=e
            )

        script = self.config.script
        return self._evaluate(engine, key, INLINE_SOURCE, lambda: script)

    def _evaluate(
        self,
        engine: ScriptEngine,
        key: str,
        source: str,
        load: Callable[[], str],
    ) -> ScriptOutcome:
        """Load and evaluate one script, turning any error into a failed outcome."""
        self.logger.info(f"Executing {source} with {engine!r}")
        start = time.monotonic()
        try:
            engine.eval(load(), filename=source)
        # A script calling sys.exit() fails the run like any other error;
        # KeyboardInterrupt still propagates
        except (Exception, SystemExit) as e:
            error = ScriptEvaluationError(source, e)
            return ScriptOutcome(
                source=source,
                engine_key=key,
                status=FAILED,
                error=str(error),
                cause=error,
                duration_ms=int((time.monotonic() - start) * 1000),
            )

        return ScriptOutcome(
            source=source,
            engine_key=key,
            status=COMPLETED,
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    def _record(self, outcome: ScriptOutcome) -> None:
        self.record.outcomes.append(outcome)
        payload = {"source": outcome.source, "engine_key": outcome.engine_key}
        if outcome.status == COMPLETED:
            payload["duration_ms"] = outcome.duration_ms
        self._emit(
            f"script.{outcome.status}",
            _EVENT_STATUS[outcome.status],
            payload=payload,
            error_message=outcome.error,
        )

    def _fail(self, message: str, cause: Optional[BaseException]) -> ExecutionFailure:
        """Mark the run failed and build the failure to raise."""
        self.state = RunState.FAILED
        self.record.completed_at = _utcnow()
        self.logger.error(f"Script execution failed: {message}")
        self._emit("run.failed", "failed", error_message=message)
        return ExecutionFailure(message, cause=cause, record=self.record)

    def _emit(
        self,
        event_type: str,
        status: str,
        payload: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
    ) -> None:
        if self.event_client is None:
            return
        self.event_client.log_event(
            event_type=event_type,
            correlation_id=self.record.run_id,
            status=status,
            payload=payload,
            error_message=error_message,
        )


def execute(config: ExecutionConfig, **kwargs: Any) -> RunRecord:
    """Run a configuration with a fresh orchestrator. See ScriptOrchestrator.execute()."""
    return ScriptOrchestrator(config, **kwargs).execute()

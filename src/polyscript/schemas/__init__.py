# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Polyscript run schemas."""

from polyscript.schemas.run import (
    COMPLETED,
    FAILED,
    INLINE_SOURCE,
    SKIPPED,
    RunRecord,
    ScriptOutcome,
)

__all__ = [
    "ScriptOutcome",
    "RunRecord",
    "COMPLETED",
    "SKIPPED",
    "FAILED",
    "INLINE_SOURCE",
]

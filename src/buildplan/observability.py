"""Structured logging for resolution passes.

Each pass opened with :meth:`StructuredLogger.begin_pass` gets a sequential
identifier, so records from a multi-system run can be regrouped per pass
without relying on wall-clock timestamps.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class StructuredLogger:
    records: list[dict[str, Any]] = field(default_factory=list)
    passes: list[str] = field(default_factory=list)

    def begin_pass(self, system: str | None) -> str:
        pass_id = f"{len(self.passes) + 1:03d}:{system or 'shared'}"
        self.passes.append(pass_id)
        return pass_id

    def log(
        self,
        *,
        operation: str,
        system: str | None,
        phase: str | None,
        message: str,
        pass_id: str | None = None,
        level: str = "info",
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "system": system,
            "phase": phase,
            "pass": pass_id,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)

    def records_for_system(self, system: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("system") == system]

    def records_for_phase(self, phase: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("phase") == phase]

    def records_for_pass(self, pass_id: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("pass") == pass_id]

    def failures(self) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("level") == "error"]

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path

"""Structured records of what was sent to cmake and how it ended.

One record per step: the workspace logs each generate/build/run command it
hands to the session, the session logs terminal lifecycle and the exit code
each command finished with.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class StructuredLogger:
    records: list[dict[str, Any]] = field(default_factory=list)
    echo: bool = False

    def log(
        self,
        *,
        operation: str,
        target: str | None,
        config: str | None,
        command: str | None,
        message: str,
        level: str = "info",
        exit_code: int | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "target": target,
            "config": config,
            "command": command,
            "exit_code": exit_code,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)
        if self.echo:
            subject = f"{operation} {target}" if target else operation
            print(f"[{level}] {subject}: {message}", file=sys.stderr)

    def records_for_target(self, target: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("target") == target]

    def records_for_operation(self, operation: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("operation") == operation]

    def failed_commands(self) -> list[str]:
        """Commands that finished with a non-zero exit code, in order."""
        return [
            record["command"]
            for record in self.records
            if record.get("exit_code") not in (None, 0) and record.get("command")
        ]

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path

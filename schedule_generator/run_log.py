import datetime
import json
from typing import Any, Dict, List, Optional

from .constants import PHASE_INIT


def _now() -> str:
    return datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class RunLog:
    """
    Diagnostic trace of one generation run.

    A fresh RunLog is created for every call to generate_schedule() and handed
    to each stage, so two runs never share entries. Every entry is a
    timestamped message tagged with the phase that was current when it was
    written, plus an optional data payload.

    Attributes:
        entries (list): every message, in order
        warnings (list): entries logged through warning()
        errors (list): entries logged through error()
        attempts (list): one record per credit-target build attempt
        stats (dict): running counters
        phase (str): the phase currently executing
    """

    def __init__(self, echo: bool = False):
        self.echo = echo
        self.phase = PHASE_INIT
        self.entries: List[dict] = []
        self.warnings: List[dict] = []
        self.errors: List[dict] = []
        self.attempts: List[dict] = []
        self.stats: Dict[str, int] = {
            "attempt_count": 0,
            "courses_tried": 0,
            "labs_added": 0,
            "time_conflicts": 0,
        }

    def _write(self, level: str, message: str, data: Optional[Any]) -> dict:
        entry = {"timestamp": _now(), "level": level, "phase": self.phase, "message": message}
        if data is not None:
            entry["data"] = data
        self.entries.append(entry)
        if self.echo:
            print(self.format_entry(entry))
        return entry

    def set_phase(self, phase: str, data: Optional[Any] = None) -> None:
        self.phase = phase
        self._write("PHASE", f"[{phase}]", data)

    def debug(self, message: str, data: Optional[Any] = None) -> None:
        self._write("DEBUG", message, data)

    def info(self, message: str, data: Optional[Any] = None) -> None:
        self._write("INFO", message, data)

    def warning(self, message: str, data: Optional[Any] = None) -> None:
        self.warnings.append(self._write("WARNING", message, data))

    def error(self, message: str, data: Optional[Any] = None) -> None:
        self.errors.append(self._write("ERROR", message, data))

    def count(self, key: str, amount: int = 1) -> None:
        self.stats[key] = self.stats.get(key, 0) + amount

    def record_attempt(self, target_credits: int, outcome: str, reasons: List[str], **extra) -> None:
        """Keep why a credit target succeeded or was abandoned."""
        attempt = {"targetCredits": target_credits, "outcome": outcome, "reasons": list(reasons)}
        attempt.update(extra)
        self.attempts.append(attempt)
        self.count("attempt_count")
        self.info(f"Attempt for {target_credits} credits: {outcome}", attempt)

    def summary(self) -> dict:
        """The diagnostics document returned alongside a failed or finished run."""
        return {
            "currentPhase": self.phase,
            "stats": dict(self.stats),
            "warnings": list(self.warnings),
            "errors": list(self.errors),
            "attempts": list(self.attempts),
        }

    @staticmethod
    def format_entry(entry: dict) -> str:
        line = f"[{entry['timestamp']}] {entry['level']} {entry['phase']} - {entry['message']}"
        if "data" in entry:
            line += f"\n{json.dumps(entry['data'], indent=2, default=str)}"
        return line

    def save(self, filepath: str = "schedule_debug.txt") -> None:
        """Write the whole trace to a text file."""
        with open(filepath, "w", encoding="utf-8") as f:
            for entry in self.entries:
                f.write(self.format_entry(entry) + "\n" + "=" * 80 + "\n")
        print(f"Debug log saved to {filepath}")

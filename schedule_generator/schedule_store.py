"""
In-memory schedule lifecycle.

    generated --accept--> accepted   (every other generated/accepted
                                      schedule of the student -> inactive)
    generated --reject--> rejected

Records are frozen and keep the courses as a tuple; a status change stores
a new record in place of the old one, so a schedule's courses never change
after it is recorded. All mutations for one student run under that
student's lock.
"""

import datetime
import itertools
import json
import threading
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from .constants import ScheduleStatus
from .errors import ScheduleStateError
from .models import Schedule, ScheduledCourse

ACTIVE_STATUSES = (ScheduleStatus.GENERATED, ScheduleStatus.ACCEPTED)


@dataclass(frozen=True)
class StoredSchedule:
    schedule_id: int
    student_id: str
    semester: str
    courses: Tuple[ScheduledCourse, ...]
    status: ScheduleStatus
    created_at: str
    decided_at: Optional[str] = None

    @property
    def schedule(self) -> Schedule:
        """A fresh copy; changing it never touches the stored record."""
        return Schedule(courses=list(self.courses), student_id=self.student_id,
                        semester=self.semester, status=self.status)

    def as_dict(self):
        doc = self.schedule.as_dict()
        doc.update({
            "scheduleId": self.schedule_id,
            "status": self.status.value,
            "createdAt": self.created_at,
            "decidedAt": self.decided_at,
        })
        return doc


def _now() -> str:
    return datetime.datetime.now().isoformat(timespec="seconds")


class ScheduleStore:
    def __init__(self):
        self._records: Dict[str, List[StoredSchedule]] = {}
        # One lock per student id seen, kept for the life of the store
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._ids = itertools.count(1)

    def lock_for(self, student_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(student_id, threading.Lock())

    def record_generated(self, schedule: Schedule) -> StoredSchedule:
        """Store a copy of a freshly generated schedule with status 'generated'."""
        if not schedule.student_id:
            raise ScheduleStateError("Cannot store a schedule without a student id")
        with self.lock_for(schedule.student_id):
            record = StoredSchedule(
                schedule_id=next(self._ids),
                student_id=schedule.student_id,
                semester=schedule.semester,
                courses=tuple(schedule.courses),
                status=ScheduleStatus.GENERATED,
                created_at=_now(),
            )
            self._records.setdefault(schedule.student_id, []).append(record)
            return record

    def _latest(self, student_id: str, statuses) -> Optional[int]:
        records = self._records.get(student_id, [])
        for pos in range(len(records) - 1, -1, -1):
            if records[pos].status in statuses:
                return pos
        return None

    def _set_status(self, student_id: str, pos: int, status: ScheduleStatus, decided: bool) -> StoredSchedule:
        old = self._records[student_id][pos]
        new = replace(
            old,
            status=status,
            decided_at=_now() if decided else old.decided_at,
        )
        self._records[student_id][pos] = new
        return new

    def accept(self, student_id: str) -> StoredSchedule:
        with self.lock_for(student_id):
            pos = self._latest(student_id, (ScheduleStatus.GENERATED,))
            if pos is None:
                raise ScheduleStateError("No generated schedule found to accept")
            accepted = self._set_status(student_id, pos, ScheduleStatus.ACCEPTED, decided=True)
            for other, record in enumerate(self._records[student_id]):
                if other != pos and record.status in ACTIVE_STATUSES:
                    self._set_status(student_id, other, ScheduleStatus.INACTIVE, decided=False)
            return accepted

    def reject(self, student_id: str) -> StoredSchedule:
        with self.lock_for(student_id):
            pos = self._latest(student_id, (ScheduleStatus.GENERATED,))
            if pos is None:
                raise ScheduleStateError("No generated schedule found to reject")
            return self._set_status(student_id, pos, ScheduleStatus.REJECTED, decided=True)

    def current(self, student_id: str) -> Optional[StoredSchedule]:
        """Most recent generated or accepted schedule, if any."""
        with self.lock_for(student_id):
            pos = self._latest(student_id, ACTIVE_STATUSES)
            return None if pos is None else self._records[student_id][pos]

    def history(self, student_id: str) -> List[StoredSchedule]:
        with self.lock_for(student_id):
            return list(self._records.get(student_id, []))

    def save(self, filepath: str = "schedules.json") -> None:
        with self._locks_guard:
            students = list(self._records)
        document = {sid: [r.as_dict() for r in self.history(sid)] for sid in students}
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
        print(f"Schedules saved to {filepath}")

"""Daily schedule editor.

A schedule is the ordered list of time blocks stored on a childcare log. Rows
keep their display label in sync with their time range: the label is always
the base label, plus `` (start ~ end)`` when both times are set. Fixed rows
come from the class template; they can be edited in place but never deleted
or moved.
"""

from typing import Any, Iterable

from daycare.exceptions import ValidationError
from daycare.schemas.childcare_logs import EXECUTION_VALUES, ScheduleItem
from daycare.utils.dates import is_valid_time

DEFAULT_INDOOR_ACTIVITY = "실내놀이 활동 (활동계획에서 불러오기)"

# (label, start, end, activity)
DEFAULT_TEMPLATE: tuple[tuple[str, str, str, str], ...] = (
    ("등원 및 통합보육", "09:00", "10:00", "자유 놀이"),
    ("오전간식", "10:00", "10:30", "간식"),
    ("오전 실내놀이", "10:30", "11:30", DEFAULT_INDOOR_ACTIVITY),
    ("활동", "11:30", "12:00", "주요 활동"),
    ("점심식사", "12:00", "12:30", "식사"),
    ("낮잠 및 휴식", "13:00", "14:00", "휴식"),
    ("바깥놀이(대체)", "14:00", "14:30", "야외 활동"),
    ("오후놀이", "14:30", "15:30", "자유 놀이"),
    ("오후간식", "15:30", "16:00", "간식"),
    ("귀가 및 통합보육", "16:00", "17:00", "귀가"),
)


class FixedRowLockedError(ValidationError):
    def __init__(self, index: int, action: str):
        super().__init__(
            f"Row {index} is a fixed template row and cannot be {action}",
            "FIXED_ROW_LOCKED",
        )


def base_label(label: str) -> str:
    """Strip any embedded ``(start ~ end)`` suffix."""
    return (label or "").split(" (")[0]


def compose_label(label: str, start: str, end: str) -> str:
    base = base_label(label)
    if start and end:
        return f"{base} ({start} ~ {end})"
    return base


class ScheduleEditor:
    """Mutable ordered list of schedule rows with the label/time invariants."""

    def __init__(self, rows: Iterable[ScheduleItem] = ()):
        self._rows = [row.model_copy() for row in rows]

    @classmethod
    def from_template(cls, overrides: list[dict] | None = None) -> "ScheduleEditor":
        """Build the default ten-row day, applying a class's saved fixed rows.

        An override replaces the label, times and activity of the default row
        whose label starts with the override's label.
        """
        rows = []
        for label, start, end, activity in DEFAULT_TEMPLATE:
            for override in overrides or []:
                saved_label = override.get("label") or ""
                if saved_label and label.startswith(saved_label):
                    label = saved_label
                    start = override.get("startTime") or start
                    end = override.get("endTime") or end
                    activity = override.get("activity") or activity
                    break
            rows.append(
                ScheduleItem(
                    time=compose_label(label, start, end),
                    start_time=start,
                    end_time=end,
                    activity=activity,
                    execution="",
                    fixed=True,
                )
            )
        return cls(rows)

    @property
    def rows(self) -> list[ScheduleItem]:
        return [row.model_copy() for row in self._rows]

    def __len__(self) -> int:
        return len(self._rows)

    def _row(self, index: int) -> ScheduleItem:
        if not isinstance(index, int) or not 0 <= index < len(self._rows):
            raise ValidationError(f"Row index {index} is out of range", "INVALID_ROW_INDEX")
        return self._rows[index]

    def _relabel(self, index: int) -> None:
        row = self._rows[index]
        row.time = compose_label(row.time, row.start_time, row.end_time)

    def add_row(self) -> int:
        self._rows.append(ScheduleItem())
        return len(self._rows) - 1

    def delete_row(self, index: int) -> None:
        if self._row(index).fixed:
            raise FixedRowLockedError(index, "deleted")
        del self._rows[index]

    def _swap(self, index: int, other: int) -> None:
        if self._row(index).fixed:
            raise FixedRowLockedError(index, "moved")
        if self._rows[other].fixed:
            raise FixedRowLockedError(other, "moved")
        self._rows[index], self._rows[other] = self._rows[other], self._rows[index]

    def move_up(self, index: int) -> None:
        self._row(index)
        if index == 0:
            return
        self._swap(index, index - 1)

    def move_down(self, index: int) -> None:
        self._row(index)
        if index == len(self._rows) - 1:
            return
        self._swap(index, index + 1)

    def set_start_time(self, index: int, value: str) -> None:
        _check_time(value)
        self._row(index).start_time = value
        self._relabel(index)

    def set_end_time(self, index: int, value: str) -> None:
        """Set the end time and carry it to the next row's start, one row only."""
        _check_time(value)
        self._row(index).end_time = value
        self._relabel(index)
        if index + 1 < len(self._rows):
            self._rows[index + 1].start_time = value
            self._relabel(index + 1)

    def set_label(self, index: int, value: str) -> None:
        row = self._row(index)
        row.time = compose_label(value, row.start_time, row.end_time)

    def set_activity(self, index: int, value: str) -> None:
        self._row(index).activity = value

    def set_execution(self, index: int, value: str) -> None:
        if value not in EXECUTION_VALUES:
            raise ValidationError(
                "execution must be one of o, x, 확장, 축소, 대체", "INVALID_EXECUTION"
            )
        self._row(index).execution = value

    def toggle_fixed(self, index: int) -> None:
        row = self._row(index)
        row.fixed = not row.fixed
        if row.fixed:
            self._relabel(index)

    def normalize_labels(self) -> None:
        for index in range(len(self._rows)):
            self._relabel(index)

    def fixed_snapshot(self) -> list[dict]:
        """Fixed rows in template form, as stored per class."""
        return [
            {
                "label": base_label(row.time),
                "startTime": row.start_time,
                "endTime": row.end_time,
                "activity": row.activity,
            }
            for row in self._rows
            if row.fixed and row.time
        ]

    def apply(self, op: str, index: int | None = None, value: Any = None) -> None:
        """Dispatch one named edit operation."""
        if op == "add_row":
            self.add_row()
            return
        handler = _INDEX_OPERATIONS.get(op)
        if handler is None:
            raise ValidationError(f"Unknown schedule operation: {op}", "INVALID_OPERATION")
        if index is None:
            raise ValidationError(f"Operation {op} requires an index", "INVALID_ROW_INDEX")
        if op in _VALUE_OPERATIONS:
            if not isinstance(value, str):
                raise ValidationError(f"Operation {op} requires a string value", "INVALID_OPERATION")
            handler(self, index, value)
        else:
            handler(self, index)


def _check_time(value: str) -> None:
    if value and not is_valid_time(value):
        raise ValidationError("Time must be in HH:MM format", "INVALID_TIME_FORMAT")


_INDEX_OPERATIONS = {
    "delete_row": ScheduleEditor.delete_row,
    "move_up": ScheduleEditor.move_up,
    "move_down": ScheduleEditor.move_down,
    "toggle_fixed": ScheduleEditor.toggle_fixed,
    "set_start_time": ScheduleEditor.set_start_time,
    "set_end_time": ScheduleEditor.set_end_time,
    "set_label": ScheduleEditor.set_label,
    "set_activity": ScheduleEditor.set_activity,
    "set_execution": ScheduleEditor.set_execution,
}
_VALUE_OPERATIONS = {
    "set_start_time",
    "set_end_time",
    "set_label",
    "set_activity",
    "set_execution",
}

"""Pomodoro interval sequencing."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from itertools import islice
from typing import Iterable, Iterator, List

from .config import ResolvedConfig


class IntervalKind(str, Enum):
    POMODORO = "pomodoro"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


NAMES = {
    IntervalKind.POMODORO: "Pomodoro",
    IntervalKind.SHORT_BREAK: "Short break",
    IntervalKind.LONG_BREAK: "Long break",
}

START_PROMPTS = {
    IntervalKind.POMODORO: "Ready to start a pomodoro?",
    IntervalKind.SHORT_BREAK: "Start a short break?",
    IntervalKind.LONG_BREAK: "Start a long break?",
}

NOTIFICATION_BODIES = {
    IntervalKind.POMODORO: "Take a break",
    IntervalKind.SHORT_BREAK: "Ready for another pomodoro?",
    IntervalKind.LONG_BREAK: "Ready for another pomodoro?",
}


@dataclass(frozen=True)
class Interval:
    """Represents one focus or break interval."""

    kind: IntervalKind
    minutes: int

    @classmethod
    def pomodoro(cls, minutes: int) -> Interval:
        return cls(IntervalKind.POMODORO, minutes)

    @classmethod
    def short_break(cls, minutes: int) -> Interval:
        return cls(IntervalKind.SHORT_BREAK, minutes)

    @classmethod
    def long_break(cls, minutes: int) -> Interval:
        return cls(IntervalKind.LONG_BREAK, minutes)

    @property
    def duration_seconds(self) -> int:
        return self.minutes * 60

    @property
    def name(self) -> str:
        return NAMES[self.kind]

    @property
    def start_prompt(self) -> str:
        return START_PROMPTS[self.kind]

    @property
    def notification_title(self) -> str:
        return f"{self.name} finished"

    @property
    def notification_body(self) -> str:
        return NOTIFICATION_BODIES[self.kind]


class EventSequencer(Iterator[Interval]):
    """Endless stream of intervals following the Pomodoro cadence.

    One cycle is ``repetition`` pomodoro/break pairs where the last break is a
    long one. The stream never ends; the caller decides when to stop. A new
    sequencer built from the same config yields the same intervals.
    """

    def __init__(self, config: ResolvedConfig) -> None:
        self._pomodoro = config.duration_pomodoro
        self._short_break = config.duration_short_break
        self._long_break = config.duration_long_break
        self._repetition = config.repetition
        self._count = 0

    @property
    def count(self) -> int:
        """Number of intervals produced so far."""
        return self._count

    def __iter__(self) -> EventSequencer:
        return self

    def __next__(self) -> Interval:
        cycle_length = 2 * self._repetition
        if self._count % cycle_length == cycle_length - 1:
            interval = Interval.long_break(self._long_break)
        elif self._count % 2 == 1:
            interval = Interval.short_break(self._short_break)
        else:
            interval = Interval.pomodoro(self._pomodoro)
        self._count += 1
        return interval


def preview(config: ResolvedConfig, count: int) -> List[Interval]:
    """Return the first ``count`` intervals a fresh sequencer would produce."""
    return list(islice(EventSequencer(config), count))


def count_pomodoros(intervals: Iterable[Interval]) -> int:
    return sum(1 for interval in intervals if interval.kind is IntervalKind.POMODORO)


def format_pomodoro_count(intervals_run: int) -> str:
    """Describe how much work was done for the closing summary.

    ``intervals_run`` is the number of intervals that were run, breaks
    included. Pomodoros always sit at even positions of the stream, so
    ``(intervals_run + 1) // 2`` of them were focus sessions.
    """
    if intervals_run == 0:
        return "nothing"
    if intervals_run < 3:
        return "1 pomodoro"
    return f"{(intervals_run + 1) // 2} pomodoros"

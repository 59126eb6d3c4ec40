"""
Slot selection rules for a booking session.

A selection is always at most one contiguous run of hourly slots: each slot
starts exactly where the previous one ends.
"""

from typing import NamedTuple
from datetime import time


class SlotWindow(NamedTuple):
    start_time: time
    end_time: time


def slot_key(slot) -> tuple:
    return (slot.start_time, slot.end_time)


def contiguous_run(slots) -> list:
    """
    Sort by start time and keep the chain from the earliest slot up to the
    first gap. Duplicate windows collapse to one.
    """
    unique = {}
    for s in slots:
        unique.setdefault(slot_key(s), s)

    ordered = sorted(unique.values(), key=lambda s: s.start_time)
    if not ordered:
        return []

    run = [ordered[0]]
    for current in ordered[1:]:
        if run[-1].end_time == current.start_time:
            run.append(current)
        else:
            break
    return run


def is_contiguous(slots) -> bool:
    return len(contiguous_run(slots)) == len(slots)


class SlotSelection:
    """In-memory selection state; toggle() keeps it a single run."""

    def __init__(self, selected=None):
        self.selected = list(selected or [])

    def __contains__(self, slot):
        return slot_key(slot) in {slot_key(s) for s in self.selected}

    def __len__(self):
        return len(self.selected)

    def toggle(self, slot) -> list:
        key = slot_key(slot)

        if slot in self:
            remainder = [s for s in self.selected if slot_key(s) != key]
            self.selected = contiguous_run(remainder)
            return self.selected

        candidate = self.selected + [slot]
        run = contiguous_run(candidate)

        # the new slot broke contiguity: start again from it
        if len(run) < len(candidate):
            self.selected = [slot]
        else:
            self.selected = run
        return self.selected

    def clear(self):
        self.selected = []

    @property
    def start_time(self):
        return self.selected[0].start_time if self.selected else None

    @property
    def end_time(self):
        return self.selected[-1].end_time if self.selected else None

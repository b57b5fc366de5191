from __future__ import annotations


class FakeClock:
    """Manually advanced nanosecond clock for deterministic timer tests."""

    def __init__(self, start: int = 0) -> None:
        self.now = start
        self.reads = 0

    def __call__(self) -> int:
        self.reads += 1
        return self.now

    def advance_ms(self, millis: float) -> None:
        self.now += int(millis * 1_000_000)


def sort_in_place(values: list[int]) -> None:
    values.sort()


def clone(values: list[int]) -> list[int]:
    return list(values)


def check_sorted(values: list[int]) -> None:
    if values != sorted(values):
        raise AssertionError(f"not sorted: {values}")


def reverse_in_place(values: list[int]) -> None:
    values.reverse()


NOT_CALLABLE = 42

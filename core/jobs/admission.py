from __future__ import annotations

DEFAULT_ADMISSION_RATIO = 0.75


def admit(current_depth: int, capacity: int, ratio: float = DEFAULT_ADMISSION_RATIO) -> bool:
    """Return True while the sampled queue depth is within ``ratio * capacity``.

    The depth is sampled, not reserved: concurrent callers may all be admitted
    and jointly overshoot the threshold. The queue itself blocks beyond its
    hard capacity.
    """
    return current_depth <= ratio * capacity

# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Wall clock helpers."""

import time
from collections.abc import Callable

# Returns the current time as epoch milliseconds
Clock = Callable[[], int]

MILLIS_PER_HOUR = 60 * 60 * 1000


def current_millis() -> int:
    """Return the current wall clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000

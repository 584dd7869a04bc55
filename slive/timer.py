"""
timer.py: Monotonic millisecond clock.
"""

import time

def now():
    """
    Current monotonic time in milliseconds.
    """
    return int(time.monotonic() * 1000)

def elapsed(start_time):
    """
    Milliseconds since ``start_time`` (a value returned by ``now``).
    """
    return max(0, now() - start_time)

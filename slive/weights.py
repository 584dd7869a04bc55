"""
weights.py: Time-varying weight curves used for operation selection.

A curve maps the elapsed fraction of the run (0.0 at start, 1.0 at the
configured duration) to a non-negative weight.
"""

from sortedcontainers import SortedList

import slive.param as param

class Weight(object):
    """
    Abstract class. Subclass of ``Weight`` should implement ``weight``.
    """
    def weight(self, fraction):
        raise NotImplementedError


class ConstantWeight(Weight):
    def __init__(self, value=1.0):
        if value < 0:
            raise ValueError("Weight must be non-negative, got {}".format(value))
        self._value = float(value)

    def weight(self, fraction):
        return self._value

    def __repr__(self):
        return "ConstantWeight({})".format(self._value)


class PiecewiseLinearWeight(Weight):
    """
    Linear interpolation between ``(fraction, weight)`` breakpoints.
    Fractions before the first breakpoint take the first weight,
    fractions after the last take the last weight.
    """
    def __init__(self, points):
        self._points = SortedList()
        for fraction, weight in points:
            if not 0.0 <= fraction <= 1.0:
                raise ValueError("Breakpoint fraction {} outside [0, 1]".format(fraction))
            if weight < 0:
                raise ValueError("Weight must be non-negative, got {}".format(weight))
            self._points.add((float(fraction), float(weight)))
        if len(self._points) == 0:
            raise ValueError("Piecewise weight needs at least one breakpoint")

    def weight(self, fraction):
        idx = self._points.bisect_right((fraction, float('inf')))
        if idx == 0:
            return self._points[0][1]
        if idx == len(self._points):
            return self._points[-1][1]
        x0, y0 = self._points[idx - 1]
        x1, y1 = self._points[idx]
        if x1 == x0:
            return y1
        return y0 + (y1 - y0) * (fraction - x0) / (x1 - x0)

    def __repr__(self):
        return "PiecewiseLinearWeight({})".format(list(self._points))


FLOOR = param.DISTRIBUTION_FLOOR
DISTRIBUTIONS = {
    'uniform': lambda: ConstantWeight(1.0),
    'beg': lambda: PiecewiseLinearWeight([(0.0, 1.0), (1.0, FLOOR)]),
    'end': lambda: PiecewiseLinearWeight([(0.0, FLOOR), (1.0, 1.0)]),
    'mid': lambda: PiecewiseLinearWeight([(0.0, FLOOR), (0.5, 1.0), (1.0, FLOOR)]),
}

def distribution(name):
    """
    Build the named curve: uniform, beg, mid or end.
    """
    try:
        return DISTRIBUTIONS[name.lower()]()
    except KeyError:
        raise ValueError("Unknown distribution '{}', expected one of {}".format(
            name, ", ".join(sorted(DISTRIBUTIONS)))) from None

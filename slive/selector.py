"""
selector.py: Weighted, time-varying choice of the next operation.
"""

import bisect
import itertools

from slive.operations.factory import OperationFactory

class WeightSelector(object):
    """
    Chooses operations with probability proportional to their current
    weight. An operation that reached its ``max_count`` is never chosen
    again. ``select`` returns ``None`` once no operation has any weight
    left.
    """
    def __init__(self, config, rnd, factory=None):
        self._specs = list(config.operations)
        self._rnd = rnd
        self._factory = factory if factory is not None else OperationFactory(config, rnd)
        self._invocations = dict((spec.kind, 0) for spec in self._specs)

    def invocations(self, kind):
        return self._invocations.get(kind, 0)

    def _exhausted(self, spec):
        return spec.max_count is not None and self._invocations[spec.kind] >= spec.max_count

    def current_weights(self, elapsed, duration):
        """
        Returns a list of (spec, weight) for every operation that may
        still be selected at ``elapsed`` milliseconds into the run.
        """
        if elapsed < 0 or duration < 0:
            raise ValueError("Elapsed and duration must be >= 0 (got {}, {})".format(elapsed, duration))
        fraction = 1.0 if duration == 0 else min(1.0, elapsed / duration)
        weights = []
        for spec in self._specs:
            if self._exhausted(spec):
                continue
            weight = spec.current_weight(fraction)
            if weight > 0:
                weights.append((spec, weight))
        return weights

    def select(self, elapsed, duration):
        weights = self.current_weights(elapsed, duration)
        if not weights:
            return None
        cumulative = list(itertools.accumulate(weight for _, weight in weights))
        pick = self._rnd.random() * cumulative[-1]
        idx = min(bisect.bisect_right(cumulative, pick), len(weights) - 1)
        spec = weights[idx][0]
        self._invocations[spec.kind] += 1
        return self._factory.get(spec.kind)

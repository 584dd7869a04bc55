"""
reducer.py: Merges key/value pairs emitted by any number of workers.
"""

from slive.output import OperationOutput

class Reducer(object):
    """
    Folds pairs into one ``OperationOutput`` per key. Merging is
    commutative and associative, so pairs may arrive in any order and
    from any worker.
    """
    def __init__(self):
        self._merged = {}

    def add(self, key, value):
        out = OperationOutput.parse(key, value)
        current = self._merged.get(key)
        self._merged[key] = out if current is None else current + out

    def add_all(self, pairs):
        for key, value in pairs:
            self.add(key, value)

    def outputs(self):
        return [self._merged[key] for key in sorted(self._merged)]


def reduce_pairs(pairs):
    reducer = Reducer()
    reducer.add_all(pairs)
    return reducer.outputs()

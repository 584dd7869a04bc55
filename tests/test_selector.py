"""
test_selector.py: Unit tests for the weighted operation selector.
"""

import random
import unittest

from slive.config import ConfigExtractor
from slive.operation import Kind
from slive.selector import WeightSelector

def make_config(operations, **options):
    options['operations'] = operations
    return ConfigExtractor(options).extract()


class BasicTest(unittest.TestCase):
    def test_no_operations(self):
        selector = WeightSelector(make_config({}), random.Random(1))
        self.assertIsNone(selector.select(0, 1000))

    def test_zero_weight(self):
        selector = WeightSelector(make_config({'create': {'percent': 0}}), random.Random(1))
        self.assertIsNone(selector.select(0, 1000))

    def test_proportional(self):
        config = make_config({'create': {'percent': 90}, 'delete': {'percent': 10}})
        selector = WeightSelector(config, random.Random(7))
        counts = {Kind.CREATE: 0, Kind.DELETE: 0}
        for i in range(2000):
            counts[selector.select(i, 2000).kind] += 1
        self.assertGreater(counts[Kind.DELETE], 0)
        self.assertGreater(counts[Kind.CREATE], 5 * counts[Kind.DELETE])
        self.assertEqual(selector.invocations(Kind.CREATE), counts[Kind.CREATE])

    def test_reuses_operations(self):
        selector = WeightSelector(make_config({'mkdir': {}}), random.Random(1))
        self.assertIs(selector.select(0, 100), selector.select(1, 100))

    def test_negative_elapsed(self):
        selector = WeightSelector(make_config({'create': {}}), random.Random(1))
        with self.assertRaises(ValueError):
            selector.select(-1, 100)


class MaxCountTest(unittest.TestCase):
    def test_exhaustion(self):
        config = make_config({'create': {'max_count': 3}})
        selector = WeightSelector(config, random.Random(3))
        for _ in range(3):
            self.assertEqual(selector.select(0, 1000).kind, Kind.CREATE)
        self.assertIsNone(selector.select(10, 1000))
        self.assertIsNone(selector.select(999, 1000))

    def test_exhausted_kind_never_returns(self):
        config = make_config({'create': {'max_count': 2}, 'read': {}})
        selector = WeightSelector(config, random.Random(11))
        kinds = [selector.select(i, 500).kind for i in range(500)]
        self.assertEqual(kinds.count(Kind.CREATE), 2)
        self.assertEqual(kinds.count(Kind.READ), 498)

    def test_total_ops(self):
        config = make_config({'create': {'percent': 50}, 'delete': {'percent': 50}}, ops=10)
        selector = WeightSelector(config, random.Random(5))
        selected = 0
        while selector.select(0, 1000) is not None:
            selected += 1
        self.assertEqual(selected, 10)
        self.assertEqual(selector.invocations(Kind.CREATE), 5)
        self.assertEqual(selector.invocations(Kind.DELETE), 5)


class TimeVaryingTest(unittest.TestCase):
    def setUp(self):
        config = make_config({'create': {'curve': [[0, 1], [1, 0]]},
                              'delete': {'curve': [[0, 0], [1, 1]]}})
        self.selector = WeightSelector(config, random.Random(2))

    def test_start_and_end(self):
        for _ in range(50):
            self.assertEqual(self.selector.select(0, 1000).kind, Kind.CREATE)
        for _ in range(50):
            self.assertEqual(self.selector.select(1000, 1000).kind, Kind.DELETE)
        # Past the duration the curves stay at their final weight
        self.assertEqual(self.selector.select(5000, 1000).kind, Kind.DELETE)

    def test_zero_duration(self):
        self.assertEqual(self.selector.select(0, 0).kind, Kind.DELETE)


class DeterminismTest(unittest.TestCase):
    def test_same_seed(self):
        operations = {'create': {'distribution': 'beg'}, 'read': {'distribution': 'mid'},
                      'rename': {'distribution': 'end'}, 'ls': {}}
        runs = []
        for _ in range(2):
            selector = WeightSelector(make_config(operations), random.Random(1234))
            runs.append([selector.select(i * 10, 10000).kind for i in range(1000)])
        self.assertEqual(runs[0], runs[1])

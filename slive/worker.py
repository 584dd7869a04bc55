"""
worker.py: The per-partition loop that drives operations for a fixed
duration and emits their statistics.
"""

import enum
import logging
import random

import slive.timer as timer
import slive.report as report
from slive.config import ConfigExtractor
from slive.operations.sleep import SleepOp
from slive.output import long_output
from slive.selector import WeightSelector
from slive.stats import Stats

OP_TYPE = "worker"

class Termination(enum.Enum):
    TIMEOUT = 1
    EXHAUSTED = 2
    ABORTED = 3


class Reporter(object):
    """
    Status sink supplied by the job substrate. The default discards.
    """
    def set_status(self, status):
        pass


class ListCollector(object):
    """
    Collector that keeps every emitted (key, value) pair.
    """
    def __init__(self):
        self.pairs = []

    def __call__(self, key, value):
        self.pairs.append((key, value))


class Worker(object):
    """
    Runs randomly selected operations against ``fs`` until the configured
    duration elapses, the selector runs out of operations, or (with
    ``exit_on_error``) an operation fails.
    """
    def __init__(self, config, fs, rnd=None, selector=None, logger=None, sleep=None):
        self._config = config
        self._fs = fs
        if rnd is None:
            rnd = random.Random(config.random_seed)
        self._rnd = rnd
        self._selector = selector if selector is not None else WeightSelector(config, rnd)
        self._log = logger if logger is not None else logging.getLogger(__name__)
        self._sleeper = None
        if config.sleep_range is not None:
            if sleep is None:
                self._sleeper = SleepOp(config, rnd)
            else:
                self._sleeper = SleepOp(config, rnd, sleep=sleep)
        self.stats = Stats()

    @classmethod
    def configure(cls, options, fs, logger=None):
        """
        Build a worker from raw options. Configuration errors are
        logged and re-raised; nothing has run at that point.
        """
        log = logger if logger is not None else logging.getLogger(__name__)
        try:
            config = ConfigExtractor(options).extract()
        except ValueError:
            log.error("Unable to setup slive worker", exc_info=True)
            raise
        ConfigExtractor.dump_options(config, log)
        return cls(config, fs, logger=logger)

    def _status(self, reporter, msg):
        reporter.set_status(msg)
        self._log.info(msg)

    def _run_operation(self, op, op_num, collector, reporter):
        self._status(reporter, "Running operation #{} ({})".format(op_num, op))
        start = timer.now()
        outputs = op.run(self._fs)
        self.stats.report_latency(op.name, timer.elapsed(start))
        self._status(reporter, "Finished operation #{} ({})".format(op_num, op))
        for out in outputs or []:
            collector(out.key, out.output_value)

    def run(self, key, value, collector, reporter=None):
        """
        Entry point called by the job substrate with a placeholder
        ``key``/``value``. Returns how the loop terminated.
        """
        if reporter is None:
            reporter = Reporter()
        self._status(reporter, "Running slive worker for dummy key {} and dummy value {}".format(
            key, value))
        start = timer.now()
        op_count = 0
        sleep_ops = 0
        duration = self._config.duration_ms
        termination = Termination.TIMEOUT
        while timer.elapsed(start) < duration:
            op = None
            try:
                self._status(reporter, "Attempting to select operation #{}".format(op_count + 1))
                op = self._selector.select(timer.elapsed(start), duration)
                if op is None:
                    termination = Termination.EXHAUSTED
                    break
                op_count += 1
                self._run_operation(op, op_count, collector, reporter)
                # Pacing does not count against the number of operations
                if self._sleeper is not None:
                    sleep_ops += 1
                    op = self._sleeper
                    self._run_operation(op, sleep_ops, collector, reporter)
            except Exception as e:
                self._log.warning("Operation #%d (%s) failed", op_count, op, exc_info=True)
                reporter.set_status("Failed at running due to {}".format(e))
                if self._config.exit_on_error:
                    termination = Termination.ABORTED
                    break

        time_taken = timer.elapsed(start)
        for out in [long_output(OP_TYPE, report.OP_COUNT, op_count),
                    long_output(OP_TYPE, report.OK_TIME_TAKEN, time_taken)]:
            collector(out.key, out.output_value)
        self._status(reporter, "Finished {} operations in {} milliseconds ({})".format(
            op_count, time_taken, termination.name.lower()))
        self.stats.dump(self._log)
        return termination

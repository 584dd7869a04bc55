"""
sleep.py: Pacing operation.
"""

import time

import slive.timer as timer
import slive.report as report
from slive.operation import Operation, Kind

class SleepOp(Operation):
    """
    Sleeps for a uniformly chosen number of milliseconds within the
    configured sleep range. Never touches the filesystem.
    """
    def __init__(self, config, rnd, sleep=time.sleep):
        super().__init__(Kind.SLEEP, config, rnd)
        if config.sleep_range is None:
            raise ValueError("SleepOp requires a configured sleep range")
        self._sleep = sleep

    def sleep_time(self):
        return self._config.sleep_range.get(self._rnd)

    def run(self, fs):
        duration = self.sleep_time()
        start = timer.now()
        self._sleep(duration / 1000.0)
        return [self.output(report.SUCCESSES, 1),
                self.output(report.OK_TIME_TAKEN, timer.elapsed(start))]

"""
operation.py: Base class for everything the worker loop can run.
"""

import enum

import slive.timer as timer
import slive.report as report
from slive.fs import PathNotFoundError
from slive.output import long_output

class Kind(enum.Enum):
    CREATE = 'create'
    APPEND = 'append'
    DELETE = 'delete'
    RENAME = 'rename'
    SET_REPLICATION = 'set_replication'
    READ = 'read'
    LS = 'ls'
    MKDIR = 'mkdir'
    SLEEP = 'sleep'

# Kinds that can be weighted and selected; sleep is only used for pacing
SELECTABLE_KINDS = [kind for kind in Kind if kind != Kind.SLEEP]


class Operation(object):
    """
    Abstract class. An operation performs one logical action against a
    ``FileSystem`` per ``run`` and returns a list of ``OperationOutput``.
    Subclass of ``Operation`` should implement ``_run``.

    Storage errors propagate to the caller; the only one handled here is
    ``PathNotFoundError``, which is recorded as a failed attempt since
    randomly chosen paths are routinely absent.
    """
    def __init__(self, kind, config, rnd):
        self.kind = kind
        self._config = config
        self._rnd = rnd

    @property
    def name(self):
        return self.kind.value

    def output(self, measurement, value):
        return long_output(self.name, measurement, value)

    def run(self, fs):
        start = timer.now()
        try:
            outputs = self._run(fs)
        except PathNotFoundError:
            return [self.output(report.FAILURES, 1),
                    self.output(report.NOT_FOUND, 1),
                    self.output(report.OK_TIME_TAKEN, timer.elapsed(start))]
        outputs.append(self.output(report.OK_TIME_TAKEN, timer.elapsed(start)))
        return outputs

    def _run(self, fs):
        """
        Perform the action. Returns the outputs other than the time taken.
        """
        raise NotImplementedError

    def __str__(self):
        return self.name

    def __repr__(self):
        return "<{} {}>".format(type(self).__name__, self.name)

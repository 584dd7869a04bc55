"""
factory.py: Builds operation instances by kind.
"""

from slive.operation import Kind
from slive.operations.fileops import (CreateOp, AppendOp, DeleteOp, RenameOp,
                                      ReadOp, LsOp, MkdirOp)
from slive.operations.replication import SetReplicationOp
from slive.operations.sleep import SleepOp

OPERATIONS = {
    Kind.CREATE: CreateOp,
    Kind.APPEND: AppendOp,
    Kind.DELETE: DeleteOp,
    Kind.RENAME: RenameOp,
    Kind.SET_REPLICATION: SetReplicationOp,
    Kind.READ: ReadOp,
    Kind.LS: LsOp,
    Kind.MKDIR: MkdirOp,
    Kind.SLEEP: SleepOp,
}

class OperationFactory(object):
    """
    Operations hold no per-invocation state, so one instance per kind is
    built lazily and handed out again on every request.
    """
    def __init__(self, config, rnd):
        self._config = config
        self._rnd = rnd
        self._cache = {}

    def get(self, kind):
        op = self._cache.get(kind)
        if op is None:
            op = OPERATIONS[kind](self._config, self._rnd)
            self._cache[kind] = op
        return op

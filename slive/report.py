"""
report.py: Measurement names and the human readable run report.
"""

from collections import OrderedDict

# Measurement names shared by operations, the worker and the report
OK_TIME_TAKEN = "milliseconds_taken"
FAILURES = "failures"
SUCCESSES = "successes"
BYTES_WRITTEN = "bytes_written"
BYTES_READ = "bytes_read"
FILES_CREATED = "files_created"
DIRS_CREATED = "dirs_created"
DIR_ENTRIES = "dir_entries"
OP_COUNT = "op_count"
CHUNKS_VERIFIED = "chunks_verified"
CHUNKS_UNVERIFIED = "chunks_unverified"
NOT_FOUND = "not_found"

MB = 1048576.0

class ReportWriter(object):
    """
    Groups merged outputs by operation and derives per-second rates
    from each operation's accumulated ``milliseconds_taken``.
    """
    RATES = [
        (SUCCESSES, "Successes per second", 1.0),
        (OP_COUNT, "Operations per second", 1.0),
        (BYTES_WRITTEN, "Megabytes written per second", MB),
        (BYTES_READ, "Megabytes read per second", MB),
        (FILES_CREATED, "Files created per second", 1.0),
        (DIR_ENTRIES, "Directory entries per second", 1.0),
    ]

    def __init__(self, outputs):
        self._by_op = OrderedDict()
        for out in sorted(outputs, key=lambda o: (o.op_type, o.measurement)):
            self._by_op.setdefault(out.op_type, OrderedDict())[out.measurement] = out.value

    def measurements(self, op_type):
        return dict(self._by_op.get(op_type, {}))

    def rates(self, op_type):
        values = self._by_op.get(op_type, {})
        time_taken = values.get(OK_TIME_TAKEN, 0)
        rates = OrderedDict()
        if time_taken <= 0:
            return rates
        for measurement, label, unit in self.RATES:
            if measurement in values:
                rates[label] = (values[measurement] / unit) / (time_taken / 1000.0)
        return rates

    def lines(self):
        for op_type, values in self._by_op.items():
            yield "Operation \"{}\"".format(op_type)
            for measurement, value in values.items():
                yield "  {} = {}".format(measurement, value)
            for label, rate in self.rates(op_type).items():
                yield "  {} = {:.3f}".format(label, rate)

    def write(self, out):
        for line in self.lines():
            out.write(line + '\n')

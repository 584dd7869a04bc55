"""
stats.py: Per-worker latency statistics.
"""

class Stats(object):
    """
    Latency histogram per operation type (millisecond buckets).
    """
    def __init__(self):
        self.latencies = {}
        self.total_ops = {}

    def report_latency(self, op_type, latency):
        latency = round(latency)
        histogram = self.latencies.setdefault(op_type, {})
        histogram[latency] = histogram.get(latency, 0) + 1
        self.total_ops[op_type] = self.total_ops.get(op_type, 0) + 1

    def summary(self, op_type):
        """
        Returns (count, average, median, 90%, 99%) latency for ``op_type``.
        """
        total_ops = self.total_ops.get(op_type, 0)
        if total_ops == 0:
            return (0, 0.0, -1, -1, -1)
        histogram = self.latencies[op_type]
        count = 0
        total_latency = 0
        med_latency = -1
        n_latency = -1
        nn_latency = -1
        for latency in sorted(histogram.keys()):
            total_latency += (latency * histogram[latency])
            count += histogram[latency]
            if count >= total_ops / 2 and med_latency == -1:
                med_latency = latency
            if count >= total_ops * 0.9 and n_latency == -1:
                n_latency = latency
            if count >= total_ops * 0.99 and nn_latency == -1:
                nn_latency = latency
        return (total_ops, total_latency / total_ops, med_latency, n_latency, nn_latency)

    def dump(self, logger):
        for op_type in sorted(self.total_ops):
            count, avg, med, n, nn = self.summary(op_type)
            logger.info("%s: %d ops, latency avg %.2f ms, median %d ms, 90%% %d ms, 99%% %d ms",
                        op_type, count, avg, med, n, nn)

"""
output.py: Typed statistic records produced by operations.
"""

import enum

KEY_TYPE_SEP = ':'
KEY_MEASUREMENT_SEP = '*'
STRING_SEP = ';'

class OutputType(enum.Enum):
    LONG = 'l'
    DOUBLE = 'd'
    INTEGER = 'i'
    STRING = 's'


class OperationOutput(object):
    """
    A single statistic. ``op_type`` and ``measurement`` together form the
    aggregation key: records with the same key are summed (numeric) or
    joined (string) by the reducer.
    """
    def __init__(self, output_type, op_type, measurement, value):
        self.output_type = output_type
        self.op_type = op_type
        self.measurement = measurement
        self.value = self._coerce(output_type, value)

    @staticmethod
    def _coerce(output_type, value):
        if output_type == OutputType.STRING:
            return str(value)
        if output_type == OutputType.DOUBLE:
            return float(value)
        return int(value)

    @property
    def key(self):
        return "{}{}{}{}{}".format(self.output_type.value, KEY_TYPE_SEP,
                                   self.op_type, KEY_MEASUREMENT_SEP,
                                   self.measurement)

    @property
    def output_value(self):
        return str(self.value)

    @classmethod
    def parse(cls, key, value):
        """
        Rebuild a record from a ``key``/``value`` pair as emitted to a
        collector.
        """
        try:
            type_code, rest = key.split(KEY_TYPE_SEP, 1)
            op_type, measurement = rest.split(KEY_MEASUREMENT_SEP, 1)
            output_type = OutputType(type_code)
        except ValueError:
            raise ValueError("Malformed output key '{}'".format(key)) from None
        return cls(output_type, op_type, measurement, value)

    def __add__(self, other):
        if not isinstance(other, OperationOutput) or other.key != self.key:
            raise ValueError("Cannot merge {} with {}".format(self, other))
        if self.output_type == OutputType.STRING:
            value = self.value + STRING_SEP + other.value
        else:
            value = self.value + other.value
        return OperationOutput(self.output_type, self.op_type,
                               self.measurement, value)

    def __eq__(self, other):
        if isinstance(other, OperationOutput):
            return self.key == other.key and self.value == other.value
        return False

    def __repr__(self):
        return "OperationOutput({}={})".format(self.key, self.output_value)


def long_output(op_type, measurement, value):
    return OperationOutput(OutputType.LONG, op_type, measurement, value)

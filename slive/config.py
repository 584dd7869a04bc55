"""
config.py: Turns raw options (YAML file, command line) into a validated
``SliveConfig``.
"""

import logging
import math
import re

import yaml

import slive.param as param
import slive.weights as weights
from slive.operation import Kind, SELECTABLE_KINDS

logger = logging.getLogger(__name__)

class ConfigError(ValueError):
    pass


class Range(object):
    """
    Inclusive integer range.
    """
    def __init__(self, lower, upper):
        if lower > upper:
            raise ConfigError("Invalid range: {} > {}".format(lower, upper))
        self.lower = lower
        self.upper = upper

    def get(self, rnd):
        return rnd.randint(self.lower, self.upper)

    def __eq__(self, other):
        if isinstance(other, Range):
            return self.lower == other.lower and self.upper == other.upper
        return False

    def __repr__(self):
        return "{},{}".format(self.lower, self.upper)


class OperationSpec(object):
    """
    One selectable operation: base ``weight`` (its percentage), time
    varying ``curve`` and optional ``max_count`` invocation limit.
    """
    def __init__(self, kind, weight, curve, max_count=None):
        self.kind = kind
        self.weight = weight
        self.curve = curve
        self.max_count = max_count

    def current_weight(self, fraction):
        return self.weight * self.curve.weight(fraction)

    def __repr__(self):
        return "{}(weight={}, curve={}, max_count={})".format(
            self.kind.value, self.weight, self.curve, self.max_count)


class SliveConfig(object):
    """
    Fully resolved configuration. Built once per worker and never
    modified afterwards.
    """
    FIELDS = ['duration_ms', 'random_seed', 'sleep_range', 'exit_on_error',
              'total_ops', 'operations', 'base_dir', 'file_count', 'dir_size',
              'block_size', 'write_size', 'append_size', 'read_size',
              'replication', 'replication_poll_ms', 'replication_timeout_ms',
              'workers', 'result_file']

    def __init__(self, **fields):
        missing = set(self.FIELDS) - set(fields)
        if missing:
            raise ConfigError("Missing fields: {}".format(", ".join(sorted(missing))))
        for name in self.FIELDS:
            object.__setattr__(self, name, fields[name])

    def __setattr__(self, name, value):
        raise AttributeError("SliveConfig is read-only")

    def spec(self, kind):
        for spec in self.operations:
            if spec.kind == kind:
                return spec
        return None


SIZE_RE = re.compile(r"^\s*(\d+)\s*([bkmg]?)\s*$", re.IGNORECASE)

def parse_size(value):
    """
    Parse a byte size such as ``512``, ``64k`` or ``1M``.
    """
    if isinstance(value, bool):
        raise ConfigError("Invalid size '{}'".format(value))
    if isinstance(value, int):
        return value
    match = SIZE_RE.match(str(value))
    if match is None:
        raise ConfigError("Invalid size '{}'".format(value))
    unit = match.group(2).lower() or 'b'
    return int(match.group(1)) * param.SIZE_UNITS[unit]

def parse_range(value, parse=int, minimum=0):
    """
    Accepts ``"min,max"``, ``[min, max]`` or a single value meaning
    ``min == max``.
    """
    if isinstance(value, str):
        parts = [part for part in value.split(',')]
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        parts = [value]
    if len(parts) == 1:
        parts = parts * 2
    if len(parts) != 2:
        raise ConfigError("Invalid range '{}'".format(value))
    try:
        lower, upper = parse(parts[0]), parse(parts[1])
    except (TypeError, ValueError) as e:
        raise ConfigError("Invalid range '{}': {}".format(value, e)) from e
    if lower < minimum:
        raise ConfigError("Invalid range '{}': values must be >= {}".format(value, minimum))
    return Range(lower, upper)

def parse_bool(value):
    if isinstance(value, bool):
        return value
    if str(value).lower() in ('true', 'yes', '1'):
        return True
    if str(value).lower() in ('false', 'no', '0'):
        return False
    raise ConfigError("Invalid boolean '{}'".format(value))

def parse_number(name, value, maximum=None):
    """
    Parse a finite, non-negative float, at most ``maximum`` when given.
    """
    if isinstance(value, bool):
        raise ConfigError("Invalid value for '{}': {!r}".format(name, value))
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError("Invalid value for '{}': {!r}".format(name, value)) from None
    if not math.isfinite(number):
        raise ConfigError("'{}' must be finite, got {}".format(name, value))
    if number < 0:
        raise ConfigError("'{}' must be >= 0, got {}".format(name, value))
    if maximum is not None and number > maximum:
        raise ConfigError("'{}' must be <= {}, got {}".format(name, maximum, value))
    return number

def parse_int(name, value, minimum=0):
    if value is None or isinstance(value, bool):
        raise ConfigError("Invalid value for '{}': {!r}".format(name, value))
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError("Invalid value for '{}': {!r}".format(name, value)) from None
    if number < minimum:
        raise ConfigError("'{}' must be >= {}, got {}".format(name, minimum, number))
    return number

def load_options(path):
    """
    Read an option mapping from a YAML file.
    """
    with open(path) as f:
        raw = yaml.safe_load(f)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("Config file {} must contain a mapping".format(path))
    return raw

def apply_overrides(options, overrides):
    """
    Return ``options`` updated with every override that is not None, so
    unset command line flags keep the file's values.
    """
    merged = dict(options)
    for name, value in overrides.items():
        if value is not None:
            merged[name] = value
    return merged

def derive_max_counts(total_ops, percents, max_counts):
    """
    Fill in the limits missing from ``max_counts`` from each kind's share
    of ``total_ops``. Shares are rounded down and the leftover operations
    go to the first derived kinds with a non-zero percent.
    """
    result = list(max_counts)
    derived = [i for i, count in enumerate(max_counts) if count is None]
    exact = [total_ops * percents[i] / 100.0 for i in derived]
    for i, share in zip(derived, exact):
        result[i] = int(share)
    remainder = min(total_ops, int(round(sum(exact)))) - sum(result[i] for i in derived)
    for i in derived:
        if remainder <= 0:
            break
        if percents[i] > 0:
            result[i] += 1
            remainder -= 1
    return result


class ConfigExtractor(object):
    """
    Validates a raw option mapping and builds a ``SliveConfig``.
    Unknown options are rejected.
    """
    OPTIONS = {
        'duration', 'seed', 'sleep', 'exit_on_error', 'ops', 'operations',
        'base_dir', 'files', 'dir_size', 'block_size', 'write_size',
        'append_size', 'read_size', 'replication', 'replication_poll',
        'replication_timeout', 'workers', 'result_file',
    }

    def __init__(self, options):
        self._options = dict(options or {})
        unknown = set(self._options) - self.OPTIONS
        if unknown:
            raise ConfigError("Unknown options: {}".format(", ".join(sorted(unknown))))

    def _get(self, name, default=None):
        value = self._options.get(name)
        return default if value is None else value

    def duration_ms(self):
        duration = parse_number('duration', self._get('duration', param.DEFAULT_DURATION))
        return int(round(duration * 1000))

    def random_seed(self):
        seed = self._options.get('seed')
        if seed is None:
            return None
        return parse_int('seed', seed, minimum=-(1 << 63))

    def sleep_range(self):
        sleep = self._options.get('sleep')
        if sleep is None:
            return None
        return parse_range(sleep)

    def total_ops(self):
        ops = self._options.get('ops')
        if ops is None:
            return None
        return parse_int('ops', ops)

    def _curve(self, kind, settings):
        if 'distribution' in settings and 'curve' in settings:
            raise ConfigError("{}: give either 'distribution' or 'curve', not both".format(kind.value))
        try:
            if 'curve' in settings:
                return weights.PiecewiseLinearWeight(
                    [(float(x), parse_number(kind.value + '.curve', y))
                     for x, y in settings['curve']])
            return weights.distribution(str(settings.get('distribution', 'uniform')))
        except (TypeError, ValueError) as e:
            raise ConfigError("{}: {}".format(kind.value, e)) from e

    def operations(self, total_ops):
        raw = self._options.get('operations')
        if raw is None:
            raw = dict((kind.value, {}) for kind in SELECTABLE_KINDS)
        if not isinstance(raw, dict):
            raise ConfigError("'operations' must be a mapping of kind to settings")

        entries = []
        for name, settings in raw.items():
            try:
                kind = Kind(str(name).lower())
            except ValueError:
                raise ConfigError("Unknown operation kind '{}'".format(name)) from None
            if kind not in SELECTABLE_KINDS:
                raise ConfigError("'{}' cannot be selected, use 'sleep' for pacing".format(name))
            if settings is None:
                settings = {}
            elif not isinstance(settings, dict):
                settings = {'percent': settings}
            unknown = set(settings) - {'percent', 'distribution', 'curve', 'max_count'}
            if unknown:
                raise ConfigError("{}: unknown settings {}".format(kind.value, ", ".join(sorted(unknown))))
            entries.append((kind, settings))

        # Kinds without a percentage share what the others leave over
        percents = []
        for kind, settings in entries:
            if settings.get('percent') is None:
                percents.append(None)
            else:
                percents.append(parse_number(kind.value + '.percent', settings['percent'], maximum=100))
        unspecified = percents.count(None)
        explicit = sum(p for p in percents if p is not None)
        share = max(0.0, 100.0 - explicit) / unspecified if unspecified else 0.0
        percents = [share if p is None else p for p in percents]

        max_counts = []
        for kind, settings in entries:
            max_count = settings.get('max_count')
            if max_count is not None:
                max_count = parse_int(kind.value + '.max_count', max_count)
            max_counts.append(max_count)
        if total_ops is not None:
            max_counts = derive_max_counts(total_ops, percents, max_counts)

        return [OperationSpec(kind, percent, self._curve(kind, settings), max_count)
                for (kind, settings), percent, max_count in zip(entries, percents, max_counts)]

    def extract(self):
        total_ops = self.total_ops()
        sizes = {}
        for name, default in [('block_size', param.DEFAULT_BLOCK_SIZE),
                              ('write_size', param.DEFAULT_WRITE_SIZE),
                              ('append_size', param.DEFAULT_APPEND_SIZE),
                              ('read_size', param.DEFAULT_READ_SIZE)]:
            sizes[name] = parse_range(self._get(name, default), parse=parse_size)
        result_file = self._options.get('result_file')
        return SliveConfig(
            duration_ms=self.duration_ms(),
            random_seed=self.random_seed(),
            sleep_range=self.sleep_range(),
            exit_on_error=parse_bool(self._get('exit_on_error', False)),
            total_ops=total_ops,
            operations=self.operations(total_ops),
            base_dir=str(self._get('base_dir', param.DEFAULT_BASE_DIR)),
            file_count=parse_int('files', self._get('files', param.DEFAULT_FILES), minimum=1),
            dir_size=parse_int('dir_size', self._get('dir_size', param.DEFAULT_DIR_SIZE), minimum=1),
            replication=parse_range(self._get('replication', param.DEFAULT_REPLICATION), minimum=1),
            replication_poll_ms=parse_int('replication_poll',
                                          self._get('replication_poll', param.REPLICATION_POLL_INTERVAL),
                                          minimum=1),
            replication_timeout_ms=parse_int('replication_timeout',
                                             self._get('replication_timeout', param.REPLICATION_TIMEOUT)),
            workers=parse_int('workers', self._get('workers', param.DEFAULT_WORKERS), minimum=1),
            result_file=None if result_file is None else str(result_file),
            **sizes)

    @staticmethod
    def dump_options(config, log=logger):
        for name in SliveConfig.FIELDS:
            value = getattr(config, name)
            if name == 'operations':
                for spec in value:
                    log.info("operation %s", spec)
            else:
                log.info("%s = %s", name, value)

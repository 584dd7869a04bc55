"""
param.py: Default values and constants for the load driver.
"""

# Durations are in milliseconds unless noted otherwise
DEFAULT_DURATION = 10 # seconds
DEFAULT_WORKERS = 10

DEFAULT_BASE_DIR = "/test/slive"
DEFAULT_FILES = 10
DEFAULT_DIR_SIZE = 32

DEFAULT_BLOCK_SIZE = (64 * 1048576, 64 * 1048576)
DEFAULT_WRITE_SIZE = (64 * 1048576, 64 * 1048576)
DEFAULT_APPEND_SIZE = (1048576, 1048576)
DEFAULT_READ_SIZE = (64 * 1048576, 64 * 1048576)
DEFAULT_REPLICATION = (1, 3)

REPLICATION_POLL_INTERVAL = 100
REPLICATION_TIMEOUT = 60000

# Named weight curves never drop below this weight
DISTRIBUTION_FLOOR = 0.1

# Names used to build directory and file paths
DATA_DIR = "data"
DIR_PREFIX = "sl_dir_"
FILE_PREFIX = "sl_file_"

SIZE_UNITS = {
    'b': 1,
    'k': 1024,
    'm': 1024 ** 2,
    'g': 1024 ** 3,
}

"""
evote Constants

This module consolidates the election protocol constants and the environment
configuration used throughout the package. Constants are organized by
category for easy reference and maintenance.
"""
import ast
import re
from dotenv import dotenv_values

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================
# Load environment variables once at module import
_config = dotenv_values(".env")

ELECTION_DEFAULTS = {
    'EVOTE_ADMINISTRATOR':             '',
    'EVOTE_TIE_BREAK':                 'timestamp',
}

LOGGER_DEFAULTS = {
    'LOG_LEVEL':                       'INFO',
    'LOG_FORMAT':                      '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':                 '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING':        'True',
    'LOG_FILE_OUTPUT':                 'False',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024 # 10MB
LOG_MAX_DESCRIPTION_LENGTH = 120  # Proposal descriptions are truncated in log lines
LOG_BACKUP_COUNT = 5


# ==================================================================================
# ELECTION PROTOCOL CONSTANTS
# ==================================================================================
ELECTION_RESET_COOLDOWN_SECONDS = 60

# Domain separator mixed into the timestamp hash used for tie-breaking
ELECTION_TIE_BREAK_DOMAIN = b"EVOTE_TIE_BREAK_V1"
ELECTION_TIE_BREAK_DIGEST_SIZE = 32

# Accepted values of the tie_break configuration key
ELECTION_TIE_BREAK_SOURCES = ("timestamp", "system")


# ==================================================================================
# VALIDATION PATTERNS
# ==================================================================================
# Identities may not contain whitespace or control characters
VALID_IDENTITY_PATTERN = re.compile(r'^[^\s\x00-\x1F\x7F]+$')


# ==================================================================================
# CONFIGURATION WRAPPERS
# ==================================================================================
class ConfigString(str):
    """
    String subclass that stores a default value.
    """
    def __new__(cls, value, default):
        obj = str.__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default

class ConfigBool(int):
    """
    Int subclass acting as a boolean that stores a default value.
    """
    def __new__(cls, value, default):
        obj = int.__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default

    def __repr__(self):
        return str(bool(self))

    def __str__(self):
        return str(bool(self))

    def __eq__(self, other):
        return bool(self) == other

    __hash__ = int.__hash__


# ==================================================================================
# DYNAMIC CONFIGURATION LOADING
# ==================================================================================
DEFAULTS = ELECTION_DEFAULTS | LOGGER_DEFAULTS
namespace = globals()

def parse_bool(v):
    """
    Convert "True"/"False" (any casing, with surrounding whitespace) into bool.
    Avoids exceptions by only calling ast.literal_eval for known literals.
    """
    if not isinstance(v, str):
        return v
    s = v.strip()
    if not s:
        return v
    if s.casefold() in {"true", "false"}:
        # ast.literal_eval expects "True"/"False"
        return ast.literal_eval(s.title())
    return v

for key, default_raw in DEFAULTS.items():
    # dotenv_values returns strings or None. None is treated as missing.
    raw = _config.get(key)
    value_raw = default_raw if raw is None else raw

    # Parses only boolean-literals. Leaves other values untouched.
    value = parse_bool(value_raw)
    default_val = parse_bool(default_raw)

    if isinstance(value, bool):
        namespace[key] = ConfigBool(value, default_val)
    else:
        # Preserves the original raw string for ConfigString storage.
        namespace[key] = ConfigString(value_raw, default_val)

"""Device-wide constants, trace records and small numeric helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TypeVar

VERSION = "02_07_05"
DEVICE_NAME = "IotaWatt"

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_SEVENTY_YEARS = 2208988800
MS_PER_HOUR = 3600000

SYSTEM_DIR = "/iotawatt/"
EXPORT_LOG_PATH = "/iotawatt/export.log"
CURRENT_LOG_PATH = "/iotawatt/iotalog.log"
HISTORY_LOG_PATH = "/iotawatt/histlog.log"
MESSAGE_LOG_PATH = "/iotawatt/iotamsgs.txt"
AUTH_PATH = "/iotawatt/auth.txt"
CONFIG_PATH = "/config.txt"
CONFIG_NEW_PATH = "/config+1.txt"
CONFIG_OLD_PATH = "/config-1.txt"
TABLE_PATH = "/tables.txt"
NEW_TABLE_PATH = "/table+1.txt"
INTEGRATIONS_DIR = "/iotawatt/integrations/"
UPDATE_HOST = "iotawatt.com"
VERSIONS_PATH = "/firmware/versions.json"
VERSIONS_DIR = "/firmware/bin/"
TABLE_DIR = "/download/tables/"

ADC_BITS = 12
ADC_RANGE = 4096
MAX_INPUTS = 15
MAX_SAMPLES = 1000
HTTP_REQUEST_MAX = 1


class Priority(IntEnum):
    """Scheduler tie-break priority; higher runs first when due together."""

    LOW = 2
    LM = 3
    ML = 4
    MED = 5
    MH = 6
    HM = 7
    HIGH = 8


class TraceModule(IntEnum):
    """Identifiers of the modules that write trace entries."""

    LOOP = 1
    LOG = 2
    EMONCMS = 3
    GFD = 4
    UPDATE = 5
    SETUP = 6
    INFLUX = 7
    SAMP = 8
    POWER = 9
    WEB = 10
    CONFIG = 11
    ENCRYPT_ENCODE = 12
    UPLOAD_GRAPH = 13
    HISTORY = 14
    BASE64 = 15
    STATS = 18
    DATALOG = 19
    TIME_SYNC = 20
    WIFI = 21
    PVOUTPUT = 22
    SAMPLE_PHASE = 23
    RTC_WDT = 24
    CSV_QUERY = 25
    XURL = 26
    UTILITY = 27
    EXPORT_LOG = 28
    INFLUX2 = 29
    INFLUX2_CONFIG = 30
    UPLOADER = 31
    INFLUX1 = 32
    INTEGRATOR = 33
    SCRIPT = 34
    SCRIPTSET = 35


class QueryKind(IntEnum):
    """Kinds of series used to build graph API identifiers."""

    VOLTAGE = 1
    POWER = 2
    ENERGY = 3
    OTHER = 4


class LedPattern(str, Enum):
    """LED blink patterns; each character is a half-second of R, G or dark."""

    CONNECT_WIFI = "R.G.G..."
    CONNECT_WIFI_NO_RTC = "R.R.G..."
    SD_INIT_FAILURE = "G.R.R..."
    DUMPING_LOG = "R.G.R..."
    HALT = "R.R.R..."
    NO_CONFIG = "G.R.R.R..."
    BAD_CONFIG = "G.R.R.G..."
    UPDATING = "R.G."


def _check_byte(name: str, value: int) -> None:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must be in 0..255, got {value}")


@dataclass(frozen=True)
class TraceEntry:
    """A trace record of four bytes packed into one 32-bit word."""

    seq: int
    mod: int
    id: int
    det: int = 0

    def __post_init__(self) -> None:
        for name in ("seq", "mod", "id", "det"):
            _check_byte(name, getattr(self, name))

    def to_word(self) -> int:
        """Pack the entry into its 32-bit little-endian word."""
        return int.from_bytes(bytes((self.seq, self.mod, self.id, self.det)), "little")


def trace_entry_from_word(word: int) -> TraceEntry:
    """Unpack a 32-bit trace word into its four fields."""
    if not 0 <= word <= 0xFFFFFFFF:
        raise ValueError(f"trace word out of 32-bit range: {word}")
    seq, mod, ident, det = word.to_bytes(4, "little")
    return TraceEntry(seq=seq, mod=mod, id=ident, det=det)


_T = TypeVar("_T")


def clamp(value: _T, low: _T, high: _T) -> _T:
    """Limit value to the range [low, high]."""
    if value <= low:  # type: ignore[operator]
        return low
    if value >= high:  # type: ignore[operator]
        return high
    return value
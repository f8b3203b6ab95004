import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import flax.struct

# Group kind tags recognized in the configuration
GROUP_GENERAL = 'general'
GROUP_DEFINITION = 'definition'
GROUP_EVENT = 'event'

# Candidate configuration files, tried in order
DEFAULT_CONF_FILES = ('/etc/ngf/ngf.ini', './ngf.ini')

LINEAR_VOLUME_LEVEL = 100   # level assigned to every linear volume policy
SYSTEM_VOLUME_SLOTS = 3


class KeyType(enum.IntEnum):
    STRING = 0
    INT = 1
    BOOL = 2


@dataclass(frozen=True)
class KeyEntry:
    type: KeyType
    key: str
    default: Any


# Every property an event section may declare, in extraction order.
EVENT_ENTRIES = (
    # general
    KeyEntry(KeyType.INT, 'max_timeout', 0),
    KeyEntry(KeyType.BOOL, 'allow_custom', False),
    KeyEntry(KeyType.INT, 'dummy', 0),
    # sound
    KeyEntry(KeyType.BOOL, 'audio_enabled', False),
    KeyEntry(KeyType.BOOL, 'audio_repeat', False),
    KeyEntry(KeyType.INT, 'audio_max_repeats', 0),
    KeyEntry(KeyType.STRING, 'sound', ''),
    KeyEntry(KeyType.BOOL, 'silent_enabled', False),
    KeyEntry(KeyType.STRING, 'volume', ''),
    KeyEntry(KeyType.STRING, 'event_id', ''),
    # tonegen
    KeyEntry(KeyType.BOOL, 'audio_tonegen_enabled', False),
    KeyEntry(KeyType.INT, 'audio_tonegen_pattern', -1),
    # vibration
    KeyEntry(KeyType.BOOL, 'vibration_enabled', False),
    KeyEntry(KeyType.BOOL, 'lookup_pattern', False),
    KeyEntry(KeyType.STRING, 'vibration', ''),
    # led
    KeyEntry(KeyType.BOOL, 'led_enabled', False),
    KeyEntry(KeyType.STRING, 'led_pattern', ''),
    # backlight
    KeyEntry(KeyType.BOOL, 'backlight_enabled', False),
)

ZERO_VALUES = {KeyType.STRING: '', KeyType.INT: 0, KeyType.BOOL: False}


# ── Errors and diagnostics ────────────────────────────────────────────

class InvalidPropertyWarning(UserWarning):
    """A present property value could not be read as its declared type."""


class EventCycleError(ValueError):
    def __init__(self, chain):
        self.chain = list(chain)
        super().__init__(
            f"Inheritance cycle between events: {' -> '.join(self.chain)}")


class SettingsNotFoundError(FileNotFoundError):
    def __init__(self, candidates):
        self.candidates = list(candidates)
        super().__init__(
            f"No loadable configuration among: {', '.join(self.candidates)}")


# ── Resource descriptors ──────────────────────────────────────────────
# Frozen and hashable so equal descriptors intern to one shared handle.

@flax.struct.dataclass
class SoundProfile:
    profile: str
    key: str


@flax.struct.dataclass
class SoundFile:
    filename: str


@flax.struct.dataclass
class VolumeProfile:
    profile: str
    key: str


@flax.struct.dataclass
class FixedVolume:
    level: int


@flax.struct.dataclass
class LinearVolume:
    linear: Tuple[int, int, int]
    level: int = LINEAR_VOLUME_LEVEL


@flax.struct.dataclass
class PatternProfile:
    profile: str
    key: str


@flax.struct.dataclass
class PatternFile:
    filename: str


@flax.struct.dataclass
class InternalPattern:
    pattern: int


SoundPath = Union[SoundProfile, SoundFile]
Volume = Union[VolumeProfile, FixedVolume, LinearVolume]
VibrationPattern = Union[PatternProfile, PatternFile, InternalPattern]


@flax.struct.dataclass
class Event:
    audio_enabled: bool = False
    vibration_enabled: bool = False
    leds_enabled: bool = False
    backlight_enabled: bool = False
    allow_custom: bool = False
    max_timeout: int = 0
    lookup_pattern: bool = False
    silent_enabled: bool = False
    event_id: str = ''
    tone_generator_enabled: bool = False
    tone_generator_pattern: int = -1
    repeat: bool = False
    num_repeats: int = 0
    led_pattern: str = ''
    sounds: Tuple[SoundPath, ...] = ()
    volume: Optional[Volume] = None
    patterns: Tuple[VibrationPattern, ...] = ()


@dataclass
class Definition:
    long_event: Optional[str] = None
    short_event: Optional[str] = None
    meeting_event: Optional[str] = None


# ── Shared ownership ──────────────────────────────────────────────────

class ResourceRegistry:
    """Append-only store of resource descriptors.

    ``intern`` hands back the registry's own copy of a descriptor; events keep
    that handle instead of the descriptor they parsed. Equal descriptors map
    to the same handle.
    """

    def __init__(self):
        self._entries = []
        self._index = {}

    def intern(self, descriptor):
        handle = self._index.get(descriptor)
        if handle is None:
            handle = descriptor
            self._index[descriptor] = handle
            self._entries.append(handle)
        return handle

    def __contains__(self, descriptor):
        return descriptor in self._index

    def __iter__(self) -> Iterator[Any]:
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)


@dataclass
class Context:
    sound_paths: ResourceRegistry = field(default_factory=ResourceRegistry)
    volumes: ResourceRegistry = field(default_factory=ResourceRegistry)
    patterns: ResourceRegistry = field(default_factory=ResourceRegistry)
    events: Dict[str, Event] = field(default_factory=dict)
    definitions: Dict[str, Definition] = field(default_factory=dict)
    # General settings
    sound_path: Optional[str] = None      # search directory for sound files
    patterns_path: Optional[str] = None   # search directory for vibration files
    audio_buffer_time: int = 0
    audio_latency_time: int = 0
    system_volume: List[int] = field(
        default_factory=lambda: [0] * SYSTEM_VOLUME_SLOTS)
    required_plugins: List[str] = field(default_factory=list)

    def event(self, name: str) -> Event:
        try:
            return self.events[name]
        except KeyError:
            raise KeyError(f"Unknown event: {name}") from None

"""
Compiler: resolves event sections (with inheritance) from a parsed KeyFile
into immutable Event records registered on a Context.
"""
import warnings
from typing import Dict, Optional

from ngf_events.data_model import (
    EVENT_ENTRIES, GROUP_EVENT, ZERO_VALUES, KeyType,
    Event, EventCycleError, InvalidPropertyWarning,
)
from ngf_events.keyfile import KeyFile, KeyFileError
from ngf_events.parser import (
    parse_group_header, create_sound_paths, create_volume, create_patterns,
)

TYPE_NAMES = {KeyType.STRING: 'string', KeyType.INT: 'integer', KeyType.BOOL: 'boolean'}

_READERS = {
    KeyType.STRING: KeyFile.get_string,
    KeyType.INT: KeyFile.get_integer,
    KeyType.BOOL: KeyFile.get_boolean,
}


# ── Property extraction ───────────────────────────────────────────────

def extract_property(props, keyfile, group, entry, use_default):
    """
    Read one schema entry from ``group`` into ``props``.

    An absent key writes the default only when ``use_default`` is set.
    A present but malformed value always falls back to the default, with a
    warning, so it never silently disappears.
    """
    try:
        value = _READERS[entry.type](keyfile, group, entry.key)
    except KeyFileError as e:
        if not e.is_absent:
            raw = keyfile.get_value(group, entry.key)
            warnings.warn(
                f"Invalid value {raw!r} for property {entry.key} in [{group}], "
                f"expected {TYPE_NAMES[entry.type]}. "
                f"Using default value {entry.default!r}",
                InvalidPropertyWarning, stacklevel=2)
        elif not use_default:
            return
        value = entry.default
    props[entry.key] = value


def extract_properties(keyfile, group, use_default, entries=EVENT_ENTRIES):
    props = {}
    for entry in entries:
        extract_property(props, keyfile, group, entry, use_default)
    return props


# ── Inheritance resolution ────────────────────────────────────────────

def discover_event_groups(keyfile) -> Dict[str, str]:
    """Map event name → group header for every 'event <name>' group."""
    groups = {}
    for group in keyfile.groups():
        header = parse_group_header(group)
        if header is not None and header.kind == GROUP_EVENT:
            groups[header.name] = group
    return groups


class EventResolver:
    """
    Resolves event property sets parent-first.

    Each name is processed at most once; later requests for a done name are
    no-ops. A name requested again while its own chain is still being
    resolved raises EventCycleError.
    """

    def __init__(self, keyfile, groups=None):
        self.keyfile = keyfile
        self.groups = discover_event_groups(keyfile) if groups is None else groups
        self.resolved: Dict[str, dict] = {}
        self.done = set()
        self._in_progress = []

    def resolve(self, name):
        if name is None or name in self.done:
            return
        group = self.groups.get(name)
        if group is None:
            return
        if name in self._in_progress:
            start = self._in_progress.index(name)
            raise EventCycleError(self._in_progress[start:] + [name])

        self._in_progress.append(name)
        try:
            parent = parse_group_header(group).parent
            if parent is not None:
                self.resolve(parent)
                # Unknown parents are ignored; the event becomes a root
                if parent not in self.resolved:
                    parent = None

            own = extract_properties(self.keyfile, group,
                                     use_default=parent is None)
            if parent is not None:
                props = {**self.resolved[parent], **own}
            else:
                props = own
        finally:
            self._in_progress.pop()

        self.resolved[name] = props
        self.done.add(name)

    def resolve_all(self):
        for name in self.groups:
            self.resolve(name)
        return self.resolved


# ── Finalization ──────────────────────────────────────────────────────

def _get(props, key, key_type):
    value = props.get(key)
    return ZERO_VALUES[key_type] if value is None else value


def _get_bool(props, key):
    return bool(_get(props, key, KeyType.BOOL))


def _get_int(props, key):
    return int(_get(props, key, KeyType.INT))


def _get_string(props, key):
    return str(_get(props, key, KeyType.STRING))


def finalize_event(context, name, props) -> Optional[Event]:
    """Build the Event for one resolved property set and register it."""
    if not name:
        return None

    event = Event(
        audio_enabled=_get_bool(props, 'audio_enabled'),
        vibration_enabled=_get_bool(props, 'vibration_enabled'),
        leds_enabled=_get_bool(props, 'led_enabled'),
        backlight_enabled=_get_bool(props, 'backlight_enabled'),
        allow_custom=_get_bool(props, 'allow_custom'),
        max_timeout=_get_int(props, 'max_timeout'),
        lookup_pattern=_get_bool(props, 'lookup_pattern'),
        silent_enabled=_get_bool(props, 'silent_enabled'),
        event_id=_get_string(props, 'event_id'),
        tone_generator_enabled=_get_bool(props, 'audio_tonegen_enabled'),
        tone_generator_pattern=_get_int(props, 'audio_tonegen_pattern'),
        repeat=_get_bool(props, 'audio_repeat'),
        num_repeats=_get_int(props, 'audio_max_repeats'),
        led_pattern=_get_string(props, 'led_pattern'),
        sounds=create_sound_paths(context, _get_string(props, 'sound')),
        volume=create_volume(context, _get_string(props, 'volume')),
        patterns=create_patterns(context, _get_string(props, 'vibration')),
    )
    context.events[name] = event
    return event


def resolve_events(keyfile, context):
    """
    Resolve every event group of ``keyfile`` and register the finalized
    Events (and their interned resources) on ``context``.
    """
    resolver = EventResolver(keyfile)
    for name, props in resolver.resolve_all().items():
        finalize_event(context, name, props)

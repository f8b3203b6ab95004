"""
Header and resource value parsers for feedback event configuration.

Resource values are small prefix-tagged grammars:

    profile:<key>@<profile>     sound, volume, vibration
    filename:<path>             sound, vibration
    internal:<id>               vibration
    fixed:<level>               volume
    linear:<low>;<mid>;<high>   volume

Each parser hands its descriptor to the context's registry and returns the
interned handle, or None when the item is invalid. Invalid items are dropped,
never raised.
"""
import os
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from ngf_events.data_model import (
    SoundProfile, SoundFile,
    VolumeProfile, FixedVolume, LinearVolume,
    PatternProfile, PatternFile, InternalPattern,
)

LIST_SEPARATOR = ';'
PROFILE_SEPARATOR = '@'
PARENT_SEPARATOR = '@'

_ATOI_PATTERN = re.compile(r'\s*([+-]?\d+)')


# ── Group headers ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class GroupHeader:
    kind: str
    name: str
    parent: Optional[str] = None


def parse_group_header(header: str) -> Optional[GroupHeader]:
    """Split '<kind> <name>[@<parent>]' into its parts, or None without a name."""
    if header is None or ' ' not in header:
        return None
    kind, tail = header.split(' ', 1)
    if not tail:
        return None
    name, _, parent = tail.partition(PARENT_SEPARATOR)
    if not name:
        return None
    return GroupHeader(kind=kind, name=name, parent=parent or None)


def parse_group_name(header):
    parsed = parse_group_header(header)
    return parsed.name if parsed else None


def parse_group_parent(header):
    parsed = parse_group_header(header)
    return parsed.parent if parsed else None


# ── Scalar helpers ────────────────────────────────────────────────────

def atoi(text: str) -> int:
    """Best-effort integer: leading whitespace, optional sign, digits.

    Text that does not start with a number parses as 0 and trailing garbage is
    ignored ('12abc' -> 12, 'abc' -> 0). Resource values rely on this leniency.
    """
    if text is None:
        return 0
    m = _ATOI_PATTERN.match(text)
    return int(m.group(1)) if m else 0


def parse_profile_key(value: str) -> Optional[Tuple[str, str]]:
    """'key@profile' → (key, profile); None when either side is missing."""
    if value is None:
        return None
    key, sep, profile = value.partition(PROFILE_SEPARATOR)
    if not sep or not key or not profile:
        return None
    return key, profile


def check_path(basename, search_path):
    """Return basename if it exists, else basename under search_path, else None."""
    if not basename:
        return None
    if os.path.exists(basename):
        return basename
    if search_path:
        path = os.path.join(search_path, basename)
        if os.path.exists(path):
            return path
    return None


def _dispatch(parsers, context, item):
    for prefix, parse_fn in parsers.items():
        if item.startswith(prefix):
            return parse_fn(context, item[len(prefix):])
    return None


def _split_list(value):
    if not value:
        return []
    return value.split(LIST_SEPARATOR)


# ── Sound paths ───────────────────────────────────────────────────────

def _sound_from_profile(context, value):
    parsed = parse_profile_key(value)
    if parsed is None:
        return None
    key, profile = parsed
    return context.sound_paths.intern(SoundProfile(profile=profile, key=key))


def _sound_from_filename(context, value):
    filename = check_path(value, context.sound_path)
    if filename is None:
        return None
    return context.sound_paths.intern(SoundFile(filename=filename))


SOUND_PATH_PARSERS = {
    'profile:': _sound_from_profile,
    'filename:': _sound_from_filename,
}


def parse_sound_path(context, item):
    if item is None:
        return None
    return _dispatch(SOUND_PATH_PARSERS, context, item)


def create_sound_paths(context, value):
    """Parse a ';'-separated sound list, skipping invalid items."""
    handles = (parse_sound_path(context, item) for item in _split_list(value))
    return tuple(h for h in handles if h is not None)


# ── Volume ────────────────────────────────────────────────────────────

def _volume_from_profile(context, value):
    parsed = parse_profile_key(value)
    if parsed is None:
        return None
    key, profile = parsed
    return context.volumes.intern(VolumeProfile(profile=profile, key=key))


def _volume_from_fixed(context, value):
    return context.volumes.intern(FixedVolume(level=atoi(value)))


def _volume_from_linear(context, value):
    fields = value.split(LIST_SEPARATOR)
    if len(fields) < 3:
        return None
    linear = tuple(atoi(f) for f in fields[:3])
    return context.volumes.intern(LinearVolume(linear=linear))


VOLUME_PARSERS = {
    'profile:': _volume_from_profile,
    'fixed:': _volume_from_fixed,
    'linear:': _volume_from_linear,
}


def create_volume(context, value):
    """Parse the whole volume value once; ';' only matters inside linear:."""
    if not value:
        return None
    return _dispatch(VOLUME_PARSERS, context, value)


# ── Vibration patterns ────────────────────────────────────────────────

def _pattern_from_profile(context, value):
    parsed = parse_profile_key(value)
    if parsed is None:
        return None
    key, profile = parsed
    return context.patterns.intern(PatternProfile(profile=profile, key=key))


def _pattern_from_filename(context, value):
    filename = check_path(value, context.patterns_path)
    if filename is None:
        return None
    return context.patterns.intern(PatternFile(filename=filename))


def _pattern_from_internal(context, value):
    return context.patterns.intern(InternalPattern(pattern=atoi(value)))


VIBRATION_PATTERN_PARSERS = {
    'profile:': _pattern_from_profile,
    'filename:': _pattern_from_filename,
    'internal:': _pattern_from_internal,
}


def parse_vibration_pattern(context, item):
    if item is None:
        return None
    return _dispatch(VIBRATION_PATTERN_PARSERS, context, item)


def create_patterns(context, value):
    """Parse a ';'-separated vibration pattern list, skipping invalid items."""
    handles = (parse_vibration_pattern(context, item)
               for item in _split_list(value))
    return tuple(h for h in handles if h is not None)

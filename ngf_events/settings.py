"""
Top-level loader: finds the active configuration and fills a Context with
general settings, definitions and compiled events.

Usage:
    context = Context()
    path = load_settings(context)                 # /etc/ngf/ngf.ini, ./ngf.ini
    load_settings_text(open('ngf.ini').read(), context)
"""
import warnings

from ngf_events.compiler import resolve_events
from ngf_events.data_model import (
    DEFAULT_CONF_FILES, GROUP_DEFINITION, GROUP_GENERAL, SYSTEM_VOLUME_SLOTS,
    Definition, InvalidPropertyWarning, SettingsNotFoundError,
)
from ngf_events.keyfile import KeyFile, KeyFileError
from ngf_events.parser import LIST_SEPARATOR, atoi, parse_group_header


def _optional(getter, group, key, default=None):
    """Read a general setting; absent gives default, malformed warns too."""
    try:
        return getter(group, key)
    except KeyFileError as e:
        if not e.is_absent:
            warnings.warn(f"Invalid value for setting {key}: {e}",
                          InvalidPropertyWarning, stacklevel=3)
        return default


# ── General settings ──────────────────────────────────────────────────

def parse_required_plugins(context, keyfile):
    value = _optional(keyfile.get_string, GROUP_GENERAL, 'plugins')
    if value:
        context.required_plugins = value.split()


def parse_system_volume(context, value):
    """Fill the system volume triple slot by slot from 'a;b;c'."""
    if not value:
        return
    fields = value.split(LIST_SEPARATOR)
    for i, item in enumerate(fields[:SYSTEM_VOLUME_SLOTS]):
        context.system_volume[i] = atoi(item)


def parse_general(context, keyfile):
    parse_required_plugins(context, keyfile)

    # Search paths already set on the context survive a config without them
    context.patterns_path = _optional(
        keyfile.get_string, GROUP_GENERAL, 'vibration_search_path',
        context.patterns_path)
    context.sound_path = _optional(
        keyfile.get_string, GROUP_GENERAL, 'sound_search_path',
        context.sound_path)
    context.audio_buffer_time = _optional(
        keyfile.get_integer, GROUP_GENERAL, 'buffer_time', 0)
    context.audio_latency_time = _optional(
        keyfile.get_integer, GROUP_GENERAL, 'latency_time', 0)

    parse_system_volume(
        context, _optional(keyfile.get_string, GROUP_GENERAL, 'system_volume'))


# ── Definitions ───────────────────────────────────────────────────────

def parse_definitions(context, keyfile):
    """Register a Definition for every 'definition <name>' group."""
    for group in keyfile.groups():
        header = parse_group_header(group)
        if header is None or header.kind != GROUP_DEFINITION:
            continue
        context.definitions[header.name] = Definition(
            long_event=_optional(keyfile.get_string, group, 'long'),
            short_event=_optional(keyfile.get_string, group, 'short'),
            meeting_event=_optional(keyfile.get_string, group, 'meeting'),
        )


# ── Entry points ──────────────────────────────────────────────────────

def load_keyfile(keyfile, context):
    parse_general(context, keyfile)
    parse_definitions(context, keyfile)
    resolve_events(keyfile, context)
    return context


def load_settings_text(text, context):
    """Load configuration text (no files needed) into ``context``."""
    return load_keyfile(KeyFile.from_text(text), context)


def load_settings(context, conf_files=None):
    """
    Load the first readable configuration among ``conf_files``.

    Args:
        context: Context to populate
        conf_files: candidate paths, defaults to DEFAULT_CONF_FILES

    Returns:
        path of the file that was loaded

    Raises:
        SettingsNotFoundError: no candidate could be read and parsed
    """
    if conf_files is None:
        conf_files = DEFAULT_CONF_FILES

    for path in conf_files:
        try:
            keyfile = KeyFile.from_file(path)
        except (OSError, UnicodeDecodeError, KeyFileError):
            continue
        load_keyfile(keyfile, context)
        return path

    raise SettingsNotFoundError(conf_files)

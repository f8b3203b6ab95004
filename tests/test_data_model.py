import dataclasses

import pytest

from ngf_events.data_model import (
    EVENT_ENTRIES, KeyType, Context, Event, Definition, ResourceRegistry,
    SoundProfile, SoundFile, VolumeProfile, FixedVolume, LinearVolume,
    InternalPattern, EventCycleError, SettingsNotFoundError,
)


def test_key_type_enum():
    assert KeyType.STRING == 0
    assert KeyType.INT == 1
    assert KeyType.BOOL == 2


def test_event_entries_schema():
    keys = [e.key for e in EVENT_ENTRIES]
    assert len(keys) == 18
    assert len(set(keys)) == 18
    assert keys[0] == 'max_timeout'
    assert keys[-1] == 'backlight_enabled'

    by_key = {e.key: e for e in EVENT_ENTRIES}
    assert by_key['audio_tonegen_pattern'].default == -1
    assert by_key['sound'].type == KeyType.STRING
    assert by_key['audio_enabled'].type == KeyType.BOOL
    assert by_key['audio_max_repeats'].type == KeyType.INT


def test_event_defaults():
    ev = Event()
    assert ev.audio_enabled is False
    assert ev.tone_generator_pattern == -1
    assert ev.sounds == ()
    assert ev.volume is None
    assert ev.patterns == ()


def test_event_is_immutable():
    ev = Event(max_timeout=10)
    with pytest.raises(dataclasses.FrozenInstanceError):
        ev.max_timeout = 20
    replaced = ev.replace(max_timeout=20)
    assert replaced.max_timeout == 20
    assert ev.max_timeout == 10


def test_descriptors_compare_by_value():
    assert SoundProfile(profile='general', key='tone') == SoundProfile(profile='general', key='tone')
    assert FixedVolume(level=3) != FixedVolume(level=4)
    # Same payload, different variant
    assert SoundProfile(profile='p', key='k') != VolumeProfile(profile='p', key='k')
    assert LinearVolume(linear=(1, 2, 3)).level == 100


def test_registry_interns_equal_descriptors():
    registry = ResourceRegistry()
    first = registry.intern(SoundFile(filename='/tmp/a.wav'))
    second = registry.intern(SoundFile(filename='/tmp/a.wav'))
    other = registry.intern(SoundFile(filename='/tmp/b.wav'))
    assert first is second
    assert other is not first
    assert len(registry) == 2
    assert list(registry) == [first, other]
    assert SoundFile(filename='/tmp/b.wav') in registry


def test_context_defaults_are_independent():
    a = Context()
    b = Context()
    a.system_volume[0] = 5
    a.required_plugins.append('gst')
    assert b.system_volume == [0, 0, 0]
    assert b.required_plugins == []
    assert a.sound_paths is not b.sound_paths


def test_context_event_lookup():
    ctx = Context()
    ctx.events['ring'] = Event(audio_enabled=True)
    assert ctx.event('ring').audio_enabled is True
    with pytest.raises(KeyError, match="Unknown event"):
        ctx.event('missing')


def test_definition():
    d = Definition(long_event='ringtone')
    assert d.short_event is None
    assert d.long_event == 'ringtone'


def test_error_messages():
    err = EventCycleError(['a', 'b', 'a'])
    assert isinstance(err, ValueError)
    assert 'a -> b -> a' in str(err)

    missing = SettingsNotFoundError(['/etc/ngf/ngf.ini', './ngf.ini'])
    assert isinstance(missing, FileNotFoundError)
    assert missing.candidates == ['/etc/ngf/ngf.ini', './ngf.ini']


def test_internal_pattern_hashable():
    assert len({InternalPattern(pattern=1), InternalPattern(pattern=1)}) == 1

#!/usr/bin/env python
"""
Compile a feedback configuration and print the resulting event registry as JSON.

Usage:
    python scripts/dump_events.py                      # /etc/ngf/ngf.ini, ./ngf.ini
    python scripts/dump_events.py --config my.ini      # explicit file
    python scripts/dump_events.py --event ringtone     # single event
"""

import argparse
import dataclasses
import json
import sys

from ngf_events.data_model import (
    Context, SettingsNotFoundError,
    SoundProfile, SoundFile,
    VolumeProfile, FixedVolume, LinearVolume,
    PatternProfile, PatternFile, InternalPattern,
)
from ngf_events.settings import load_settings

# Descriptor class → tag written to the "type" field
DESCRIPTOR_TYPES = {
    SoundProfile: 'profile',
    SoundFile: 'filename',
    VolumeProfile: 'profile',
    FixedVolume: 'fixed',
    LinearVolume: 'linear',
    PatternProfile: 'profile',
    PatternFile: 'filename',
    InternalPattern: 'internal',
}


def describe_resource(descriptor):
    if descriptor is None:
        return None
    out = {'type': DESCRIPTOR_TYPES[type(descriptor)]}
    for f in dataclasses.fields(descriptor):
        value = getattr(descriptor, f.name)
        out[f.name] = list(value) if isinstance(value, tuple) else value
    return out


def describe_event(event):
    out = {}
    for f in dataclasses.fields(event):
        value = getattr(event, f.name)
        if f.name in ('sounds', 'patterns'):
            value = [describe_resource(r) for r in value]
        elif f.name == 'volume':
            value = describe_resource(value)
        out[f.name] = value
    return out


def describe_context(context, event_names=None):
    names = event_names or sorted(context.events)
    return {
        'general': {
            'required_plugins': context.required_plugins,
            'sound_search_path': context.sound_path,
            'vibration_search_path': context.patterns_path,
            'buffer_time': context.audio_buffer_time,
            'latency_time': context.audio_latency_time,
            'system_volume': context.system_volume,
        },
        'definitions': {
            name: dataclasses.asdict(d)
            for name, d in sorted(context.definitions.items())
        },
        'events': {name: describe_event(context.event(name)) for name in names},
    }


def main():
    parser = argparse.ArgumentParser(description="Dump compiled feedback events")
    parser.add_argument("--config", action="append",
                        help="Configuration file (repeat to give fallbacks)")
    parser.add_argument("--event", action="append",
                        help="Only dump the named event (repeatable)")
    parser.add_argument("--indent", type=int, default=2)
    args = parser.parse_args()

    context = Context()
    try:
        path = load_settings(context, args.config)
    except SettingsNotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        report = describe_context(context, args.event)
    except KeyError as e:
        print(f"error: {e.args[0]}", file=sys.stderr)
        sys.exit(1)

    report['config'] = path
    json.dump(report, sys.stdout, indent=args.indent)
    print()


if __name__ == "__main__":
    main()

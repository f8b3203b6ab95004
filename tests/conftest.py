"""Shared test fixtures and constants for ngf-events tests."""
import os

import pytest

from ngf_events.data_model import Context
from ngf_events.keyfile import KeyFile
from ngf_events.settings import load_settings_text


DATA_DIR = os.path.join(os.path.dirname(__file__), 'data')
SAMPLE_CONFIG = os.path.join(DATA_DIR, 'ngf.ini')


def make_keyfile(text):
    """Parse configuration text into a KeyFile."""
    return KeyFile.from_text(text)


def load_text(text, context=None):
    """Load configuration text into a fresh (or given) Context."""
    if context is None:
        context = Context()
    return load_settings_text(text, context)


@pytest.fixture
def context():
    return Context()


@pytest.fixture
def media_dirs(tmp_path):
    """Sound and vibration search directories with a few existing files."""
    sounds = tmp_path / 'sounds'
    patterns = tmp_path / 'patterns'
    sounds.mkdir()
    patterns.mkdir()
    (sounds / 'ring.wav').write_bytes(b'')
    (sounds / 'beep.wav').write_bytes(b'')
    (patterns / 'buzz.ivt').write_bytes(b'')
    return sounds, patterns

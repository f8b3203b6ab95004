import pytest

from ngf_events.keyfile import KeyFile, KeyFileError, KeyFileErrorCode


SAMPLE = """
# leading comment
[general]
plugins = gst   resource
buffer_time=200

[event base]
audio_enabled = true
max_timeout = 12x
name = hello\\sworld\\n
bad_escape = a\\qb
flag = 0

[event base]
max_timeout = 5
"""


def test_groups_in_file_order():
    kf = KeyFile.from_text(SAMPLE)
    assert kf.groups() == ['general', 'event base']
    assert kf.has_group('general')
    assert not kf.has_group('event other')


def test_duplicate_group_merges_and_last_key_wins():
    kf = KeyFile.from_text(SAMPLE)
    assert kf.get_integer('event base', 'max_timeout') == 5
    assert kf.get_boolean('event base', 'audio_enabled') is True


def test_string_values_are_unescaped():
    kf = KeyFile.from_text(SAMPLE)
    assert kf.get_string('general', 'plugins') == 'gst   resource'
    assert kf.get_string('event base', 'name') == 'hello world\n'


def test_invalid_escape_is_invalid_value():
    kf = KeyFile.from_text(SAMPLE)
    with pytest.raises(KeyFileError) as exc:
        kf.get_string('event base', 'bad_escape')
    assert exc.value.code == KeyFileErrorCode.INVALID_VALUE
    assert not exc.value.is_absent


def test_integer_values():
    kf = KeyFile.from_text("[g]\na = 42\nb = -7\nc = 3.5\nd = 99999999999\n")
    assert kf.get_integer('g', 'a') == 42
    assert kf.get_integer('g', 'b') == -7
    for key in ('c', 'd'):
        with pytest.raises(KeyFileError) as exc:
            kf.get_integer('g', key)
        assert exc.value.code == KeyFileErrorCode.INVALID_VALUE


@pytest.mark.parametrize("raw,expected", [
    ('true', True), ('1', True), ('false', False), ('0', False),
])
def test_boolean_values(raw, expected):
    kf = KeyFile.from_text(f"[g]\nk = {raw}\n")
    assert kf.get_boolean('g', 'k') is expected


@pytest.mark.parametrize("raw", ['yes', 'True', 'on', '2'])
def test_boolean_rejects_other_spellings(raw):
    kf = KeyFile.from_text(f"[g]\nk = {raw}\n")
    with pytest.raises(KeyFileError) as exc:
        kf.get_boolean('g', 'k')
    assert exc.value.code == KeyFileErrorCode.INVALID_VALUE


def test_absent_group_and_key():
    kf = KeyFile.from_text(SAMPLE)
    with pytest.raises(KeyFileError) as exc:
        kf.get_string('nope', 'x')
    assert exc.value.code == KeyFileErrorCode.GROUP_NOT_FOUND
    assert exc.value.is_absent

    with pytest.raises(KeyFileError) as exc:
        kf.get_integer('general', 'latency_time')
    assert exc.value.code == KeyFileErrorCode.KEY_NOT_FOUND
    assert exc.value.is_absent


@pytest.mark.parametrize("text", [
    "key = value\n",              # key before any group
    "[g]\njust some words\n",     # missing '='
    "[g\nk = v\n",                # unterminated header
    "[g]\n = v\n",                # empty key
])
def test_parse_errors(text):
    with pytest.raises(KeyFileError) as exc:
        KeyFile.from_text(text)
    assert exc.value.code == KeyFileErrorCode.PARSE


def test_from_file(tmp_path):
    path = tmp_path / 'conf.ini'
    path.write_text("[event a]\nsound = profile:k@p\n", encoding='utf-8')
    kf = KeyFile.from_file(str(path))
    assert kf.keys('event a') == ['sound']
    assert kf.has_key('event a', 'sound')


def test_constructed_from_mapping():
    kf = KeyFile({'event a': {'max_timeout': '10'}})
    assert kf.get_integer('event a', 'max_timeout') == 10

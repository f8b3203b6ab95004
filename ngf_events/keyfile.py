"""
Reader for the key-value-by-section text format used by the feedback
configuration (GLib key-file style). Typed getters raise KeyFileError whose
code tells an absent key apart from a present but malformed value.
"""
import enum
import re
from typing import Dict, List

INT_PATTERN = re.compile(r'[+-]?\d+')
INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1

ESCAPES = {'s': ' ', 'n': '\n', 't': '\t', 'r': '\r', '\\': '\\'}

BOOL_VALUES = {'true': True, '1': True, 'false': False, '0': False}


class KeyFileErrorCode(enum.Enum):
    PARSE = 'parse'
    GROUP_NOT_FOUND = 'group_not_found'
    KEY_NOT_FOUND = 'key_not_found'
    INVALID_VALUE = 'invalid_value'


class KeyFileError(Exception):
    def __init__(self, code, message):
        self.code = code
        super().__init__(message)

    @property
    def is_absent(self):
        return self.code in (KeyFileErrorCode.GROUP_NOT_FOUND,
                             KeyFileErrorCode.KEY_NOT_FOUND)


class KeyFile:
    """Parsed sections: group name → {key: raw value}, in file order."""

    def __init__(self, groups=None):
        self._groups: Dict[str, Dict[str, str]] = {}
        for name, entries in (groups or {}).items():
            self._groups[name] = dict(entries)

    @classmethod
    def from_text(cls, text):
        kf = cls()
        current = None
        for lineno, line in enumerate(text.splitlines(), start=1):
            content = line.strip()
            if not content or content.startswith('#'):
                continue
            if content.startswith('['):
                if not content.endswith(']') or len(content) < 3:
                    raise KeyFileError(
                        KeyFileErrorCode.PARSE,
                        f"Line {lineno}: malformed group header {content!r}")
                current = content[1:-1]
                # A repeated group continues the earlier one
                kf._groups.setdefault(current, {})
                continue
            if '=' not in content:
                raise KeyFileError(
                    KeyFileErrorCode.PARSE,
                    f"Line {lineno}: expected key=value, got {content!r}")
            if current is None:
                raise KeyFileError(
                    KeyFileErrorCode.PARSE,
                    f"Line {lineno}: key outside of any group")
            key, value = line.lstrip().split('=', 1)
            key = key.rstrip()
            if not key:
                raise KeyFileError(
                    KeyFileErrorCode.PARSE, f"Line {lineno}: empty key")
            kf._groups[current][key] = value.strip()
        return kf

    @classmethod
    def from_file(cls, path):
        with open(path, encoding='utf-8') as f:
            return cls.from_text(f.read())

    # ── Introspection ─────────────────────────────────────────────────

    def groups(self) -> List[str]:
        return list(self._groups)

    def has_group(self, group):
        return group in self._groups

    def keys(self, group) -> List[str]:
        return list(self._lookup_group(group))

    def has_key(self, group, key):
        return key in self._groups.get(group, {})

    # ── Typed getters ─────────────────────────────────────────────────

    def get_value(self, group, key) -> str:
        entries = self._lookup_group(group)
        if key not in entries:
            raise KeyFileError(
                KeyFileErrorCode.KEY_NOT_FOUND,
                f"Key {key!r} not found in group {group!r}")
        return entries[key]

    def get_string(self, group, key) -> str:
        return _unescape(self.get_value(group, key), key)

    def get_integer(self, group, key) -> int:
        raw = self.get_value(group, key).rstrip()
        if not INT_PATTERN.fullmatch(raw):
            raise KeyFileError(
                KeyFileErrorCode.INVALID_VALUE,
                f"Value {raw!r} for key {key!r} is not an integer")
        value = int(raw)
        if not INT32_MIN <= value <= INT32_MAX:
            raise KeyFileError(
                KeyFileErrorCode.INVALID_VALUE,
                f"Value {raw!r} for key {key!r} is out of range")
        return value

    def get_boolean(self, group, key) -> bool:
        raw = self.get_value(group, key).rstrip()
        if raw not in BOOL_VALUES:
            raise KeyFileError(
                KeyFileErrorCode.INVALID_VALUE,
                f"Value {raw!r} for key {key!r} is not a boolean")
        return BOOL_VALUES[raw]

    def _lookup_group(self, group):
        try:
            return self._groups[group]
        except KeyError:
            raise KeyFileError(
                KeyFileErrorCode.GROUP_NOT_FOUND,
                f"Group {group!r} not found") from None


def _unescape(raw, key):
    out = []
    i = 0
    while i < len(raw):
        c = raw[i]
        if c != '\\':
            out.append(c)
            i += 1
            continue
        nxt = raw[i + 1] if i + 1 < len(raw) else ''
        if nxt not in ESCAPES:
            raise KeyFileError(
                KeyFileErrorCode.INVALID_VALUE,
                f"Invalid escape sequence in value for key {key!r}")
        out.append(ESCAPES[nxt])
        i += 2
    return ''.join(out)

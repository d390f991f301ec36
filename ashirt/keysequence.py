"""Parsing and formatting of hotkey combinations such as ``Ctrl+Shift+A``."""

from __future__ import annotations

import logging
import string
from enum import IntEnum, IntFlag
from typing import Iterable, Union

log = logging.getLogger(__name__)

_SPECIAL_KEYS = {
    "ESCAPE": 0x01000000,
    "TAB": 0x01000001,
    "BACKTAB": 0x01000002,
    "BACKSPACE": 0x01000003,
    "RETURN": 0x01000004,
    "ENTER": 0x01000005,
    "INSERT": 0x01000006,
    "DELETE": 0x01000007,
    "PAUSE": 0x01000008,
    "PRINT": 0x01000009,
    "SYSREQ": 0x0100000A,
    "CLEAR": 0x0100000B,
    "HOME": 0x01000010,
    "END": 0x01000011,
    "LEFT": 0x01000012,
    "UP": 0x01000013,
    "RIGHT": 0x01000014,
    "DOWN": 0x01000015,
    "PAGE_UP": 0x01000016,
    "PAGE_DOWN": 0x01000017,
    "SHIFT": 0x01000020,
    "CONTROL": 0x01000021,
    "META": 0x01000022,
    "ALT": 0x01000023,
    "SPACE": 0x20,
    "UNKNOWN": 0x01FFFFFF,
}

_F1 = 0x01000030
_FUNCTION_KEYS = {f"F{n}": _F1 + n - 1 for n in range(1, 36)}
_LETTER_KEYS = {letter: ord(letter) for letter in string.ascii_uppercase}

Key = IntEnum("Key", {**_SPECIAL_KEYS, **_FUNCTION_KEYS, **_LETTER_KEYS})
Key.__doc__ = "Key codes; printable characters use the code of their upper-case form."


class Modifier(IntFlag):
    """Keyboard modifier flags."""

    NONE = 0
    SHIFT = 0x02000000
    CONTROL = 0x04000000
    ALT = 0x08000000
    META = 0x10000000


_MODIFIER_KEYS = (Key.SHIFT, Key.CONTROL, Key.ALT, Key.META)

_MODIFIER_NAMES = {
    "alt": Key.ALT,
    "shift": Key.SHIFT,
    "shft": Key.SHIFT,
    "control": Key.CONTROL,
    "ctrl": Key.CONTROL,
    "win": Key.META,
    "meta": Key.META,
}

_DISPLAY_NAMES = {
    Key.SHIFT: "Shift",
    Key.CONTROL: "Ctrl",
    Key.ALT: "Alt",
    Key.META: "Meta",
    Key.ESCAPE: "Esc",
    Key.TAB: "Tab",
    Key.BACKTAB: "Backtab",
    Key.BACKSPACE: "Backspace",
    Key.RETURN: "Return",
    Key.ENTER: "Enter",
    Key.INSERT: "Ins",
    Key.DELETE: "Del",
    Key.PAUSE: "Pause",
    Key.PRINT: "Print",
    Key.SYSREQ: "SysReq",
    Key.CLEAR: "Clear",
    Key.HOME: "Home",
    Key.END: "End",
    Key.LEFT: "Left",
    Key.UP: "Up",
    Key.RIGHT: "Right",
    Key.DOWN: "Down",
    Key.PAGE_UP: "PgUp",
    Key.PAGE_DOWN: "PgDown",
    Key.SPACE: "Space",
}

_NAMED_KEYS = {name.lower(): key for key, name in _DISPLAY_NAMES.items() if key not in _MODIFIER_KEYS}
_NAMED_KEYS.update(
    {
        "escape": Key.ESCAPE,
        "insert": Key.INSERT,
        "delete": Key.DELETE,
        "pageup": Key.PAGE_UP,
        "pagedown": Key.PAGE_DOWN,
    }
)
_NAMED_KEYS.update({name.lower(): code for name, code in _FUNCTION_KEYS.items()})


def _parse_key(name: str) -> int | None:
    named = _NAMED_KEYS.get(name.lower())
    if named is not None:
        return int(named)
    if len(name) == 1 and name.isprintable() and not name.isspace():
        return ord(name.upper())
    return None


def _key_to_str(key: int) -> str:
    try:
        return _DISPLAY_NAMES[Key(key)]
    except (ValueError, KeyError):
        pass
    if _F1 <= key < _F1 + 35:
        return f"F{key - _F1 + 1}"
    try:
        return chr(key)
    except (ValueError, OverflowError):
        return ""


def _is_modifier(key: int) -> bool:
    return key in _MODIFIER_KEYS


KeyLike = Union[int, "Key"]


class KeySequence:
    """An ordered set of keys making up one hotkey combination."""

    def __init__(self, text: str = "") -> None:
        self._keys: list[int] = []
        if text:
            for name in text.split("+"):
                self.add_key_name(name)

    def add_key(self, key: KeyLike) -> None:
        """Add a key by code; non-positive codes and duplicates are ignored."""
        code = int(key)
        if code <= 0 or code in self._keys:
            return
        self._keys.append(code)

    def add_key_name(self, name: str) -> None:
        """Add a key by name (``Ctrl``, ``F5``, ``a``); unrecognised names are logged and skipped."""
        if "+" in name or "," in name:
            log.warning("Wrong key: %r", name)
            return
        modifier = _MODIFIER_NAMES.get(name.lower())
        if modifier is not None:
            self.add_key(modifier)
            return
        code = _parse_key(name)
        if code is None:
            log.warning("Wrong key: %r", name)
            return
        self.add_key(code)

    def add_modifiers(self, modifiers: Modifier | int) -> None:
        """Add the modifier keys set in ``modifiers``, in Shift, Ctrl, Alt, Meta order."""
        flags = Modifier(modifiers)
        for flag, key in (
            (Modifier.SHIFT, Key.SHIFT),
            (Modifier.CONTROL, Key.CONTROL),
            (Modifier.ALT, Key.ALT),
            (Modifier.META, Key.META),
        ):
            if flags & flag:
                self.add_key(key)

    def simple_keys(self) -> list[int]:
        """Return the non-modifier keys in the order they were added."""
        return [key for key in self._keys if not _is_modifier(key)]

    def modifiers(self) -> list[int]:
        """Return the modifier keys in the order they were added."""
        return [key for key in self._keys if _is_modifier(key)]

    def __len__(self) -> int:
        return len(self._keys)

    def __getitem__(self, index: int) -> int:
        """Return the key at ``index``, or ``Key.UNKNOWN`` when out of range."""
        if -len(self._keys) <= index < len(self._keys):
            return self._keys[index]
        return Key.UNKNOWN

    def __iter__(self) -> Iterable[int]:
        return iter(list(self._keys))

    def __str__(self) -> str:
        return "+".join(_key_to_str(key) for key in [*self.modifiers(), *self.simple_keys()])
"""Key notation handling.

Mappings are written in Vim notation (``<C-o>``, ``<CR>``, ``gg``) and turned
into tuples of canonical key names. Canonical names follow Textual's naming
for special keys (``ctrl+o``, ``enter``, ``escape``) and use the literal
character for printable keys (``g``, ``G``, ``.``).
"""

import re
from typing import Optional, Tuple

KeySequence = Tuple[str, ...]

# Vim key names (lower-cased) -> canonical key
NAMED_KEYS = {
    "cr": "enter",
    "enter": "enter",
    "return": "enter",
    "esc": "escape",
    "escape": "escape",
    "tab": "tab",
    "space": "space",
    "bs": "backspace",
    "backspace": "backspace",
    "del": "delete",
    "delete": "delete",
    "up": "up",
    "down": "down",
    "left": "left",
    "right": "right",
    "home": "home",
    "end": "end",
    "pageup": "pageup",
    "pagedown": "pagedown",
    "insert": "insert",
    "lt": "<",
    "bar": "|",
    "bslash": "\\",
}

MODIFIERS = {
    "c": "ctrl",
    "s": "shift",
    "m": "alt",
    "a": "alt",
}

# Control combinations a terminal cannot tell apart from another key
CONTROL_ALIASES = {
    "ctrl+i": "tab",
    "ctrl+m": "enter",
    "ctrl+[": "escape",
}

_TOKEN_RE = re.compile(r"<[^<>]+>|.", re.DOTALL)
_FUNCTION_KEY_RE = re.compile(r"^f([1-9]|1[0-9]|2[0-4])$")


def _parse_bracketed(inner: str) -> Optional[str]:
    """Canonicalize the inside of a ``<...>`` token, or None if unknown."""
    parts = inner.split("-")
    # "<C-->" means ctrl plus minus
    if inner.endswith("--"):
        parts = parts[:-2] + ["-"]
    *mods, name = parts
    if not name:
        return None

    modifiers = []
    for mod in mods:
        canonical = MODIFIERS.get(mod.lower())
        if canonical is None:
            return None
        if canonical not in modifiers:
            modifiers.append(canonical)

    lowered = name.lower()
    if lowered in NAMED_KEYS:
        key = NAMED_KEYS[lowered]
    elif _FUNCTION_KEY_RE.match(lowered):
        key = lowered
    elif len(name) == 1:
        key = name.lower() if modifiers else name
    else:
        return None

    if not modifiers:
        return key

    # Shift on a single printable character is the character itself
    if modifiers == ["shift"] and len(key) == 1:
        return key.upper()

    order = ["ctrl", "alt", "shift"]
    modifiers.sort(key=order.index)
    combo = "+".join(modifiers + [key])
    return CONTROL_ALIASES.get(combo, combo)


def parse_keys(notation: Optional[str]) -> Optional[KeySequence]:
    """Parse a Vim-notation key string into a canonical key sequence.

    Args:
        notation: Mapping value such as ``"<C-o>"``, ``"gg"`` or ``"p"``

    Returns:
        Tuple of canonical keys, or None when the notation is empty or
        contains an unknown ``<...>`` name
    """
    if notation is None or not isinstance(notation, str):
        return None
    if notation == "":
        return None

    keys = []
    for token in _TOKEN_RE.findall(notation):
        if len(token) > 2 and token.startswith("<") and token.endswith(">"):
            key = _parse_bracketed(token[1:-1])
            if key is None:
                return None
        elif token == " ":
            key = "space"
        else:
            key = token
        keys.append(key)

    if not keys:
        return None
    return tuple(keys)


def from_textual(key: str, character: Optional[str]) -> str:
    """Canonical key for a Textual key event.

    Printable single characters map to themselves so that ``G`` and ``.``
    compare equal to their mapping notation; everything else keeps Textual's
    key name.
    """
    if character and len(character) == 1 and character.isprintable() and character != " ":
        return character
    return CONTROL_ALIASES.get(key, key)


def describe(keys: KeySequence) -> str:
    """Human-readable form of a key sequence, for hints and logs."""
    return " ".join(keys)

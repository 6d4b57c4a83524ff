"""Left-to-right → right-to-left stylesheet mirroring.

Text-level rewrite in the spirit of cssjanus: declarations inside rule blocks
are mirrored, everything else (selectors, at-rule preludes, comments, strings
and url() references) is left byte-for-byte intact. A ``/* @noflip */``
comment in front of a rule or a declaration exempts it.
"""

from __future__ import annotations

import re

_PLACEHOLDER = "\x00{}\x00"
_PLACEHOLDER_RE = re.compile(r"\x00(\d+)\x00")

_NOFLIP_RULE_RE = re.compile(r"/\*\s*@noflip\s*\*/\s*[^{};]*\{[^}]*\}", re.IGNORECASE)
_NOFLIP_DECL_RE = re.compile(r"/\*\s*@noflip\s*\*/[^;}]*", re.IGNORECASE)
_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_STRING_RE = re.compile(r'"(?:[^"\\\n]|\\.)*"|\'(?:[^\'\\\n]|\\.)*\'')
_URL_RE = re.compile(r"url\([^)]*\)", re.IGNORECASE)

_BLOCK_RE = re.compile(r"\{([^{}]*)\}")
_DECLARATION_RE = re.compile(
    r"^(\s*(?:\x00\d+\x00\s*)*)(-{0,2}[A-Za-z_][-\w]*)(\s*:\s*)(.*?)(\s*)$",
    re.DOTALL,
)
_IMPORTANT_RE = re.compile(r"\s*!\s*important$", re.IGNORECASE)

_DIRECTION_WORD_RE = re.compile(r"(?<![A-Za-z])(left|right|ltr|rtl)(?![A-Za-z])", re.IGNORECASE)
_DIRECTION_SWAPS = {"left": "right", "right": "left", "ltr": "rtl", "rtl": "ltr"}

_CURSOR_RE = re.compile(r"(?<![A-Za-z-])(n|s)?(e|w)-resize", re.IGNORECASE)
_NUMBER_RE = re.compile(r"^([-+]?)(\d*\.?\d+)([A-Za-z%]*)$")
_PERCENT_RE = re.compile(r"^([-+]?\d*\.?\d+)%$")

FOUR_VALUE_PROPERTIES = frozenset(
    {
        "margin",
        "padding",
        "border-width",
        "border-style",
        "border-color",
        "inset",
        "scroll-margin",
        "scroll-padding",
    }
)
SHADOW_PROPERTIES = frozenset({"box-shadow", "text-shadow"})
BACKGROUND_POSITION_PROPERTIES = frozenset({"background-position", "background-position-x"})


class _Protector:
    """Swap untouchable fragments for placeholders and restore them later."""

    def __init__(self) -> None:
        self._fragments: list[str] = []

    def protect(self, pattern: re.Pattern[str], text: str) -> str:
        return pattern.sub(self._store, text)

    def _store(self, match: re.Match[str]) -> str:
        self._fragments.append(match.group(0))
        return _PLACEHOLDER.format(len(self._fragments) - 1)

    def restore(self, text: str) -> str:
        # Fragments may nest (a noflip rule containing a string), so loop
        while _PLACEHOLDER_RE.search(text):
            text = _PLACEHOLDER_RE.sub(lambda m: self._fragments[int(m.group(1))], text)
        return text


def _split_top_level(value: str, separator: str | None) -> list[str]:
    """Split on a separator (None: whitespace) outside parentheses."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in value:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        is_sep = char.isspace() if separator is None else char == separator
        if is_sep and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    if separator is None:
        return [p for p in parts if p]
    return parts


def _swap_case_aware(word: str, replacement: str) -> str:
    if word.isupper():
        return replacement.upper()
    if word[0].isupper():
        return replacement.capitalize()
    return replacement


def swap_direction_words(text: str) -> str:
    """Swap left↔right and ltr↔rtl wherever they stand as whole words."""
    return _DIRECTION_WORD_RE.sub(
        lambda m: _swap_case_aware(m.group(0), _DIRECTION_SWAPS[m.group(0).lower()]),
        text,
    )


def _flip_four_values(value: str) -> str:
    tokens = _split_top_level(value, None)
    if len(tokens) != 4 or tokens[1] == tokens[3]:
        return value
    top, right, bottom, left = tokens
    return " ".join([top, left, bottom, right])


def _flip_radius_side(side: str) -> str:
    tokens = _split_top_level(side, None)
    if len(tokens) == 2:
        flipped = [tokens[1], tokens[0]]
    elif len(tokens) == 3:
        flipped = [tokens[1], tokens[0], tokens[1], tokens[2]]
    elif len(tokens) == 4:
        flipped = [tokens[1], tokens[0], tokens[3], tokens[2]]
    else:
        return side
    if _normalize_radius(flipped) == _normalize_radius(tokens):
        return side
    return " ".join(flipped)


def _normalize_radius(tokens: list[str]) -> list[str]:
    """Expand 1-4 radius tokens to the explicit four-corner form."""
    if len(tokens) == 1:
        return tokens * 4
    if len(tokens) == 2:
        return [tokens[0], tokens[1], tokens[0], tokens[1]]
    if len(tokens) == 3:
        return [tokens[0], tokens[1], tokens[2], tokens[1]]
    return tokens


def _flip_border_radius(value: str) -> str:
    sides = _split_top_level(value, "/")
    if len(sides) > 2:
        return value
    flipped = [_flip_radius_side(side.strip()) for side in sides]
    if all(new == old.strip() for new, old in zip(flipped, sides)):
        return value
    return " / ".join(flipped)


def _negate(token: str) -> str | None:
    match = _NUMBER_RE.match(token)
    if not match:
        return None
    sign, number, unit = match.groups()
    if float(number) == 0:
        return token
    return f"{number}{unit}" if sign == "-" else f"-{number}{unit}"


def _flip_shadow(value: str) -> str:
    shadows = _split_top_level(value, ",")
    changed = False
    flipped_shadows: list[str] = []
    for shadow in shadows:
        tokens = _split_top_level(shadow, None)
        for index, token in enumerate(tokens):
            negated = _negate(token)
            if negated is None:
                continue
            if negated != token:
                tokens[index] = negated
                changed = True
            break
        flipped_shadows.append(" ".join(tokens))
    if not changed:
        return value
    return ", ".join(flipped_shadows)


def _format_number(number: float) -> str:
    return f"{number:f}".rstrip("0").rstrip(".")


def _flip_background_position(value: str) -> str:
    layers = _split_top_level(value, ",")
    changed = False
    flipped_layers: list[str] = []
    for layer in layers:
        tokens = _split_top_level(layer, None)
        match = _PERCENT_RE.match(tokens[0]) if tokens else None
        if match:
            mirrored = f"{_format_number(100 - float(match.group(1)))}%"
            if mirrored != tokens[0] and float(match.group(1)) != 50:
                tokens[0] = mirrored
                changed = True
        flipped_layers.append(" ".join(tokens))
    if not changed:
        return value
    return ", ".join(flipped_layers)


def _flip_cursor(value: str) -> str:
    def _swap(match: re.Match[str]) -> str:
        vertical, horizontal = match.group(1) or "", match.group(2)
        mirrored = {"e": "w", "w": "e", "E": "W", "W": "E"}[horizontal]
        return f"{vertical}{mirrored}-resize"

    return _CURSOR_RE.sub(_swap, value)


def flip_declaration(prop: str, value: str) -> tuple[str, str]:
    """Mirror one ``property: value`` pair."""
    important = _IMPORTANT_RE.search(value)
    suffix = important.group(0) if important else ""
    core = value[: len(value) - len(suffix)] if suffix else value

    name = prop.lower()
    if name in FOUR_VALUE_PROPERTIES:
        core = _flip_four_values(core)
    elif name == "border-radius" or name.endswith("-border-radius"):
        core = _flip_border_radius(core)
    elif name in SHADOW_PROPERTIES or name.endswith("-box-shadow"):
        core = _flip_shadow(core)
    elif name in BACKGROUND_POSITION_PROPERTIES:
        core = _flip_background_position(core)
    elif name == "cursor":
        core = _flip_cursor(core)

    return swap_direction_words(prop), swap_direction_words(core) + suffix


def _flip_block(match: re.Match[str]) -> str:
    declarations = match.group(1).split(";")
    flipped: list[str] = []
    for declaration in declarations:
        parsed = _DECLARATION_RE.match(declaration)
        if not parsed:
            flipped.append(declaration)
            continue
        lead, prop, colon, value, trail = parsed.groups()
        new_prop, new_value = flip_declaration(prop, value)
        flipped.append(f"{lead}{new_prop}{colon}{new_value}{trail}")
    return "{" + ";".join(flipped) + "}"


def transform(css: str) -> str:
    """Return the right-to-left mirror of a stylesheet.

    Direction-neutral input is returned unchanged.
    """
    protector = _Protector()
    text = protector.protect(_NOFLIP_RULE_RE, css)
    text = protector.protect(_NOFLIP_DECL_RE, text)
    text = protector.protect(_COMMENT_RE, text)
    text = protector.protect(_STRING_RE, text)
    text = protector.protect(_URL_RE, text)

    text = _BLOCK_RE.sub(_flip_block, text)

    return protector.restore(text)

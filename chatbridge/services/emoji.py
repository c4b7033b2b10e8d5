"""
Emoji conversion between Slack short names and Unicode.

Also owns the storage key used for reaction aggregates: every code point
of the emoji, hex encoded and joined with underscores behind a ``u``
prefix. Because each code point is delimited the encoding is injective
for any code-point sequence, ZWJ sequences and combining marks included.
"""

import re

from chatbridge.services.emoji_map import EMOJI_BY_NAME

VARIATION_SELECTOR_16 = "\ufe0f"
SKIN_TONE_MODIFIERS = frozenset(chr(cp) for cp in range(0x1F3FB, 0x1F400))

# Slack appends "::skin-tone-2" .. "::skin-tone-6" to reaction names
_SKIN_TONE_SUFFIX = re.compile(r"::skin-tone-\d$")
_SHORTCODE = re.compile(r":([a-z0-9_+\-]+)(?:::skin-tone-\d)?:")
_REACTION_KEY = re.compile(r"^u(?:[0-9a-f]+(?:_[0-9a-f]+)*)?$")


def _strip_modifiers(emoji: str) -> str:
    return "".join(ch for ch in emoji if ch not in SKIN_TONE_MODIFIERS and ch != VARIATION_SELECTOR_16)


def _build_reverse_map() -> dict[str, str]:
    reverse: dict[str, str] = {}
    # Exact characters first, first name listed wins; later entries are aliases
    for name, emoji in EMOJI_BY_NAME.items():
        reverse.setdefault(emoji, name)
    for name, emoji in EMOJI_BY_NAME.items():
        reverse.setdefault(_strip_modifiers(emoji), name)
    return reverse


NAME_BY_EMOJI: dict[str, str] = _build_reverse_map()


def normalize_name(name: str) -> str:
    """Strip surrounding colons and any skin-tone suffix from a Slack name."""
    name = name.strip().strip(":")
    return _SKIN_TONE_SUFFIX.sub("", name)


def emoji_from_name(name: str) -> str:
    """Convert a Slack short name to Unicode.

    Unknown names come back wrapped in colons so they stay visible.
    """
    clean = normalize_name(name)
    emoji = EMOJI_BY_NAME.get(clean)
    if emoji is None:
        return f":{clean}:"
    return emoji


def name_from_emoji(emoji: str) -> str | None:
    """Convert Unicode to the canonical Slack short name, or None if unmapped."""
    if not emoji:
        return None
    symbol = emoji.strip()
    name = NAME_BY_EMOJI.get(symbol)
    if name is None:
        name = NAME_BY_EMOJI.get(_strip_modifiers(symbol))
    return name


def slack_reaction_name(emoji: str) -> str:
    """Name to send to reactions.add/remove; unmapped emoji pass through raw."""
    if emoji.startswith(":") and emoji.endswith(":") and len(emoji) > 2:
        return normalize_name(emoji)
    return name_from_emoji(emoji) or emoji


def emojize(text: str) -> str:
    """Replace known ``:name:`` shortcodes in text with Unicode."""
    if not text or ":" not in text:
        return text

    def _replace(match: re.Match[str]) -> str:
        return EMOJI_BY_NAME.get(match.group(1), match.group(0))

    return _SHORTCODE.sub(_replace, text)


def reaction_key(emoji: str | None) -> str:
    """Storage-safe key for an emoji: ``u`` + hex code points joined by ``_``."""
    symbol = (emoji or "").strip()
    if not symbol:
        return "u"
    return "u" + "_".join(format(ord(ch), "x") for ch in symbol)


def emoji_from_reaction_key(key: str) -> str:
    """Inverse of reaction_key."""
    if not _REACTION_KEY.match(key):
        raise ValueError(f"Malformed reaction key: {key!r}")
    body = key[1:]
    if not body:
        return ""
    return "".join(chr(int(part, 16)) for part in body.split("_"))

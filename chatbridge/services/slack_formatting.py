"""
Convert message text between Slack mrkdwn and the Markdown used internally.

Uses the "protected regions" pattern: code blocks, inline code and
converted links are replaced with placeholders before the emphasis passes
run, then restored, so regex replacements never mangle their content.

Slack -> Markdown:
    <@U123>            -> @slack-user
    <#C123|general>    -> #general
    <url|label>        -> [label](url)
    <url>              -> url
    *bold*             -> **bold**
    _italic_           -> *italic*
    ~strike~           -> ~~strike~~
    :shortcode:        -> Unicode emoji (known names only)

Markdown -> Slack is the inverse of the above. Mentions are not mapped
back since no identity is shared between the two directories.
"""

import re

from chatbridge.services.emoji import emojize

SLACK_USER_PLACEHOLDER = "@slack-user"

# Placeholder prefix unlikely to appear in real text
_PH = "\x00PH"
# Marks converted bold while the italic pass runs
_BOLD = "\x01"

_FENCED_CODE = re.compile(r"```[\s\S]*?```")
_INLINE_CODE = re.compile(r"`[^`\n]+`")

_SLACK_USER_MENTION = re.compile(r"<@[UW][A-Z0-9]+(?:\|[^>]*)?>")
_SLACK_CHANNEL_NAMED = re.compile(r"<#[CG][A-Z0-9]+\|([^>]+)>")
_SLACK_CHANNEL_BARE = re.compile(r"<#[CG][A-Z0-9]+>")
_SLACK_SPECIAL = re.compile(r"<!(here|channel|everyone)(?:\|[^>]*)?>")
_SLACK_LINK_LABELED = re.compile(r"<((?:https?://|mailto:)[^|>]+)\|([^>]+)>")
_SLACK_LINK_BARE = re.compile(r"<((?:https?://|mailto:)[^|>]+)>")

_SLACK_BOLD = re.compile(r"(?<![\w*])\*([^\s*](?:[^*\n]*[^\s*])?)\*(?![\w*])")
_SLACK_ITALIC = re.compile(r"(?<![\w_])_([^\s_](?:[^_\n]*[^\s_])?)_(?![\w_])")
_SLACK_STRIKE = re.compile(r"(?<![\w~])~([^\s~](?:[^~\n]*[^\s~])?)~(?![\w~])")

_MD_LINK = re.compile(r"\[([^\]\n]+)\]\(([^)\s]+)\)")
_MD_BOLD = re.compile(r"\*\*([^*\n]+?)\*\*|__([^_\n]+?)__")
_MD_ITALIC = re.compile(r"(?<![\w*])\*([^\s*](?:[^*\n]*[^\s*])?)\*(?![\w*])")
_MD_STRIKE = re.compile(r"~~([^~\n]+?)~~")


class _Regions:
    """Numbered placeholders for text that must survive conversion untouched."""

    def __init__(self) -> None:
        self.items: list[str] = []

    def stash(self, value: str) -> str:
        idx = len(self.items)
        self.items.append(value)
        return f"{_PH}{idx}{_PH}"

    def restore(self, text: str, transform=None) -> str:
        # Restore in reverse so nested placeholders resolve
        for idx in range(len(self.items) - 1, -1, -1):
            value = self.items[idx]
            if transform is not None:
                value = transform(value)
            text = text.replace(f"{_PH}{idx}{_PH}", value)
        return text


def _protect_code(text: str, regions: _Regions) -> str:
    text = _FENCED_CODE.sub(lambda m: regions.stash(m.group(0)), text)
    return _INLINE_CODE.sub(lambda m: regions.stash(m.group(0)), text)


def unescape_slack(text: str) -> str:
    """Undo Slack's control-character escaping."""
    return text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


def escape_slack(text: str) -> str:
    """Escape the three characters Slack reserves for markup."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def slack_to_markdown(text: str | None) -> str:
    """Convert Slack mrkdwn to internal Markdown."""
    if not text:
        return ""

    regions = _Regions()
    result = _protect_code(text, regions)

    # Mentions: no cross-directory identity resolution
    result = _SLACK_USER_MENTION.sub(SLACK_USER_PLACEHOLDER, result)
    result = _SLACK_CHANNEL_NAMED.sub(r"#\1", result)
    result = _SLACK_CHANNEL_BARE.sub("#channel", result)
    result = _SLACK_SPECIAL.sub(r"@\1", result)

    # Links are stashed so underscores/asterisks in URLs are not emphasis
    result = _SLACK_LINK_LABELED.sub(
        lambda m: regions.stash(f"[{m.group(2)}]({m.group(1)})"), result
    )
    result = _SLACK_LINK_BARE.sub(lambda m: regions.stash(m.group(1)), result)

    # Emphasis: bold before italic so the new ** is not re-read
    result = _SLACK_BOLD.sub(r"**\1**", result)
    result = _SLACK_ITALIC.sub(r"*\1*", result)
    result = _SLACK_STRIKE.sub(r"~~\1~~", result)

    result = emojize(result)
    result = unescape_slack(result)
    return regions.restore(result, transform=unescape_slack)


def markdown_to_slack(text: str | None) -> str:
    """Convert internal Markdown to Slack mrkdwn."""
    if not text:
        return ""

    regions = _Regions()
    result = _protect_code(text, regions)
    code_count = len(regions.items)

    result = _MD_LINK.sub(lambda m: regions.stash(f"<{m.group(2)}|{escape_slack(m.group(1))}>"), result)

    result = _MD_BOLD.sub(lambda m: f"{_BOLD}{m.group(1) or m.group(2)}{_BOLD}", result)
    result = _MD_ITALIC.sub(r"_\1_", result)
    result = result.replace(_BOLD, "*")
    result = _MD_STRIKE.sub(r"~\1~", result)

    result = _escape_outside_quotes(result)

    # Code keeps its characters but Slack still needs them escaped
    for idx in range(code_count):
        regions.items[idx] = escape_slack(regions.items[idx])
    return regions.restore(result)


def _escape_outside_quotes(text: str) -> str:
    lines = []
    for line in text.split("\n"):
        if line.startswith("> "):
            lines.append("> " + escape_slack(line[2:]))
        else:
            lines.append(escape_slack(line))
    return "\n".join(lines)

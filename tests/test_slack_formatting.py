"""Tests for Slack mrkdwn <-> Markdown conversion."""

from chatbridge.services.slack_formatting import (
    SLACK_USER_PLACEHOLDER,
    escape_slack,
    markdown_to_slack,
    slack_to_markdown,
    unescape_slack,
)


class TestSlackToMarkdown:
    """Test inbound conversion."""

    def test_bold(self):
        assert slack_to_markdown("*hi*") == "**hi**"

    def test_italic(self):
        assert slack_to_markdown("_soft_") == "*soft*"

    def test_strikethrough(self):
        assert slack_to_markdown("~gone~") == "~~gone~~"

    def test_mixed_emphasis(self):
        assert slack_to_markdown("*bold* and _it_") == "**bold** and *it*"

    def test_already_doubled_asterisks_left_alone(self):
        """Runs of the delimiter are not treated as emphasis."""
        assert slack_to_markdown("**x**") == "**x**"

    def test_user_mention_becomes_placeholder(self):
        assert slack_to_markdown("<@U123ABC> hello") == f"{SLACK_USER_PLACEHOLDER} hello"
        assert slack_to_markdown("<@U123ABC|ada> hello") == f"{SLACK_USER_PLACEHOLDER} hello"

    def test_channel_mentions(self):
        assert slack_to_markdown("see <#C123|general>") == "see #general"
        assert slack_to_markdown("see <#C123>") == "see #channel"

    def test_special_mentions(self):
        assert slack_to_markdown("<!here> deploy") == "@here deploy"

    def test_labeled_link(self):
        assert slack_to_markdown("<https://example.com|Example>") == "[Example](https://example.com)"

    def test_bare_link_keeps_underscores(self):
        """URLs are not scanned for emphasis."""
        assert slack_to_markdown("<https://example.com/a_b_c>") == "https://example.com/a_b_c"

    def test_code_is_untouched(self):
        assert slack_to_markdown("`*not bold*`") == "`*not bold*`"
        assert slack_to_markdown("```\n_x_ *y*\n```") == "```\n_x_ *y*\n```"

    def test_shortcodes_become_emoji(self):
        assert slack_to_markdown(":tada: shipped") == "🎉 shipped"

    def test_unknown_shortcode_kept(self):
        assert slack_to_markdown(":partyparrot:") == ":partyparrot:"

    def test_entities_unescaped(self):
        assert slack_to_markdown("a &lt;b&gt; &amp; c") == "a <b> & c"

    def test_intraword_markers_ignored(self):
        assert slack_to_markdown("snake_case_name") == "snake_case_name"
        assert slack_to_markdown("2*3*4") == "2*3*4"

    def test_empty(self):
        assert slack_to_markdown("") == ""
        assert slack_to_markdown(None) == ""


class TestMarkdownToSlack:
    """Test outbound conversion."""

    def test_bold(self):
        assert markdown_to_slack("**bold**") == "*bold*"
        assert markdown_to_slack("__bold__") == "*bold*"

    def test_italic(self):
        assert markdown_to_slack("*it*") == "_it_"

    def test_strikethrough(self):
        assert markdown_to_slack("~~gone~~") == "~gone~"

    def test_mixed_emphasis(self):
        assert markdown_to_slack("**bold** and *it*") == "*bold* and _it_"

    def test_link(self):
        assert markdown_to_slack("[Example](https://example.com)") == "<https://example.com|Example>"

    def test_reserved_characters_escaped(self):
        assert markdown_to_slack("a < b & c") == "a &lt; b &amp; c"

    def test_quote_marker_preserved(self):
        assert markdown_to_slack("> quoted <tag>") == "> quoted &lt;tag&gt;"

    def test_code_escaped_but_not_converted(self):
        assert markdown_to_slack("`x < y` **b**") == "`x &lt; y` *b*"

    def test_empty(self):
        assert markdown_to_slack("") == ""
        assert markdown_to_slack(None) == ""

    def test_emphasis_survives_a_round_trip(self):
        text = "**bold** and *it* ~~x~~"
        assert slack_to_markdown(markdown_to_slack(text)) == text


class TestEscaping:
    def test_escape_then_unescape(self):
        assert unescape_slack(escape_slack("<a & b>")) == "<a & b>"

    def test_ampersand_escaped_first(self):
        assert escape_slack("&lt;") == "&amp;lt;"

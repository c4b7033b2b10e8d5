"""Tests for reaction storage and Slack reaction sync."""

from chatbridge.models import BridgeStatus
from chatbridge.services.emoji import reaction_key
from chatbridge.services.reactions import (
    add_reaction,
    apply_inbound_reaction,
    diff_reactions,
    get_reaction_map,
    remove_reaction,
    slack_reaction_changes,
    sync_reaction_change,
    toggle_reaction,
)

TEAM_ID = "T0001"
BOT_USER_ID = "UBOT"


def _event(reaction: str = "tada", user: str = "U777", ts: str = "1700000000.000100", channel: str = "C0001"):
    return {
        "type": "reaction_added",
        "user": user,
        "reaction": reaction,
        "item": {"type": "message", "channel": channel, "ts": ts},
    }


class TestReactionStorage:
    """Test the per-message aggregate."""

    async def test_add_then_remove_restores_map(self, db_session, channel, message_factory):
        message = await message_factory(channel)
        before = await get_reaction_map(db_session, message.id)

        assert await add_reaction(db_session, message.id, "1", "🎉") is True
        during = await get_reaction_map(db_session, message.id)
        assert during == {reaction_key("🎉"): {"emoji": "🎉", "users": {"1"}}}

        assert await remove_reaction(db_session, message.id, "1", "🎉") is True
        assert await get_reaction_map(db_session, message.id) == before == {}

    async def test_add_is_idempotent(self, db_session, channel, message_factory):
        message = await message_factory(channel)

        assert await add_reaction(db_session, message.id, "1", "👍") is True
        assert await add_reaction(db_session, message.id, "1", "👍") is False

        reactions = await get_reaction_map(db_session, message.id)
        assert reactions[reaction_key("👍")]["users"] == {"1"}

    async def test_remove_missing_is_noop(self, db_session, channel, message_factory):
        message = await message_factory(channel)
        assert await remove_reaction(db_session, message.id, "1", "👍") is False

    async def test_emoji_with_no_reactors_has_no_entry(self, db_session, channel, message_factory):
        message = await message_factory(channel)
        await add_reaction(db_session, message.id, "1", "👍")
        await add_reaction(db_session, message.id, "2", "👍")
        await remove_reaction(db_session, message.id, "1", "👍")
        await remove_reaction(db_session, message.id, "2", "👍")

        assert await get_reaction_map(db_session, message.id) == {}

    async def test_variation_selector_variants_are_distinct(self, db_session, channel, message_factory):
        message = await message_factory(channel)
        await add_reaction(db_session, message.id, "1", "❤️")
        await add_reaction(db_session, message.id, "1", "❤")

        assert len(await get_reaction_map(db_session, message.id)) == 2

    async def test_toggle(self, db_session, channel, message_factory):
        message = await message_factory(channel)

        assert await toggle_reaction(db_session, message.id, "1", "🔥") is True
        assert await toggle_reaction(db_session, message.id, "1", "🔥") is False
        assert await get_reaction_map(db_session, message.id) == {}


class TestDiffReactions:
    def test_added_and_removed(self):
        before = {"u1": {"emoji": "A", "users": {"1", "2"}}}
        after = {"u1": {"emoji": "A", "users": {"2"}}, "u2": {"emoji": "B", "users": {"3"}}}

        changes = diff_reactions(before, after)

        assert changes["u1"].removed == {"1"}
        assert changes["u1"].remaining == 1
        assert changes["u2"].added == {"3"}
        assert changes["u2"].emoji == "B"

    def test_slack_reactors_ignored(self):
        before = {}
        after = {"u1": {"emoji": "A", "users": {"slack:U777"}}}

        assert diff_reactions(before, after) == {}

    def test_remaining_counts_internal_reactors_only(self):
        before = {"u1": {"emoji": "A", "users": {"1", "slack:U777"}}}
        after = {"u1": {"emoji": "A", "users": {"slack:U777"}}}

        assert diff_reactions(before, after)["u1"].remaining == 0


class TestSlackReactionChanges:
    def test_variants_grouped_under_one_name(self):
        before = {
            reaction_key("❤"): {"emoji": "❤", "users": {"1"}},
            reaction_key("❤️"): {"emoji": "❤️", "users": {"2"}},
        }
        after = {reaction_key("❤"): {"emoji": "❤", "users": {"1"}}}

        changes = slack_reaction_changes(before, after)

        assert list(changes) == ["heart"]
        assert changes["heart"].removed == {"2"}
        assert changes["heart"].previous == 2
        assert changes["heart"].remaining == 1


class TestInboundReactions:
    """Test mirroring Slack reaction events."""

    async def test_reaction_added_and_removed(self, db_session, bridge, channel, message_factory, correlate):
        message = await message_factory(channel)
        await correlate(message, bridge, "1700000000.000100")

        outcome = await apply_inbound_reaction(db_session, TEAM_ID, _event(), added=True)
        assert outcome == "applied"
        reactions = await get_reaction_map(db_session, message.id)
        assert reactions == {reaction_key("🎉"): {"emoji": "🎉", "users": {"slack:U777"}}}

        outcome = await apply_inbound_reaction(db_session, TEAM_ID, _event(), added=False)
        assert outcome == "applied"
        assert await get_reaction_map(db_session, message.id) == {}

    async def test_repeated_event_unchanged(self, db_session, bridge, channel, message_factory, correlate):
        message = await message_factory(channel)
        await correlate(message, bridge, "1700000000.000100")

        await apply_inbound_reaction(db_session, TEAM_ID, _event(), added=True)
        assert await apply_inbound_reaction(db_session, TEAM_ID, _event(), added=True) == "unchanged"

    async def test_own_bot_reaction_ignored(self, db_session, bridge, channel, message_factory, correlate):
        message = await message_factory(channel)
        await correlate(message, bridge, "1700000000.000100")

        outcome = await apply_inbound_reaction(db_session, TEAM_ID, _event(user=BOT_USER_ID), added=True)

        assert outcome == "own_bot"
        assert await get_reaction_map(db_session, message.id) == {}

    async def test_uncorrelated_message(self, db_session, bridge):
        assert await apply_inbound_reaction(db_session, TEAM_ID, _event(), added=True) == "no_correlation"

    async def test_unbridged_channel(self, db_session, bridge):
        outcome = await apply_inbound_reaction(db_session, TEAM_ID, _event(channel="C9999"), added=True)
        assert outcome == "no_bridge"

    async def test_reactions_disabled(self, db_session, bridge, channel, message_factory, correlate):
        bridge.sync_reactions = False
        message = await message_factory(channel)
        await correlate(message, bridge, "1700000000.000100")

        assert await apply_inbound_reaction(db_session, TEAM_ID, _event(), added=True) == "reactions_disabled"

    async def test_non_message_item(self, db_session, bridge):
        event = _event()
        event["item"] = {"type": "file", "file": "F1"}
        assert await apply_inbound_reaction(db_session, TEAM_ID, event, added=True) == "unsupported_item"


class TestOutboundReactionSync:
    """Test pushing internal reaction changes to Slack."""

    async def test_add_calls_slack(self, db_session, bridge, channel, message_factory, correlate, fake_slack):
        message = await message_factory(channel)
        await correlate(message, bridge, "1700000000.000100")
        before = await get_reaction_map(db_session, message.id)
        await add_reaction(db_session, message.id, "1", "🎉")
        after = await get_reaction_map(db_session, message.id)

        calls = await sync_reaction_change(db_session, message.id, before, after, slack=fake_slack)

        assert calls == 1
        assert fake_slack.reactions_added == [("C0001", "1700000000.000100", "tada")]

    async def test_remove_waits_for_last_internal_reactor(
        self, db_session, bridge, channel, message_factory, correlate, fake_slack
    ):
        message = await message_factory(channel)
        await correlate(message, bridge, "1700000000.000100")
        await add_reaction(db_session, message.id, "1", "🎉")
        await add_reaction(db_session, message.id, "2", "🎉")

        before = await get_reaction_map(db_session, message.id)
        await remove_reaction(db_session, message.id, "1", "🎉")
        middle = await get_reaction_map(db_session, message.id)
        await sync_reaction_change(db_session, message.id, before, middle, slack=fake_slack)
        assert fake_slack.reactions_removed == []

        await remove_reaction(db_session, message.id, "2", "🎉")
        after = await get_reaction_map(db_session, message.id)
        await sync_reaction_change(db_session, message.id, middle, after, slack=fake_slack)
        assert fake_slack.reactions_removed == [("C0001", "1700000000.000100", "tada")]

    async def test_remove_waits_for_reactors_of_variant_emoji(
        self, db_session, bridge, channel, message_factory, correlate, fake_slack
    ):
        message = await message_factory(channel)
        await correlate(message, bridge, "1700000000.000100")
        await add_reaction(db_session, message.id, "1", "❤")
        await add_reaction(db_session, message.id, "2", "❤️")

        before = await get_reaction_map(db_session, message.id)
        await remove_reaction(db_session, message.id, "2", "❤️")
        after = await get_reaction_map(db_session, message.id)
        await sync_reaction_change(db_session, message.id, before, after, slack=fake_slack)

        assert fake_slack.reactions_removed == []

    async def test_variant_emoji_added_once_per_slack_name(
        self, db_session, bridge, channel, message_factory, correlate, fake_slack
    ):
        message = await message_factory(channel)
        await correlate(message, bridge, "1700000000.000100")

        before = await get_reaction_map(db_session, message.id)
        await add_reaction(db_session, message.id, "1", "❤")
        await add_reaction(db_session, message.id, "2", "❤️")
        middle = await get_reaction_map(db_session, message.id)
        await sync_reaction_change(db_session, message.id, before, middle, slack=fake_slack)
        assert fake_slack.reactions_added == [("C0001", "1700000000.000100", "heart")]

        await add_reaction(db_session, message.id, "3", "❤")
        after = await get_reaction_map(db_session, message.id)
        await sync_reaction_change(db_session, message.id, middle, after, slack=fake_slack)
        assert fake_slack.reactions_added == [("C0001", "1700000000.000100", "heart")]

    async def test_slack_reactor_not_mirrored_back(
        self, db_session, bridge, channel, message_factory, correlate, fake_slack
    ):
        message = await message_factory(channel)
        await correlate(message, bridge, "1700000000.000100")

        await apply_inbound_reaction(db_session, TEAM_ID, _event(), added=True)
        after = await get_reaction_map(db_session, message.id)

        assert await sync_reaction_change(db_session, message.id, {}, after, slack=fake_slack) == 0
        assert fake_slack.reactions_added == []

    async def test_terminal_error_marks_bridge(
        self, db_session, bridge, channel, message_factory, correlate, fake_slack
    ):
        fake_slack.reaction_errors["C0001"] = "channel_not_found"
        message = await message_factory(channel)
        await correlate(message, bridge, "1700000000.000100")
        after = {reaction_key("🎉"): {"emoji": "🎉", "users": {"1"}}}

        calls = await sync_reaction_change(db_session, message.id, {}, after, slack=fake_slack)

        assert calls == 0
        assert bridge.status == BridgeStatus.ERROR.value
        assert bridge.last_error == "reactions: channel_not_found"

    async def test_disabled_bridge_skipped(
        self, db_session, bridge, channel, message_factory, correlate, fake_slack
    ):
        bridge.sync_reactions = False
        message = await message_factory(channel)
        await correlate(message, bridge, "1700000000.000100")
        after = {reaction_key("🎉"): {"emoji": "🎉", "users": {"1"}}}

        assert await sync_reaction_change(db_session, message.id, {}, after, slack=fake_slack) == 0
        assert fake_slack.reactions_added == []

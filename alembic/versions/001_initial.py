"""Initial schema

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('display_name', sa.String(100), nullable=False),
        sa.Column('avatar_url', sa.Text, nullable=True),
        sa.Column('session_token', sa.String(64), nullable=True),
        sa.Column('session_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean, server_default=sa.true(), nullable=False),
        sa.Column('last_seen_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_session_token', 'users', ['session_token'], unique=True)

    # Servers table, with per-server Slack app settings
    op.create_table(
        'servers',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(50), nullable=False),
        sa.Column('icon_url', sa.String(500), nullable=True),
        sa.Column('slack_enabled', sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column('slack_client_id', sa.String(255), nullable=True),
        sa.Column('slack_client_secret', sa.Text, nullable=True),
        sa.Column('slack_signing_secret', sa.Text, nullable=True),
        sa.Column('slack_bot_display_name', sa.String(80), nullable=True),
        sa.Column('slack_bot_avatar_url', sa.Text, nullable=True),
        sa.Column('slack_default_sync_direction', sa.String(30), server_default='bidirectional', nullable=False),
        sa.Column('slack_default_sync_reactions', sa.Boolean, server_default=sa.true(), nullable=False),
        sa.Column('slack_default_sync_threads', sa.Boolean, server_default=sa.false(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_servers_slug', 'servers', ['slug'], unique=True)

    # Server memberships
    op.create_table(
        'server_memberships',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('server_id', sa.Integer, sa.ForeignKey('servers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.String(20), server_default='member', nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('server_id', 'user_id', name='uq_membership_server_user'),
    )
    op.create_index('ix_server_memberships_server_id', 'server_memberships', ['server_id'])
    op.create_index('ix_server_memberships_user_id', 'server_memberships', ['user_id'])

    # Channels table
    op.create_table(
        'channels',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('server_id', sa.Integer, sa.ForeignKey('servers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(80), nullable=False),
        sa.Column('topic', sa.Text, nullable=True),
        sa.Column('is_private', sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column('is_archived', sa.Boolean, server_default=sa.false(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_channels_server_id', 'channels', ['server_id'])

    # Slack app installations
    op.create_table(
        'slack_workspaces',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('server_id', sa.Integer, sa.ForeignKey('servers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('team_id', sa.String(32), nullable=False),
        sa.Column('team_name', sa.String(255), nullable=True),
        sa.Column('team_domain', sa.String(255), nullable=True),
        sa.Column('team_icon', sa.Text, nullable=True),
        sa.Column('access_token', sa.Text, nullable=True),
        sa.Column('bot_user_id', sa.String(32), nullable=True),
        sa.Column('bot_access_token', sa.Text, nullable=True),
        sa.Column('scopes', sa.JSON, nullable=False),
        sa.Column('installed_by_id', sa.Integer, sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('installed_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('is_active', sa.Boolean, server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('server_id', 'team_id', name='uq_slack_workspace_server_team'),
    )
    op.create_index('ix_slack_workspaces_server_id', 'slack_workspaces', ['server_id'])
    op.create_index('ix_slack_workspaces_team_id', 'slack_workspaces', ['team_id'])

    # Channel bridges
    op.create_table(
        'slack_bridges',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('server_id', sa.Integer, sa.ForeignKey('servers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('channel_id', sa.Integer, sa.ForeignKey('channels.id', ondelete='CASCADE'), nullable=False),
        sa.Column('workspace_id', sa.Integer, sa.ForeignKey('slack_workspaces.id', ondelete='CASCADE'), nullable=False),
        sa.Column('slack_team_id', sa.String(32), nullable=False),
        sa.Column('slack_channel_id', sa.String(32), nullable=False),
        sa.Column('slack_channel_name', sa.String(255), nullable=True),
        sa.Column('sync_direction', sa.String(30), server_default='bidirectional', nullable=False),
        sa.Column('status', sa.String(20), server_default='active', nullable=False),
        sa.Column('sync_reactions', sa.Boolean, server_default=sa.true(), nullable=False),
        sa.Column('sync_threads', sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column('show_slack_usernames', sa.Boolean, server_default=sa.true(), nullable=False),
        sa.Column('display_name_override', sa.String(80), nullable=True),
        sa.Column('avatar_url_override', sa.Text, nullable=True),
        sa.Column('message_count', sa.Integer, server_default='0', nullable=False),
        sa.Column('last_sync_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_error', sa.Text, nullable=True),
        sa.Column('created_by_id', sa.Integer, sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('slack_team_id', 'slack_channel_id', 'channel_id', name='uq_bridge_slack_channel'),
    )
    op.create_index('ix_bridge_team_channel_status', 'slack_bridges', ['slack_team_id', 'slack_channel_id', 'status'])
    op.create_index('ix_bridge_server_channel_status', 'slack_bridges', ['server_id', 'channel_id', 'status'])

    # Messages table
    op.create_table(
        'messages',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('channel_id', sa.Integer, sa.ForeignKey('channels.id', ondelete='CASCADE'), nullable=False),
        sa.Column('thread_id', sa.Integer, nullable=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('author_id', sa.String(64), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=True),
        sa.Column('photo_url', sa.Text, nullable=True),
        sa.Column('body', sa.Text, nullable=False),
        sa.Column('plain_text', sa.Text, nullable=True),
        sa.Column('origin', sa.String(20), server_default='internal', nullable=False),
        sa.Column('origin_bridge_id', sa.Integer, sa.ForeignKey('slack_bridges.id', ondelete='SET NULL'), nullable=True),
        sa.Column('edited_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_messages_channel_id', 'messages', ['channel_id'])
    op.create_index('ix_messages_thread_id', 'messages', ['thread_id'])

    # Internal <-> Slack message links
    op.create_table(
        'message_correlations',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('message_id', sa.Integer, sa.ForeignKey('messages.id', ondelete='CASCADE'), nullable=False),
        sa.Column('bridge_id', sa.Integer, sa.ForeignKey('slack_bridges.id', ondelete='CASCADE'), nullable=False),
        sa.Column('slack_team_id', sa.String(32), nullable=False),
        sa.Column('slack_channel_id', sa.String(32), nullable=False),
        sa.Column('slack_ts', sa.String(32), nullable=False),
        sa.Column('slack_thread_ts', sa.String(32), nullable=True),
        sa.Column('is_thread_reply', sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column('is_external_origin', sa.Boolean, server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('bridge_id', 'message_id', name='uq_correlation_bridge_message'),
        sa.UniqueConstraint('slack_team_id', 'slack_channel_id', 'slack_ts', name='uq_correlation_slack_ts'),
    )
    op.create_index('ix_message_correlations_message_id', 'message_correlations', ['message_id'])
    op.create_index('ix_correlation_lookup', 'message_correlations', ['slack_team_id', 'slack_channel_id', 'slack_ts'])

    # Threads table
    op.create_table(
        'threads',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('channel_id', sa.Integer, sa.ForeignKey('channels.id', ondelete='CASCADE'), nullable=False),
        sa.Column('root_message_id', sa.Integer, sa.ForeignKey('messages.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('created_by', sa.String(64), nullable=False),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('preview', sa.Text, nullable=True),
        sa.Column('last_message_preview', sa.Text, nullable=True),
        sa.Column('last_message_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ttl_hours', sa.Integer, server_default='24', nullable=False),
        sa.Column('auto_archive_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('archived_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(20), server_default='active', nullable=False),
        sa.Column('max_members', sa.Integer, server_default='20', nullable=False),
        sa.Column('member_ids', sa.JSON, nullable=False),
        sa.Column('member_count', sa.Integer, server_default='0', nullable=False),
        sa.Column('message_count', sa.Integer, server_default='0', nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_threads_channel_id', 'threads', ['channel_id'])

    # Reactions table
    op.create_table(
        'message_reactions',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('message_id', sa.Integer, sa.ForeignKey('messages.id', ondelete='CASCADE'), nullable=False),
        sa.Column('reactor_id', sa.String(64), nullable=False),
        sa.Column('reaction_key', sa.String(200), nullable=False),
        sa.Column('emoji', sa.String(64), nullable=False),
        sa.Column('origin', sa.String(20), server_default='internal', nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('message_id', 'reactor_id', 'reaction_key', name='uq_message_reactor_key'),
    )
    op.create_index('ix_message_reactions_message_id', 'message_reactions', ['message_id'])


def downgrade() -> None:
    op.drop_table('message_reactions')
    op.drop_table('threads')
    op.drop_table('message_correlations')
    op.drop_table('messages')
    op.drop_table('slack_bridges')
    op.drop_table('slack_workspaces')
    op.drop_table('channels')
    op.drop_table('server_memberships')
    op.drop_table('servers')
    op.drop_table('users')

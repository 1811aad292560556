"""Initial campaign schema.

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261018_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


participant_role = sa.Enum("dm", "player", name="participant_role")
character_type = sa.Enum("player", "npc", "antagonist", name="character_type")
user_token_purpose = sa.Enum("password_reset", name="user_token_purpose")

# Tables that carry a visibility tag, indexed for the role filter
VISIBILITY_INDEXED = ("characters", "locations", "factions", "world_info", "quests", "sessions", "creatures")


def _timestamps(with_updated: bool = True) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)]
    if with_updated:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False))
    return columns


def _record_columns() -> list[sa.Column]:
    """Columns shared by every campaign-scoped record."""
    return [
        sa.Column("visibility", sa.String(length=20), nullable=False, server_default="dm-only"),
        sa.Column(
            "created_by_user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "last_updated_by_user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    ]


def _campaign_fk() -> sa.Column:
    return sa.Column(
        "campaign_id",
        sa.Integer(),
        sa.ForeignKey("campaigns.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=False)

    op.create_table(
        "user_tokens",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token", sa.String(length=128), nullable=False),
        sa.Column("purpose", user_token_purpose, nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("consumed_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("token"),
    )
    op.create_index(op.f("ix_user_tokens_user_id"), "user_tokens", ["user_id"], unique=False)
    op.create_index(op.f("ix_user_tokens_token"), "user_tokens", ["token"], unique=False)

    op.create_table(
        "campaigns",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f("ix_campaigns_user_id"), "campaigns", ["user_id"], unique=False)

    op.create_table(
        "campaign_participants",
        sa.Column("id", sa.Integer(), primary_key=True),
        _campaign_fk(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", participant_role, nullable=False, server_default="player"),
        sa.Column("invited_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("campaign_id", "user_id", name="uq_campaign_participants_campaign_user"),
    )
    op.create_index(
        op.f("ix_campaign_participants_campaign_id"), "campaign_participants", ["campaign_id"], unique=False
    )
    op.create_index(op.f("ix_campaign_participants_user_id"), "campaign_participants", ["user_id"], unique=False)

    op.create_table(
        "characters",
        sa.Column("id", sa.Integer(), primary_key=True),
        _campaign_fk(),
        sa.Column("type", character_type, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("character_sheet", sa.JSON(), nullable=True),
        sa.Column("alignment", sa.String(length=50), nullable=True),
        sa.Column(
            "player_user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_record_columns(),
    )
    op.create_index(op.f("ix_characters_type"), "characters", ["type"], unique=False)
    op.create_index(op.f("ix_characters_player_user_id"), "characters", ["player_user_id"], unique=False)

    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        _campaign_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location_type", sa.String(length=100), nullable=True),
        sa.Column(
            "parent_location_id",
            sa.Integer(),
            sa.ForeignKey("locations.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_record_columns(),
    )
    op.create_index(op.f("ix_locations_parent_location_id"), "locations", ["parent_location_id"], unique=False)

    op.create_table(
        "factions",
        sa.Column("id", sa.Integer(), primary_key=True),
        _campaign_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("alignment", sa.String(length=50), nullable=True),
        sa.Column("goals", sa.Text(), nullable=True),
        *_record_columns(),
    )

    op.create_table(
        "world_info",
        sa.Column("id", sa.Integer(), primary_key=True),
        _campaign_fk(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        *_record_columns(),
    )
    op.create_index(op.f("ix_world_info_category"), "world_info", ["category"], unique=False)

    op.create_table(
        "sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        _campaign_fk(),
        sa.Column("session_number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("date_played", sa.Date(), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("notes_characters", sa.Text(), nullable=True),
        sa.Column("notes_npcs", sa.Text(), nullable=True),
        sa.Column("notes_antagonists", sa.Text(), nullable=True),
        sa.Column("notes_locations", sa.Text(), nullable=True),
        sa.Column("notes_factions", sa.Text(), nullable=True),
        sa.Column("notes_world_info", sa.Text(), nullable=True),
        sa.Column("notes_quests", sa.Text(), nullable=True),
        *_record_columns(),
    )

    op.create_table(
        "session_notes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.Integer(), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("quick_note", sa.Text(), nullable=True),
        sa.Column("detailed_note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(op.f("ix_session_notes_session_id"), "session_notes", ["session_id"], unique=False)

    op.create_table(
        "player_session_notes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.Integer(), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("note_content", sa.Text(), nullable=False),
        sa.Column("visibility", sa.String(length=20), nullable=False, server_default="dm-only"),
        *_timestamps(),
    )
    op.create_index(
        op.f("ix_player_session_notes_session_id"), "player_session_notes", ["session_id"], unique=False
    )
    op.create_index(op.f("ix_player_session_notes_user_id"), "player_session_notes", ["user_id"], unique=False)

    op.create_table(
        "quests",
        sa.Column("id", sa.Integer(), primary_key=True),
        _campaign_fk(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("quest_type", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("short_summary", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("quest_giver", sa.String(length=255), nullable=True),
        sa.Column("initial_hook", sa.Text(), nullable=True),
        sa.Column("rewards", sa.Text(), nullable=True),
        sa.Column("consequences", sa.Text(), nullable=True),
        sa.Column("urgency_level", sa.String(length=20), nullable=True),
        sa.Column("estimated_sessions", sa.Integer(), nullable=True),
        sa.Column("difficulty", sa.String(length=50), nullable=True),
        sa.Column("visibility_controls", sa.JSON(), nullable=True),
        sa.Column("introduced_in_session", sa.Integer(), nullable=True),
        sa.Column("completed_in_session", sa.Integer(), nullable=True),
        *_record_columns(),
    )
    op.create_index(op.f("ix_quests_status"), "quests", ["status"], unique=False)

    op.create_table(
        "quest_links",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("quest_id", sa.Integer(), sa.ForeignKey("quests.id", ondelete="CASCADE"), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=100), nullable=True),
        sa.Column("visibility", sa.String(length=20), nullable=False, server_default="dm-only"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(op.f("ix_quest_links_quest_id"), "quest_links", ["quest_id"], unique=False)

    op.create_table(
        "quest_objectives",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("quest_id", sa.Integer(), sa.ForeignKey("quests.id", ondelete="CASCADE"), nullable=False),
        sa.Column("objective_type", sa.String(length=20), nullable=False, server_default="primary"),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="incomplete"),
        sa.Column("linked_entity_type", sa.String(length=50), nullable=True),
        sa.Column("linked_entity_id", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index(op.f("ix_quest_objectives_quest_id"), "quest_objectives", ["quest_id"], unique=False)

    op.create_table(
        "quest_milestones",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("quest_id", sa.Integer(), sa.ForeignKey("quests.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("session_number", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(op.f("ix_quest_milestones_quest_id"), "quest_milestones", ["quest_id"], unique=False)

    op.create_table(
        "quest_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("quest_id", sa.Integer(), sa.ForeignKey("quests.id", ondelete="CASCADE"), nullable=False),
        sa.Column("session_id", sa.Integer(), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("quest_id", "session_id", name="uq_quest_sessions_quest_session"),
    )
    op.create_index(op.f("ix_quest_sessions_quest_id"), "quest_sessions", ["quest_id"], unique=False)
    op.create_index(op.f("ix_quest_sessions_session_id"), "quest_sessions", ["session_id"], unique=False)

    op.create_table(
        "creatures",
        sa.Column("id", sa.Integer(), primary_key=True),
        _campaign_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("source_type", sa.String(length=20), nullable=False, server_default="homebrew"),
        sa.Column("size", sa.String(length=20), nullable=False),
        sa.Column("creature_type", sa.String(length=100), nullable=False),
        sa.Column("subtype", sa.String(length=100), nullable=True),
        sa.Column("alignment", sa.String(length=50), nullable=True),
        sa.Column("challenge_rating", sa.String(length=10), nullable=True),
        sa.Column("proficiency_bonus", sa.Integer(), nullable=True),
        sa.Column("armor_class", sa.JSON(), nullable=False),
        sa.Column("hit_points", sa.JSON(), nullable=False),
        sa.Column("hit_dice", sa.String(length=50), nullable=True),
        sa.Column("damage_vulnerabilities", sa.Text(), nullable=True),
        sa.Column("damage_resistances", sa.Text(), nullable=True),
        sa.Column("damage_immunities", sa.Text(), nullable=True),
        sa.Column("condition_immunities", sa.Text(), nullable=True),
        sa.Column("speeds", sa.JSON(), nullable=False),
        sa.Column("senses", sa.JSON(), nullable=False),
        sa.Column("languages", sa.Text(), nullable=True),
        sa.Column("abilities", sa.JSON(), nullable=False),
        sa.Column("saving_throws", sa.JSON(), nullable=False),
        sa.Column("skills", sa.JSON(), nullable=False),
        sa.Column("traits", sa.JSON(), nullable=False),
        sa.Column("actions", sa.JSON(), nullable=False),
        sa.Column("legendary_actions_meta", sa.JSON(), nullable=True),
        sa.Column("lair_actions", sa.JSON(), nullable=False),
        sa.Column("spellcasting", sa.JSON(), nullable=True),
        sa.Column("short_description", sa.Text(), nullable=True),
        sa.Column("appearance_rich_text", sa.Text(), nullable=True),
        sa.Column("lore_rich_text", sa.Text(), nullable=True),
        sa.Column("tactics_rich_text", sa.Text(), nullable=True),
        sa.Column("dm_notes_rich_text", sa.Text(), nullable=True),
        sa.Column("linked_entities", sa.JSON(), nullable=False),
        *_record_columns(),
    )
    op.create_index(op.f("ix_creatures_creature_type"), "creatures", ["creature_type"], unique=False)

    op.create_table(
        "content_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        _campaign_fk(),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content_data", sa.JSON(), nullable=True),
        *_record_columns(),
    )
    op.create_index(op.f("ix_content_items_category"), "content_items", ["category"], unique=False)

    op.create_table(
        "tags",
        sa.Column("id", sa.Integer(), primary_key=True),
        _campaign_fk(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("color", sa.String(length=7), nullable=False, server_default="#6366F1"),
        sa.Column("is_premade", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index(
        "uq_tags_campaign_lower_name",
        "tags",
        ["campaign_id", sa.text("lower(name)")],
        unique=True,
    )

    op.create_table(
        "entity_tags",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("tag_id", sa.Integer(), sa.ForeignKey("tags.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("entity_type", "entity_id", "tag_id", name="uq_entity_tags_entity_tag"),
    )
    op.create_index("ix_entity_tags_entity", "entity_tags", ["entity_type", "entity_id"], unique=False)
    op.create_index(op.f("ix_entity_tags_tag_id"), "entity_tags", ["tag_id"], unique=False)

    op.create_table(
        "images",
        sa.Column("id", sa.Integer(), primary_key=True),
        _campaign_fk(),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("file_path", sa.String(length=1024), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("mime_type", sa.String(length=100), nullable=False),
        sa.Column(
            "uploaded_by_user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_images_entity", "images", ["campaign_id", "entity_type", "entity_id"], unique=False)

    for table in (*VISIBILITY_INDEXED, "content_items"):
        op.create_index(op.f(f"ix_{table}_campaign_id"), table, ["campaign_id"], unique=False)
    for table in VISIBILITY_INDEXED:
        op.create_index(op.f(f"ix_{table}_visibility"), table, ["visibility"], unique=False)
    op.create_index(op.f("ix_tags_campaign_id"), "tags", ["campaign_id"], unique=False)


def downgrade() -> None:
    for table in (
        "images",
        "entity_tags",
        "tags",
        "content_items",
        "creatures",
        "quest_sessions",
        "quest_milestones",
        "quest_objectives",
        "quest_links",
        "quests",
        "player_session_notes",
        "session_notes",
        "sessions",
        "world_info",
        "factions",
        "locations",
        "characters",
        "campaign_participants",
        "campaigns",
        "user_tokens",
        "users",
    ):
        op.drop_table(table)

    for enum_type in (user_token_purpose, character_type, participant_role):
        enum_type.drop(op.get_bind(), checkfirst=True)

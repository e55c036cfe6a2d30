"""Create learner, vocabulary card and review history tables."""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261018_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "learners",
        sa.Column("id", sa.String(length=255), primary_key=True, nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("cards_added", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("cards_reviewed", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            server_onupdate=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_table(
        "vocabulary_cards",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("learner_id", sa.String(length=255), nullable=False),
        sa.Column("card_id", sa.String(length=64), nullable=False),
        sa.Column("front", sa.Text(), nullable=False),
        sa.Column("back", sa.Text(), nullable=False),
        sa.Column("part_of_speech", sa.String(length=32), server_default="other", nullable=False),
        sa.Column("chapter_number", sa.Integer(), nullable=False),
        sa.Column("grammatical_gender", sa.String(length=8), nullable=True),
        sa.Column("grammar_note", sa.Text(), nullable=True),
        sa.Column("ease_factor", sa.Float(), server_default=sa.text("2.5"), nullable=False),
        sa.Column("interval_days", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("repetition_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "next_due_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            server_onupdate=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ("learner_id",),
            ("learners.id",),
            name="fk_vocabulary_cards_learner_id_learners",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("learner_id", "card_id", name="uq_vocabulary_cards_learner_card"),
    )
    op.create_index(
        "ix_vocabulary_cards_learner_id_next_due_at",
        "vocabulary_cards",
        ("learner_id", "next_due_at"),
    )

    op.create_table(
        "card_reviews",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("vocabulary_card_id", sa.Integer(), nullable=False),
        sa.Column("quality", sa.Integer(), nullable=False),
        sa.Column("was_correct", sa.Boolean(), nullable=False),
        sa.Column(
            "reviewed_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ("vocabulary_card_id",),
            ("vocabulary_cards.id",),
            name="fk_card_reviews_vocabulary_card_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_card_reviews_vocabulary_card_id",
        "card_reviews",
        ("vocabulary_card_id",),
    )


def downgrade() -> None:
    op.drop_index("ix_card_reviews_vocabulary_card_id", table_name="card_reviews")
    op.drop_table("card_reviews")
    op.drop_index("ix_vocabulary_cards_learner_id_next_due_at", table_name="vocabulary_cards")
    op.drop_table("vocabulary_cards")
    op.drop_table("learners")

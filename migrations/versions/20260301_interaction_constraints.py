"""Enforce one row per user on interaction tables and one pending report per user and post."""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20260301_interaction_constraints'
down_revision = None
branch_labels = None
depends_on = None


UNIQUE_CONSTRAINTS = [
    ('uq_post_like', 'post_likes', ['user_id', 'post_id']),
    ('uq_post_helpful', 'post_helpfuls', ['user_id', 'post_id']),
    ('uq_comment_like', 'comment_likes', ['user_id', 'comment_id']),
    ('uq_comment_helpful', 'comment_helpfuls', ['user_id', 'comment_id']),
    ('uq_saved_post', 'saved_posts', ['user_id', 'post_id']),
]


def upgrade() -> None:
    """Drop duplicate rows, then add the unique constraints and the partial index."""
    for name, table, columns in UNIQUE_CONSTRAINTS:
        target = columns[1]
        op.execute(
            f"DELETE FROM {table} a USING {table} b "
            f"WHERE a.id > b.id AND a.user_id = b.user_id AND a.{target} = b.{target}"
        )
        op.create_unique_constraint(name, table, columns)

    op.execute(
        "DELETE FROM reports a USING reports b "
        "WHERE a.id > b.id AND a.user_id = b.user_id AND a.post_id = b.post_id "
        "AND a.status = 'pending' AND b.status = 'pending'"
    )
    op.create_index(
        'uq_report_pending_user_post',
        'reports',
        ['user_id', 'post_id'],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
    )


def downgrade() -> None:
    op.drop_index('uq_report_pending_user_post', table_name='reports')
    for name, table, _ in reversed(UNIQUE_CONSTRAINTS):
        op.drop_constraint(name, table, type_='unique')

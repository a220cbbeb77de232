from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a9c1e7b2d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MOODS = "'Happy','Neutral','Stressed','Sad','Anxious','Angry'"


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'chats',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('mood', sa.String(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("role in ('user','bot')", name='ck_chats_role'),
        sa.CheckConstraint(f"mood is null or (role = 'bot' and mood in ({MOODS}))", name='ck_chats_mood'),
    )
    op.create_index('idx_chats_user_timestamp', 'chats', ['user_id', 'timestamp'])

    op.create_table(
        'moods',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('mood', sa.String(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(f"mood in ({MOODS})", name='ck_moods_mood'),
    )
    op.create_index('idx_moods_user_timestamp', 'moods', ['user_id', 'timestamp'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_moods_user_timestamp', table_name='moods')
    op.drop_table('moods')
    op.drop_index('idx_chats_user_timestamp', table_name='chats')
    op.drop_table('chats')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')

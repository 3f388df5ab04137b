"""create_auth_tables

Revision ID: 6f1c2a9d3e10
Revises:
Create Date: 2026-10-19 12:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '6f1c2a9d3e10'
down_revision = None
branch_labels = None
depends_on = None


def _common_columns():
    return [
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def _user_fk():
    return sa.Column(
        'user_id',
        sa.Uuid(),
        sa.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        'users',
        *_common_columns(),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('profile_image', sa.String(length=500), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('login_method', sa.String(length=20), nullable=False),
        sa.Column('email_verified', sa.DateTime(), nullable=True),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('is_blocked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'accounts',
        *_common_columns(),
        _user_fk(),
        sa.Column('provider', sa.String(length=20), nullable=False),
        sa.Column('provider_id', sa.String(length=255), nullable=True),
        sa.Column('access_token', sa.Text(), nullable=True),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.UniqueConstraint('provider', 'provider_id', name='uq_accounts_provider_provider_id'),
    )
    op.create_index('ix_accounts_id', 'accounts', ['id'])
    op.create_index('ix_accounts_user_id', 'accounts', ['user_id'])

    op.create_table(
        'sessions',
        *_common_columns(),
        _user_fk(),
        sa.Column('refresh_token', sa.String(length=2048), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_sessions_id', 'sessions', ['id'])
    op.create_index('ix_sessions_user_id', 'sessions', ['user_id'])
    op.create_index('ix_sessions_refresh_token', 'sessions', ['refresh_token'])

    op.create_table(
        'verification_tokens',
        *_common_columns(),
        _user_fk(),
        sa.Column('code', sa.String(length=6), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('kind', sa.String(length=30), nullable=False),
    )
    op.create_index('ix_verification_tokens_id', 'verification_tokens', ['id'])
    op.create_index('ix_verification_tokens_user_id', 'verification_tokens', ['user_id'])

    op.create_table(
        'profiles',
        *_common_columns(),
        _user_fk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('skills', postgresql.JSONB(), nullable=True),
        sa.Column('experience', postgresql.JSONB(), nullable=True),
        sa.Column('education', postgresql.JSONB(), nullable=True),
        sa.Column('projects', postgresql.JSONB(), nullable=True),
        sa.Column('achievements', postgresql.JSONB(), nullable=True),
        sa.UniqueConstraint('user_id', name='uq_profiles_user_id'),
    )
    op.create_index('ix_profiles_id', 'profiles', ['id'])


def downgrade() -> None:
    op.drop_table('profiles')
    op.drop_table('verification_tokens')
    op.drop_table('sessions')
    op.drop_table('accounts')
    op.drop_table('users')

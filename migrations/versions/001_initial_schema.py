"""Initial database schema with all models.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

This migration creates all database tables for the Ignition application.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Users table
    op.create_table(
        'core_user',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('first_name', sa.String(length=254), nullable=False),
        sa.Column('last_name', sa.String(length=254), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('is_superuser', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('date_joined', sa.DateTime(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    op.create_index('ix_core_user_email', 'core_user', ['email'], unique=True)

    # Sessions table
    op.create_table(
        'core_session',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['core_user.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )

    # Settings table (key/value)
    op.create_table(
        'setting',
        sa.Column('key', sa.String(length=254), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('key')
    )

    # Database connections table
    op.create_table(
        'database_connection',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=254), nullable=False),
        sa.Column('engine', sa.String(length=254), nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('is_on_demand', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('is_full_sync', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('auto_run_queries', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('is_sample', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_database_name', 'database_connection', ['name'])
    op.create_index('idx_database_engine', 'database_connection', ['engine'])

    # Activity table
    op.create_table(
        'activity',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('topic', sa.String(length=32), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('model', sa.String(length=16), nullable=True),
        sa.Column('model_id', sa.Integer(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['core_user.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_activity_user_id', 'activity', ['user_id'])
    op.create_index('idx_activity_topic', 'activity', ['topic'])
    op.create_index('idx_activity_timestamp', 'activity', ['timestamp'])

    # Tables discovered in connected databases
    op.create_table(
        'metadata_table',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('db_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=254), nullable=False),
        sa.Column('schema', sa.String(length=254), nullable=True),
        sa.Column('visibility_type', sa.String(length=254), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['db_id'], ['database_connection.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_metadata_table_db_id', 'metadata_table', ['db_id'])

    # Collections
    op.create_table(
        'collection',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Saved questions
    op.create_table(
        'report_card',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=254), nullable=False),
        sa.Column('creator_id', sa.Integer(), nullable=True),
        sa.Column('collection_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['creator_id'], ['core_user.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['collection_id'], ['collection.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )

    # Dashboards and pulses
    for table_name in ('report_dashboard', 'pulse'):
        op.create_table(
            table_name,
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('name', sa.String(length=254), nullable=False),
            sa.Column('creator_id', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['creator_id'], ['core_user.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id')
        )

    # Metrics and segments
    for table_name in ('metric', 'segment'):
        op.create_table(
            table_name,
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('table_id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=254), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['table_id'], ['metadata_table.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )


def downgrade():
    for table_name in (
        'segment',
        'metric',
        'pulse',
        'report_dashboard',
        'report_card',
        'collection',
        'metadata_table',
        'activity',
        'database_connection',
        'setting',
        'core_session',
        'core_user',
    ):
        op.drop_table(table_name)

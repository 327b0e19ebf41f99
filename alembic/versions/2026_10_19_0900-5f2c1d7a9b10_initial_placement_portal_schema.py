"""initial_placement_portal_schema

Revision ID: 5f2c1d7a9b10
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5f2c1d7a9b10'
down_revision = None
branch_labels = None
depends_on = None


def _base_columns():
    return [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        *_base_columns(),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'students',
        *_base_columns(),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('usn', sa.String(length=20), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('is_placed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )
    op.create_index('ix_students_id', 'students', ['id'])
    op.create_index('ix_students_usn', 'students', ['usn'], unique=True)

    op.create_table(
        'student_academics',
        *_base_columns(),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('cgpa', sa.Numeric(precision=4, scale=2), nullable=True),
        sa.Column('active_backlogs', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('branch', sa.String(length=100), nullable=False),
        sa.Column('batch_year', sa.Integer(), nullable=False),
        sa.CheckConstraint('cgpa IS NULL OR (cgpa >= 0 AND cgpa <= 10)', name='ck_student_academics_cgpa_range'),
        sa.CheckConstraint('active_backlogs >= 0', name='ck_student_academics_backlogs_non_negative'),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id'),
    )
    op.create_index('ix_student_academics_id', 'student_academics', ['id'])

    op.create_table(
        'placement_drives',
        *_base_columns(),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=255), nullable=False),
        sa.Column('company_type', sa.String(length=50), nullable=True),
        sa.Column('ctc', sa.String(length=100), nullable=True),
        sa.Column('job_description', sa.Text(), nullable=True),
        sa.Column('min_cgpa', sa.Numeric(precision=4, scale=2), nullable=True),
        sa.Column('max_backlogs', sa.Integer(), nullable=True),
        sa.Column('allowed_branches', sa.Text(), nullable=True),
        sa.Column('drive_date', sa.Date(), nullable=False),
        sa.Column('registration_deadline', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='Upcoming'),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_placement_drives_id', 'placement_drives', ['id'])
    op.create_index('ix_placement_drives_company_name', 'placement_drives', ['company_name'])
    op.create_index('ix_placement_drives_status', 'placement_drives', ['status'])
    op.create_index('ix_drives_status_deadline', 'placement_drives', ['status', 'registration_deadline'])

    op.create_table(
        'applications',
        *_base_columns(),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('drive_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False, server_default='Applied'),
        sa.Column('applied_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['drive_id'], ['placement_drives.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id', 'drive_id', name='unique_student_drive_application'),
    )
    op.create_index('ix_applications_id', 'applications', ['id'])
    op.create_index('ix_applications_student_id', 'applications', ['student_id'])
    op.create_index('ix_applications_drive_id', 'applications', ['drive_id'])

    op.create_table(
        'application_status_history',
        *_base_columns(),
        sa.Column('application_id', sa.Uuid(), nullable=False),
        sa.Column('old_status', sa.String(length=30), nullable=True),
        sa.Column('new_status', sa.String(length=30), nullable=False),
        sa.Column('changed_by', sa.Uuid(), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('changed_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['application_id'], ['applications.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['changed_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_application_status_history_id', 'application_status_history', ['id'])
    op.create_index('idx_status_history_application', 'application_status_history', ['application_id', 'changed_at'])

    op.create_table(
        'inbox_messages',
        *_base_columns(),
        sa.Column('recipient_id', sa.Uuid(), nullable=False),
        sa.Column('sender_id', sa.Uuid(), nullable=True),
        sa.Column('subject', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('message_type', sa.String(length=30), nullable=False, server_default='Notification'),
        sa.Column('related_drive_id', sa.Uuid(), nullable=True),
        sa.Column('action_url', sa.String(length=500), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sent_at', sa.DateTime(), nullable=False),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['recipient_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['related_drive_id'], ['placement_drives.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_inbox_messages_id', 'inbox_messages', ['id'])
    op.create_index('idx_inbox_recipient', 'inbox_messages', ['recipient_id'])
    op.create_index('idx_inbox_recipient_unread', 'inbox_messages', ['recipient_id', 'is_read'])
    op.create_index('idx_inbox_sent_at', 'inbox_messages', ['sent_at'])


def downgrade() -> None:
    op.drop_table('inbox_messages')
    op.drop_table('application_status_history')
    op.drop_table('applications')
    op.drop_table('placement_drives')
    op.drop_table('student_academics')
    op.drop_table('students')
    op.drop_table('users')

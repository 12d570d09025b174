"""Create user, project, task, comment, date range and image tables

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'user',
        sa.Column('id', sa.String(36), primary_key=True),
        *_timestamps(),
        sa.Column('username', sa.String(255), nullable=False, unique=True),
        sa.Column('email', sa.String(320), nullable=False, unique=True),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(255), nullable=False),
        sa.Column('last_name', sa.String(255), nullable=False),
        sa.Column('bio', sa.Text(), nullable=False),
        sa.Column('role', sa.String(32), nullable=False),
        sa.Column('avatar', sa.String(2048), nullable=False),
    )
    op.create_index('ix_user_email', 'user', ['email'])

    op.create_table(
        'project',
        sa.Column('id', sa.String(36), primary_key=True),
        *_timestamps(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('key', sa.String(10), nullable=False, unique=True),
        sa.Column('description', sa.Text()),
        sa.Column('owner_id', sa.String(36), sa.ForeignKey('user.id', ondelete='RESTRICT'), nullable=False),
    )
    op.create_index('ix_project_owner_id', 'project', ['owner_id'])

    op.create_table(
        'project_member',
        sa.Column('project_id', sa.String(36), sa.ForeignKey('project.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('user.id', ondelete='CASCADE'), primary_key=True),
        sa.UniqueConstraint('project_id', 'user_id', name='project_member_project_id_user_id_key'),
    )
    op.create_index('ix_project_member_user_id', 'project_member', ['user_id'])

    op.create_table(
        'task',
        sa.Column('id', sa.String(36), primary_key=True),
        *_timestamps(),
        sa.Column('project_id', sa.String(36), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('priority', sa.String(32), nullable=False),
        sa.Column('assignee_id', sa.String(36)),
        sa.Column('reporter_id', sa.String(36), sa.ForeignKey('user.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True)),
        sa.Column('end_date', sa.DateTime(timezone=True)),
        sa.Column('has_due_date', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_task_project_id', 'task', ['project_id'])
    op.create_index('ix_task_assignee_id', 'task', ['assignee_id'])

    op.create_table(
        'task_date_range',
        sa.Column('id', sa.String(36), primary_key=True),
        *_timestamps(),
        sa.Column('task_id', sa.String(36), nullable=False, unique=True),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'comment',
        sa.Column('id', sa.String(36), primary_key=True),
        *_timestamps(),
        sa.Column('task_id', sa.String(36), nullable=False),
        sa.Column('author_id', sa.String(36), sa.ForeignKey('user.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
    )
    op.create_index('ix_comment_task_id', 'comment', ['task_id'])

    op.create_table(
        'image',
        sa.Column('id', sa.String(36), primary_key=True),
        *_timestamps(),
        sa.Column('filename', sa.String(255), nullable=False),
        sa.Column('original_filename', sa.String(255), nullable=False),
        sa.Column('content_type', sa.String(255), nullable=False),
        sa.Column('size', sa.BigInteger(), nullable=False),
        sa.Column('url', sa.String(2048), nullable=False),
        sa.Column('bucket', sa.String(255), nullable=False),
        sa.Column('object_key', sa.String(1024), nullable=False),
        sa.Column('uploaded_by', sa.String(36), sa.ForeignKey('user.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('project_id', sa.String(36)),
        sa.Column('task_id', sa.String(36)),
    )
    op.create_index('ix_image_uploaded_by', 'image', ['uploaded_by'])
    op.create_index('ix_image_project_id', 'image', ['project_id'])
    op.create_index('ix_image_task_id', 'image', ['task_id'])


def downgrade() -> None:
    op.drop_table('image')
    op.drop_table('comment')
    op.drop_table('task_date_range')
    op.drop_table('task')
    op.drop_table('project_member')
    op.drop_table('project')
    op.drop_table('user')

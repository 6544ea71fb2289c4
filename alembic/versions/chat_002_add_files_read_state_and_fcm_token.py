"""add files table, message read state, attachments and user push token

Revision ID: chat_002
Revises: chat_001
Create Date: 2025-02-03 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = 'chat_002'
down_revision = 'chat_001'
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table('files',
        sa.Column('file_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('filename', sa.Text(), nullable=False),
        sa.Column('mime_type', sa.Text(), nullable=False),
        sa.Column('data', postgresql.BYTEA(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('file_id')
    )
    op.create_index(op.f('ix_files_created_at'), 'files', ['created_at'])

    op.add_column('messages', sa.Column('is_read', sa.Boolean(), server_default=sa.false(), nullable=False))
    op.add_column('messages', sa.Column('attachment_file_id', sa.Integer(), nullable=True))
    op.create_foreign_key(
        'fk_messages_attachment_file_id', 'messages', 'files',
        ['attachment_file_id'], ['file_id']
    )
    op.create_index('idx_message_unread', 'messages', ['chat_id', 'receiver_id', 'is_read'])

    op.add_column('users', sa.Column('fcm_token', sa.Text(), nullable=True))

def downgrade() -> None:
    op.drop_column('users', 'fcm_token')

    op.drop_index('idx_message_unread', table_name='messages')
    op.drop_constraint('fk_messages_attachment_file_id', 'messages', type_='foreignkey')
    op.drop_column('messages', 'attachment_file_id')
    op.drop_column('messages', 'is_read')

    op.drop_index(op.f('ix_files_created_at'), table_name='files')
    op.drop_table('files')

"""create users, chats and messages tables

Revision ID: chat_001
Revises:
Create Date: 2025-01-10 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = 'chat_001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table('users',
        sa.Column('user_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('firebase_uid', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('role', sa.String(length=32), nullable=True),
        sa.Column('status', sa.String(length=32), server_default='active', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('user_id')
    )
    op.create_index(op.f('ix_users_firebase_uid'), 'users', ['firebase_uid'], unique=True)
    op.create_index(op.f('ix_users_created_at'), 'users', ['created_at'])

    op.create_table('chats',
        sa.Column('chat_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('instructor_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['student_id'], ['users.user_id'], ),
        sa.ForeignKeyConstraint(['instructor_id'], ['users.user_id'], ),
        sa.PrimaryKeyConstraint('chat_id')
    )
    # Not unique: get-or-create guards the pair
    op.create_index('idx_chat_pair', 'chats', ['student_id', 'instructor_id'])
    op.create_index(op.f('ix_chats_student_id'), 'chats', ['student_id'])
    op.create_index(op.f('ix_chats_instructor_id'), 'chats', ['instructor_id'])
    op.create_index(op.f('ix_chats_created_at'), 'chats', ['created_at'])

    op.create_table('messages',
        sa.Column('message_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('chat_id', sa.Integer(), nullable=False),
        sa.Column('sender_id', sa.Integer(), nullable=False),
        sa.Column('receiver_id', sa.Integer(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['chat_id'], ['chats.chat_id'], ),
        sa.ForeignKeyConstraint(['sender_id'], ['users.user_id'], ),
        sa.ForeignKeyConstraint(['receiver_id'], ['users.user_id'], ),
        sa.PrimaryKeyConstraint('message_id')
    )
    op.create_index('idx_message_chat_time', 'messages', ['chat_id', 'created_at'])
    op.create_index(op.f('ix_messages_chat_id'), 'messages', ['chat_id'])
    op.create_index(op.f('ix_messages_receiver_id'), 'messages', ['receiver_id'])
    op.create_index(op.f('ix_messages_created_at'), 'messages', ['created_at'])

def downgrade() -> None:
    op.drop_index(op.f('ix_messages_created_at'), table_name='messages')
    op.drop_index(op.f('ix_messages_receiver_id'), table_name='messages')
    op.drop_index(op.f('ix_messages_chat_id'), table_name='messages')
    op.drop_index('idx_message_chat_time', table_name='messages')
    op.drop_table('messages')

    op.drop_index(op.f('ix_chats_created_at'), table_name='chats')
    op.drop_index(op.f('ix_chats_instructor_id'), table_name='chats')
    op.drop_index(op.f('ix_chats_student_id'), table_name='chats')
    op.drop_index('idx_chat_pair', table_name='chats')
    op.drop_table('chats')

    op.drop_index(op.f('ix_users_created_at'), table_name='users')
    op.drop_index(op.f('ix_users_firebase_uid'), table_name='users')
    op.drop_table('users')

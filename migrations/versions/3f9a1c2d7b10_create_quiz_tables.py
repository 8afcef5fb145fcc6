"""Create users and quiz tables

Revision ID: 3f9a1c2d7b10
Revises:
Create Date: 2026-10-17 10:12:03.415220

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision = '3f9a1c2d7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    inspector = inspect(op.get_bind())
    tables = inspector.get_table_names()

    if 'users' not in tables:
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('password_hash', sa.String(length=255), nullable=False),
            sa.Column('full_name', sa.String(length=255), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.Column('user_type', sa.String(length=20), nullable=False, server_default='player'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Create quizzes table
    if 'quizzes' not in tables:
        op.create_table('quizzes',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(length=100), nullable=False),
            sa.Column('description', sa.String(length=500), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('created_by', sa.Integer(), nullable=True),
            sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_quizzes_created_at', 'quizzes', ['created_at'], unique=False)

    # Create quiz_questions table
    if 'quiz_questions' not in tables:
        op.create_table('quiz_questions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('quiz_id', sa.Integer(), nullable=False),
            sa.Column('text', sa.String(length=200), nullable=False),
            sa.Column('points', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.CheckConstraint('points >= 0 AND points <= 5', name='ck_quiz_questions_points_range'),
            sa.ForeignKeyConstraint(['quiz_id'], ['quizzes.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_quiz_questions_quiz_id', 'quiz_questions', ['quiz_id'], unique=False)
        op.create_index('ix_quiz_questions_order_index', 'quiz_questions', ['order_index'], unique=False)
        op.create_index('ix_quiz_questions_quiz_order', 'quiz_questions', ['quiz_id', 'order_index'], unique=False)

    # Create quiz_question_options table
    if 'quiz_question_options' not in tables:
        op.create_table('quiz_question_options',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('question_id', sa.Integer(), nullable=False),
            sa.Column('text', sa.Text(), nullable=False),
            sa.Column('is_correct', sa.Boolean(), nullable=False, server_default='0'),
            sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
            sa.ForeignKeyConstraint(['question_id'], ['quiz_questions.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_quiz_question_options_question_id', 'quiz_question_options', ['question_id'], unique=False)
        op.create_index('ix_question_options_question_order', 'quiz_question_options', ['question_id', 'order_index'], unique=False)


def downgrade():
    op.drop_index('ix_question_options_question_order', table_name='quiz_question_options')
    op.drop_index('ix_quiz_question_options_question_id', table_name='quiz_question_options')
    op.drop_table('quiz_question_options')

    op.drop_index('ix_quiz_questions_quiz_order', table_name='quiz_questions')
    op.drop_index('ix_quiz_questions_order_index', table_name='quiz_questions')
    op.drop_index('ix_quiz_questions_quiz_id', table_name='quiz_questions')
    op.drop_table('quiz_questions')

    op.drop_index('ix_quizzes_created_at', table_name='quizzes')
    op.drop_table('quizzes')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

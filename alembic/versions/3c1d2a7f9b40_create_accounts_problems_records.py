"""create accounts, problems and records

Revision ID: 3c1d2a7f9b40
Revises:
Create Date: 2026-10-18 10:12:41.508311

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '3c1d2a7f9b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('accounts',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('avatar', sa.Text(), nullable=True),
                    sa.Column('account', sa.String(length=32), nullable=False),
                    sa.Column('password', sa.String(length=64), nullable=False),
                    sa.Column('join_time', sa.Date(), nullable=False),
                    sa.Column('auth', sa.Integer(), nullable=False),
                    sa.PrimaryKeyConstraint('id', name=op.f('pk_accounts'))
                    )
    op.create_index(op.f('ix_accounts_account'), 'accounts', ['account'], unique=True)
    op.create_index(op.f('ix_accounts_id'), 'accounts', ['id'], unique=False)
    op.create_table('problems',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('title', sa.String(length=64), nullable=False),
                    sa.Column('description', sa.Text(), nullable=True),
                    sa.Column('judge_num', sa.Integer(), server_default=sa.text('0'), nullable=False),
                    sa.Column('time_limit', sa.Interval(), server_default=sa.text("'1970-01-01 00:00:01.000000'"),
                              nullable=False),
                    sa.Column('memory_limit', sa.Integer(), server_default=sa.text('128000'), nullable=False),
                    sa.Column('owner_id', sa.Integer(), nullable=True),
                    sa.ForeignKeyConstraint(['owner_id'], ['accounts.id'],
                                            name=op.f('fk_problems_owner_id_accounts'), ondelete='SET NULL'),
                    sa.PrimaryKeyConstraint('id', name=op.f('pk_problems'))
                    )
    op.create_index(op.f('ix_problems_id'), 'problems', ['id'], unique=False)
    op.create_index(op.f('ix_problems_owner_id'), 'problems', ['owner_id'], unique=False)
    op.create_table('records',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('account_id', sa.Integer(), nullable=False),
                    sa.Column('problem_id', sa.Integer(), nullable=False),
                    sa.Column('language', sa.Integer(), nullable=False),
                    sa.Column('code', sa.Text(), nullable=False),
                    sa.Column('submit_time', sa.DateTime(timezone=True), nullable=False),
                    sa.Column('status', sa.Integer(), server_default=sa.text('10'), nullable=False),
                    sa.Column('run_time', sa.Integer(), nullable=True),
                    sa.ForeignKeyConstraint(['account_id'], ['accounts.id'],
                                            name=op.f('fk_records_account_id_accounts'), ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['problem_id'], ['problems.id'],
                                            name=op.f('fk_records_problem_id_problems'), ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id', name=op.f('pk_records'))
                    )
    op.create_index(op.f('ix_records_account_id'), 'records', ['account_id'], unique=False)
    op.create_index(op.f('ix_records_id'), 'records', ['id'], unique=False)
    op.create_index(op.f('ix_records_problem_id'), 'records', ['problem_id'], unique=False)
    op.create_index(op.f('ix_records_status'), 'records', ['status'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_records_status'), table_name='records')
    op.drop_index(op.f('ix_records_problem_id'), table_name='records')
    op.drop_index(op.f('ix_records_id'), table_name='records')
    op.drop_index(op.f('ix_records_account_id'), table_name='records')
    op.drop_table('records')

    op.drop_index(op.f('ix_problems_owner_id'), table_name='problems')
    op.drop_index(op.f('ix_problems_id'), table_name='problems')
    op.drop_table('problems')

    op.drop_index(op.f('ix_accounts_id'), table_name='accounts')
    op.drop_index(op.f('ix_accounts_account'), table_name='accounts')
    op.drop_table('accounts')

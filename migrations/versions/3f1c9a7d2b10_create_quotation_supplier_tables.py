"""create user, quotation, supplier and auditlog tables

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19 10:12:44.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


USER_ROLE = sa.Enum('CUSTOMER', 'ADMINISTRATOR', name='userrole')
QUOTATION_STATUS = sa.Enum(
    'PENDING', 'APPROVED', 'REJECTED', name='quotationstatus')
SUPPLIER_STATUS = sa.Enum('ACTIVE', 'INACTIVE', name='supplierstatus')
AUDIT_ACTION = sa.Enum('CREATE', 'UPDATE', 'DELETE',
                       'APPROVE', 'REJECT', name='auditaction')


def upgrade():
    op.create_table(
        'user',
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('hashed_password',
                  sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('role', USER_ROLE, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    op.create_table(
        'quotation',
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('phone_number',
                  sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('business_address',
                  sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('company_name',
                  sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('industrial_experience',
                  sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('qualification',
                  sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('product_details',
                  sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('status', QUOTATION_STATUS, nullable=False),
        sa.Column('admin_notes', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('approved_by', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('rejected_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_quotation_email'), 'quotation', ['email'])
    op.create_index(op.f('ix_quotation_status'), 'quotation', ['status'])

    op.create_table(
        'supplier',
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('product_name',
                  sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('product_image',
                  sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('product_code',
                  sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('status', SUPPLIER_STATUS, nullable=False),
        sa.Column('created_by', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('quotation_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['quotation_id'], ['quotation.id']),
        sa.PrimaryKeyConstraint('id')
    )
    # Durable backstop for the application-level product code check
    op.create_index(op.f('ix_supplier_product_code'),
                    'supplier', ['product_code'], unique=True)
    op.create_index(op.f('ix_supplier_quotation_id'),
                    'supplier', ['quotation_id'])

    op.create_table(
        'auditlog',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('actor_user_id', sa.Uuid(), nullable=False),
        sa.Column('entity_type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('entity_id', sa.Uuid(), nullable=False),
        sa.Column('action', AUDIT_ACTION, nullable=False),
        sa.Column('changes', sa.JSON(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_auditlog_actor_user_id'),
                    'auditlog', ['actor_user_id'])
    op.create_index(op.f('ix_auditlog_entity_type'),
                    'auditlog', ['entity_type'])
    op.create_index(op.f('ix_auditlog_entity_id'), 'auditlog', ['entity_id'])


def downgrade():
    op.drop_table('auditlog')
    op.drop_table('supplier')
    op.drop_table('quotation')
    op.drop_table('user')

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for enum in (AUDIT_ACTION, SUPPLIER_STATUS, QUOTATION_STATUS, USER_ROLE):
            enum.drop(bind, checkfirst=True)

"""initial portal schema: companies, relationships, users, roles, services

Revision ID: a3e1c9d0b7f2
Revises:
Create Date: 2026-10-18

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a3e1c9d0b7f2'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'company_master',
        sa.Column('company_id', sa.String(length=36), primary_key=True),
        sa.Column('company_name', sa.String(length=160), nullable=False),
        sa.Column('company_type', sa.String(length=20), nullable=False),
        sa.Column('company_status', sa.String(length=20), nullable=False, server_default='ACTIVE'),
        sa.Column('is_client', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'company_relationship',
        sa.Column('company_relationship_id', sa.String(length=36), primary_key=True),
        sa.Column('from_company_id', sa.String(length=36), sa.ForeignKey('company_master.company_id'), nullable=False),
        sa.Column('to_company_id', sa.String(length=36), sa.ForeignKey('company_master.company_id'), nullable=False),
        sa.Column('relationship_type', sa.String(length=30), nullable=False),
        sa.Column('relationship_status', sa.String(length=20), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('from_company_id', 'to_company_id', 'relationship_type', name='uq_relationship_from_to_type'),
    )
    op.create_index('ix_company_relationship_created_at', 'company_relationship', ['created_at'])

    op.create_table(
        'user_master',
        sa.Column('user_id', sa.String(length=36), primary_key=True),
        sa.Column('first_name', sa.String(length=80), nullable=False),
        sa.Column('middle_name', sa.String(length=80), nullable=True),
        sa.Column('last_name', sa.String(length=80), nullable=False),
        sa.Column('email', sa.String(length=180), nullable=False),
        sa.Column('phone', sa.String(length=40), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_user_master_email', 'user_master', ['email'], unique=True)

    op.create_table(
        'permission_master',
        sa.Column('permission_id', sa.String(length=36), primary_key=True),
        sa.Column('permission_key', sa.String(length=80), nullable=False, unique=True),
        sa.Column('permission_name', sa.String(length=120), nullable=False),
        sa.Column('permission_description', sa.String(length=255), nullable=False),
        sa.Column('permission_category', sa.String(length=40), nullable=False),
        sa.Column('permission_status', sa.String(length=20), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'designation_master',
        sa.Column('designation_id', sa.String(length=36), primary_key=True),
        sa.Column('company_id', sa.String(length=36), sa.ForeignKey('company_master.company_id'), nullable=False),
        sa.Column('designation_name', sa.String(length=120), nullable=False),
        sa.Column('designation_description', sa.String(length=255), nullable=True),
        sa.Column('designation_status', sa.String(length=20), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'designation_permissions',
        sa.Column('designation_permission_id', sa.String(length=36), primary_key=True),
        sa.Column('designation_id', sa.String(length=36), sa.ForeignKey('designation_master.designation_id'), nullable=False),
        sa.Column('permission_id', sa.String(length=36), sa.ForeignKey('permission_master.permission_id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('designation_id', 'permission_id', name='uq_designation_permission'),
    )

    op.create_table(
        'user_company_assignments',
        sa.Column('user_company_assignment_id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('user_master.user_id'), nullable=False),
        sa.Column('company_id', sa.String(length=36), sa.ForeignKey('company_master.company_id'), nullable=False),
        sa.Column('designation_id', sa.String(length=36), sa.ForeignKey('designation_master.designation_id'), nullable=False),
        sa.Column(
            'company_relationship_id',
            sa.String(length=36),
            sa.ForeignKey('company_relationship.company_relationship_id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('assignment_status', sa.String(length=20), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index(
        'ix_user_company_assignments_company_relationship_id',
        'user_company_assignments',
        ['company_relationship_id'],
    )

    op.create_table(
        'service_master',
        sa.Column('service_id', sa.String(length=36), primary_key=True),
        sa.Column('service_key', sa.String(length=60), nullable=False, unique=True),
        sa.Column('service_name', sa.String(length=120), nullable=False),
        sa.Column('service_description', sa.String(length=255), nullable=True),
        sa.Column('service_status', sa.String(length=20), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_service_master_service_status', 'service_master', ['service_status'])

    op.create_table(
        'company_services',
        sa.Column('company_service_id', sa.String(length=36), primary_key=True),
        sa.Column('company_id', sa.String(length=36), sa.ForeignKey('company_master.company_id'), nullable=False),
        sa.Column('service_id', sa.String(length=36), sa.ForeignKey('service_master.service_id'), nullable=False),
        sa.Column('is_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('company_id', 'service_id', name='uq_company_service'),
    )


def downgrade():
    op.drop_table('company_services')

    op.drop_index('ix_service_master_service_status', table_name='service_master')
    op.drop_table('service_master')

    op.drop_index('ix_user_company_assignments_company_relationship_id', table_name='user_company_assignments')
    op.drop_table('user_company_assignments')

    op.drop_table('designation_permissions')
    op.drop_table('designation_master')
    op.drop_table('permission_master')

    op.drop_index('ix_user_master_email', table_name='user_master')
    op.drop_table('user_master')

    op.drop_index('ix_company_relationship_created_at', table_name='company_relationship')
    op.drop_table('company_relationship')

    op.drop_table('company_master')

"""Create patient roster tables

Practice, users, patients with their general/medical/PDB satellites,
follow-ups, notes, families, eligibility and scraper credentials.

Revision ID: r0s7e1r0a001
Revises:
Create Date: 2024-01-15 00:01:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'r0s7e1r0a001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('practice',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('company', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('app_user',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
    )

    op.create_table('patient',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('practice_id', sa.Integer(), nullable=False),
        sa.Column('website', sa.String(length=20), nullable=True),
        sa.Column('facility_id', sa.String(length=100), nullable=True),
        sa.Column('last_service_date', sa.DateTime(), nullable=True),
        sa.Column('next_service', sa.DateTime(), nullable=True),
        sa.Column('last_touch', sa.DateTime(), nullable=True),
        sa.Column('insert_date', sa.DateTime(), nullable=False),
        sa.Column('contact_status', sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(['practice_id'], ['practice.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_patient_practice_id', 'patient', ['practice_id'])

    op.create_table('patient_general_info',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('dob', sa.String(length=10), nullable=True),
        sa.Column('subscriber_id', sa.String(length=100), nullable=True),
        sa.Column('mco_status', sa.Boolean(), nullable=True),
        sa.Column('multi_practice', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['patient_id'], ['patient.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('patient_id'),
    )

    op.create_table('patient_medical_info',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('insurance', sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(['patient_id'], ['patient.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('patient_id'),
    )

    op.create_table('patient_pdb_info',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('last_service_date_pdb', sa.DateTime(), nullable=True),
        sa.Column('last_prophylaxis_date_pdb', sa.DateTime(), nullable=True),
        sa.Column('tx_planned', sa.Integer(), nullable=True),
        sa.Column('total_visits', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['patient_id'], ['patient.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('patient_id'),
    )

    op.create_table('patient_family',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('guarantor_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['patient_id'], ['patient.id'], ),
        sa.ForeignKeyConstraint(['guarantor_id'], ['patient.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('patient_id'),
    )
    op.create_index('ix_patient_family_guarantor_id', 'patient_family', ['guarantor_id'])

    op.create_table('eligibility',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('payer', sa.String(length=255), nullable=True),
        sa.Column('plan_name', sa.String(length=255), nullable=True),
        sa.Column('coverage_status', sa.String(length=50), nullable=True),
        sa.Column('effective_date', sa.DateTime(), nullable=True),
        sa.Column('termination_date', sa.DateTime(), nullable=True),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('checked_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['patient_id'], ['patient.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_eligibility_patient_id', 'eligibility', ['patient_id'])

    op.create_table('follow_up',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('author', sa.Integer(), nullable=True),
        sa.Column('assignee', sa.String(length=255), nullable=True),
        sa.Column('due_date', sa.DateTime(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['patient_id'], ['patient.id'], ),
        sa.ForeignKeyConstraint(['author'], ['app_user.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_follow_up_patient_id', 'follow_up', ['patient_id'])

    op.create_table('patient_note',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('author_username', sa.String(length=255), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['patient_id'], ['patient.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_patient_note_patient_id', 'patient_note', ['patient_id'])

    op.create_table('scraper_credential',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('company', sa.String(length=255), nullable=False),
        sa.Column('practice_id', sa.Integer(), nullable=False),
        sa.Column('website', sa.String(length=20), nullable=False),
        sa.Column('facility_id', sa.String(length=100), nullable=True),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['practice_id'], ['practice.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('scraper_user',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('validated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
    )


def downgrade() -> None:
    op.drop_table('scraper_user')
    op.drop_table('scraper_credential')
    op.drop_index('ix_patient_note_patient_id', table_name='patient_note')
    op.drop_table('patient_note')
    op.drop_index('ix_follow_up_patient_id', table_name='follow_up')
    op.drop_table('follow_up')
    op.drop_index('ix_eligibility_patient_id', table_name='eligibility')
    op.drop_table('eligibility')
    op.drop_index('ix_patient_family_guarantor_id', table_name='patient_family')
    op.drop_table('patient_family')
    op.drop_table('patient_pdb_info')
    op.drop_table('patient_medical_info')
    op.drop_table('patient_general_info')
    op.drop_index('ix_patient_practice_id', table_name='patient')
    op.drop_table('patient')
    op.drop_table('app_user')
    op.drop_table('practice')

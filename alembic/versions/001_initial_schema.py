"""Initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

Creates the enumerated types and all tables:
- companies
- users
- pilot_programs
- pilot_program_users
- sites
- submissions
- submission_sessions
- pilot_program_history
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ENUM_VALUES = {
    'site_type_enum': ['Greenhouse', 'Storage', 'Transport', 'Production Facility'],
    'program_status_enum': ['active', 'inactive'],
    'user_role_enum': ['Admin', 'Edit', 'Respond', 'ReadOnly'],
    'interior_working_surface_type_enum': [
        'Stainless Steel', 'Unfinished Concrete', 'Wood', 'Plastic', 'Granite', 'Other Non-Absorbative',
    ],
    'microbial_risk_zone_enum': ['Low', 'Medium', 'High'],
    'ventilation_strategy_enum': [
        'Cross-Ventilation', 'Positive Pressure', 'Negative Pressure', 'Neutral Sealed',
    ],
    'primary_function_enum': ['Growing', 'Drying', 'Packaging', 'Storage', 'Research', 'Retail'],
    'construction_material_enum': ['Glass', 'Polycarbonate', 'Metal', 'Concrete', 'Wood'],
    'insulation_type_enum': ['None', 'Basic', 'Moderate', 'High'],
    'hvac_system_type_enum': ['Centralized', 'Distributed', 'Evaporative Cooling', 'None'],
    'irrigation_system_type_enum': ['Drip', 'Sprinkler', 'Hydroponic', 'Manual'],
    'lighting_system_enum': ['Natural Light Only', 'LED', 'HPS', 'Fluorescent'],
    'vent_placement_enum': ['Ceiling-Center', 'Ceiling-Perimeter', 'Upper-Walls', 'Lower-Walls', 'Floor-Level'],
    'odor_distance_enum': ['5-10ft', '10-25ft', '25-50ft', '50-100ft', '>100ft'],
    'weather_enum': ['Clear', 'Cloudy', 'Rain'],
    'session_status_enum': [
        'Opened', 'Working', 'Completed', 'Cancelled', 'Expired', 'Escalated', 'Shared',
        'Expired-Complete', 'Expired-Incomplete',
    ],
    'history_event_type_enum': [
        'ProgramCreation', 'ProgramUpdate', 'SiteCreation', 'SiteUpdate', 'SiteDeletion',
        'SubmissionCreation', 'SubmissionUpdate',
    ],
}


def _enum(name: str) -> postgresql.ENUM:
    """Reference an enum type created up front."""
    return postgresql.ENUM(*ENUM_VALUES[name], name=name, create_type=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create enum types, then tables in dependency order."""
    bind = op.get_bind()
    for name, values in ENUM_VALUES.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    # Companies table
    op.create_table(
        'companies',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        *_timestamps(),
    )

    # Users table
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('is_company_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    # Pilot programs table
    op.create_table(
        'pilot_programs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('status', _enum('program_status_enum'), nullable=False, server_default='active'),
        sa.Column('total_sites', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_submissions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='SET NULL'), nullable=True, index=True),
        *_timestamps(),
    )

    # Program memberships
    op.create_table(
        'pilot_program_users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('program_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('pilot_programs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('role', _enum('user_role_enum'), nullable=False, server_default='Respond'),
        *_timestamps(),
        sa.UniqueConstraint('program_id', 'user_id', name='uq_pilot_program_users_program_user'),
    )

    # Sites table
    op.create_table(
        'sites',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('type', _enum('site_type_enum'), nullable=False),
        sa.Column('program_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('pilot_programs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('submission_defaults', postgresql.JSONB(), nullable=True),
        sa.Column('petri_defaults', postgresql.JSONB(), nullable=True),
        sa.Column('gasifier_defaults', postgresql.JSONB(), nullable=True),
        sa.Column('length', sa.Float(), nullable=True),
        sa.Column('width', sa.Float(), nullable=True),
        sa.Column('height', sa.Float(), nullable=True),
        sa.Column('square_footage', sa.Float(), nullable=True),
        sa.Column('cubic_footage', sa.Float(), nullable=True),
        sa.Column('num_vents', sa.Integer(), nullable=True),
        sa.Column('vent_placements', postgresql.ARRAY(_enum('vent_placement_enum')), nullable=True),
        sa.Column('primary_function', _enum('primary_function_enum'), nullable=True),
        sa.Column('construction_material', _enum('construction_material_enum'), nullable=True),
        sa.Column('insulation_type', _enum('insulation_type_enum'), nullable=True),
        sa.Column('hvac_system_present', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('hvac_system_type', _enum('hvac_system_type_enum'), nullable=True),
        sa.Column('irrigation_system_type', _enum('irrigation_system_type_enum'), nullable=True),
        sa.Column('lighting_system', _enum('lighting_system_enum'), nullable=True),
        sa.Column('min_efficacious_gasifier_density_sqft_per_bag', sa.Float(), nullable=True, server_default='2000'),
        sa.Column('recommended_placement_density_bags', sa.Integer(), nullable=True),
        sa.Column('has_dead_zones', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('num_regularly_opened_ports', sa.Integer(), nullable=True),
        sa.Column('interior_working_surface_types', postgresql.ARRAY(_enum('interior_working_surface_type_enum')), nullable=True),
        sa.Column('microbial_risk_zone', _enum('microbial_risk_zone_enum'), nullable=True, server_default='Medium'),
        sa.Column('quantity_deadzones', sa.Integer(), nullable=True),
        sa.Column('ventilation_strategy', _enum('ventilation_strategy_enum'), nullable=True),
        sa.Column('lastupdated_by', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            'quantity_deadzones IS NULL OR (quantity_deadzones >= 1 AND quantity_deadzones <= 25)',
            name='ck_sites_quantity_deadzones_range',
        ),
    )

    # Submissions table
    op.create_table(
        'submissions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('site_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('sites.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('program_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('pilot_programs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('temperature', sa.Float(), nullable=False),
        sa.Column('humidity', sa.Float(), nullable=False),
        sa.Column('indoor_temperature', sa.Float(), nullable=True),
        sa.Column('indoor_humidity', sa.Float(), nullable=True),
        sa.Column('airflow', _enum('ventilation_strategy_enum'), nullable=True),
        sa.Column('odor_distance', _enum('odor_distance_enum'), nullable=True),
        sa.Column('weather', _enum('weather_enum'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
    )

    # Submission sessions
    op.create_table(
        'submission_sessions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('submission_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('submissions.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('site_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('sites.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('program_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('pilot_programs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('opened_by_user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('session_start_time', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('last_activity_time', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('session_status', _enum('session_status_enum'), nullable=False, server_default='Opened', index=True),
        sa.Column('percentage_complete', sa.Float(), nullable=False, server_default='0'),
    )

    # Audit log
    op.create_table(
        'pilot_program_history',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('event_timestamp', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, index=True),
        sa.Column('update_type', _enum('history_event_type_enum'), nullable=False),
        sa.Column('object_id', postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column('object_type', sa.String(50), nullable=False),
        sa.Column('program_id', postgresql.UUID(as_uuid=True), nullable=True, index=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=True, index=True),
        sa.Column('user_email', sa.String(255), nullable=True),
        sa.Column('old_data', postgresql.JSONB(), nullable=True),
        sa.Column('new_data', postgresql.JSONB(), nullable=True),
    )


def downgrade() -> None:
    """Drop all tables in reverse order, then the enum types."""
    op.drop_table('pilot_program_history')
    op.drop_table('submission_sessions')
    op.drop_table('submissions')
    op.drop_table('sites')
    op.drop_table('pilot_program_users')
    op.drop_table('pilot_programs')
    op.drop_table('users')
    op.drop_table('companies')

    bind = op.get_bind()
    for name in reversed(list(ENUM_VALUES)):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)

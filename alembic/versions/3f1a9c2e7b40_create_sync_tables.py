"""create animals, weight observations, vaccination events and catalogs

Revision ID: 3f1a9c2e7b40
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2e7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    breeds = op.create_table(
        'breeds',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_breeds_name'), 'breeds', ['name'], unique=False)
    vaccine_types = op.create_table(
        'vaccine_types',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    vaccine_names = op.create_table(
        'vaccine_names',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'animals',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('tag', sa.String(length=128), nullable=False),
        sa.Column('birth_weight', sa.Numeric(8, 2), nullable=False),
        sa.Column('breed_id', sa.Integer(), sa.ForeignKey('breeds.id'), nullable=False),
        sa.Column('birth_date', sa.Date(), nullable=False),
        sa.Column('photo_url', sa.String(length=1024), nullable=True),
        sa.Column('diseases', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('origin', sa.String(length=255), nullable=True),
        sa.Column('brand', sa.String(length=255), nullable=True),
        sa.Column('category', sa.String(length=64), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('calving_number', sa.Integer(), nullable=True),
        sa.Column('precocity', sa.String(length=64), nullable=True),
        sa.Column('mating_type', sa.String(length=64), nullable=True),
        sa.Column('dam_id', sa.Uuid(), sa.ForeignKey('animals.id'), nullable=True),
        sa.Column('sire_id', sa.Uuid(), sa.ForeignKey('animals.id'), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_animals_tenant_id'), 'animals', ['tenant_id'], unique=False)
    op.create_index('idx_animals_tenant_updated', 'animals', ['tenant_id', 'updated_at'])
    op.create_index(
        'ux_animals_tenant_tag_active',
        'animals',
        ['tenant_id', 'tag'],
        unique=True,
        postgresql_where=sa.text('deleted_at IS NULL'),
        sqlite_where=sa.text('deleted_at IS NULL'),
    )

    op.create_table(
        'weight_observations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('animal_id', sa.Uuid(), sa.ForeignKey('animals.id'), nullable=False),
        sa.Column('tag', sa.String(length=128), nullable=False),
        sa.Column('observed_on', sa.Date(), nullable=False),
        sa.Column('weight_kg', sa.Numeric(8, 2), nullable=False),
        sa.Column('kind', sa.String(length=16), server_default='routine', nullable=False),
        sa.Column('purchase_cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('sale_cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('purchase_price_per_kg', sa.Numeric(10, 2), nullable=True),
        sa.Column('sale_price_per_kg', sa.Numeric(10, 2), nullable=True),
        sa.Column('weight_gain', sa.Numeric(8, 2), nullable=True),
        sa.Column('partial_weight_gain', sa.Numeric(8, 2), nullable=True),
        sa.Column('value_gain', sa.Numeric(12, 2), nullable=True),
        sa.Column('months_elapsed', sa.Numeric(6, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'idx_weight_observations_animal_date', 'weight_observations', ['animal_id', 'observed_on']
    )
    op.create_index('idx_weight_observations_updated', 'weight_observations', ['updated_at'])

    op.create_table(
        'vaccination_events',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('animal_id', sa.Uuid(), sa.ForeignKey('animals.id'), nullable=False),
        sa.Column('administered_on', sa.Date(), nullable=False),
        sa.Column('vaccine_type_id', sa.Integer(), sa.ForeignKey('vaccine_types.id'), nullable=False),
        sa.Column('vaccine_name_id', sa.Integer(), sa.ForeignKey('vaccine_names.id'), nullable=False),
        sa.Column('dose', sa.String(length=64), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'idx_vaccination_events_animal_date',
        'vaccination_events',
        ['animal_id', 'administered_on'],
    )
    op.create_index('idx_vaccination_events_updated', 'vaccination_events', ['updated_at'])

    # Seed the "other" sentinels that unknown client references fall back to
    op.bulk_insert(breeds, [{"id": 25, "name": "Otra raza"}])
    op.bulk_insert(vaccine_types, [{"id": 11, "name": "Otro tipo"}])
    op.bulk_insert(vaccine_names, [{"id": 23, "name": "Otra vacuna"}])


def downgrade() -> None:
    op.drop_index('idx_vaccination_events_updated', table_name='vaccination_events')
    op.drop_index('idx_vaccination_events_animal_date', table_name='vaccination_events')
    op.drop_table('vaccination_events')
    op.drop_index('idx_weight_observations_updated', table_name='weight_observations')
    op.drop_index('idx_weight_observations_animal_date', table_name='weight_observations')
    op.drop_table('weight_observations')
    op.drop_index('ux_animals_tenant_tag_active', table_name='animals')
    op.drop_index('idx_animals_tenant_updated', table_name='animals')
    op.drop_index(op.f('ix_animals_tenant_id'), table_name='animals')
    op.drop_table('animals')
    op.drop_table('vaccine_names')
    op.drop_table('vaccine_types')
    op.drop_index(op.f('ix_breeds_name'), table_name='breeds')
    op.drop_table('breeds')

"""Initial migration

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.sql import func

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Оборудование (одна запись на BSSID)
    op.create_table(
        'access_point_hw',
        sa.Column('hwid', sa.Integer(), primary_key=True),
        sa.Column('bssid', sa.String(length=32), nullable=False, unique=True, comment="MAC-адрес радиомодуля"),
        sa.Column('equipment_code', sa.String(length=64), nullable=False, server_default='', comment="Инвентарный номер"),
        sa.Column('equipment_name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('location', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('ieee_standard', sa.String(length=32), nullable=False, server_default='', comment="802.11 a/b/g/n/ac/ax"),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
    )
    op.create_index('ix_access_point_hw_hwid', 'access_point_hw', ['hwid'])

    # Последний снимок пары (essid, bssid)
    op.create_table(
        'access_point_service',
        sa.Column('apid', sa.Integer(), primary_key=True),
        sa.Column('essid', sa.String(length=255), nullable=False),
        sa.Column('bssid', sa.String(length=32), nullable=False),
        sa.Column('signals', sa.Integer(), nullable=False, comment="Уровень сигнала (dBm)"),
        sa.Column('channel', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('frequency', sa.Integer(), nullable=False, server_default='0', comment="Частота (MHz)"),
        sa.Column('security', sa.String(length=64), nullable=False, server_default=''),
        sa.Column('hwid', sa.Integer(), sa.ForeignKey('access_point_hw.hwid'), nullable=False),
        sa.Column('log_time', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('essid', 'bssid', name='uq_access_point_service_essid_bssid'),
    )
    op.create_index('ix_access_point_service_apid', 'access_point_service', ['apid'])
    op.create_index('ix_access_point_service_essid', 'access_point_service', ['essid'])
    op.create_index('ix_access_point_service_bssid', 'access_point_service', ['bssid'])

    # Инциденты (только добавление)
    op.create_table(
        'incidents',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('essid', sa.String(length=255), nullable=False),
        sa.Column('bssid', sa.String(length=32), nullable=False),
        sa.Column('reporter_email', sa.String(length=255), nullable=False, comment="'unknown', если отправитель не авторизован"),
        sa.Column('reporter_id', sa.Integer(), nullable=True),
        sa.Column('classification', sa.String(length=64), nullable=False),
        sa.Column('detected_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
    )
    op.create_index('ix_incidents_id', 'incidents', ['id'])
    op.create_index('ix_incidents_bssid', 'incidents', ['bssid'])


def downgrade():
    op.drop_index('ix_incidents_bssid', table_name='incidents')
    op.drop_index('ix_incidents_id', table_name='incidents')
    op.drop_table('incidents')
    op.drop_index('ix_access_point_service_bssid', table_name='access_point_service')
    op.drop_index('ix_access_point_service_essid', table_name='access_point_service')
    op.drop_index('ix_access_point_service_apid', table_name='access_point_service')
    op.drop_table('access_point_service')
    op.drop_index('ix_access_point_hw_hwid', table_name='access_point_hw')
    op.drop_table('access_point_hw')

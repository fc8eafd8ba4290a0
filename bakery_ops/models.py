from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    # Persist the lowercase values, not the member names.
    return [member.value for member in enum_cls]


class CompanyRole(str, Enum):
    BAKER = 'baker'
    MANAGER = 'manager'
    TECH_SPECIALIST = 'tech_specialist'
    ADMIN = 'admin'
    OWNER = 'owner'


COUNT_DUTY_ROLE = CompanyRole.BAKER
SUPERVISORY_ROLES = (CompanyRole.ADMIN, CompanyRole.OWNER, CompanyRole.MANAGER)


class InventoryActStatus(str, Enum):
    PENDING = 'pending'
    COMPLETED = 'completed'
    OVERDUE = 'overdue'


class ResourceType(str, Enum):
    FLOUR = 'flour'
    SUGAR = 'sugar'
    SALT = 'salt'
    OIL = 'oil'
    DRY_MILK = 'dry_milk'
    YEAST = 'yeast'


class ShiftStatus(str, Enum):
    OPEN = 'open'
    CLOSED = 'closed'


class Store(Base):
    __tablename__ = 'stores'

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Worker(Base):
    __tablename__ = 'workers'

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True)
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    company_role: Mapped[CompanyRole | None] = mapped_column(
        SQLEnum(CompanyRole, name='company_role', values_callable=_enum_values)
    )
    push_token: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default='true')
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class WorkerStoreAssignment(Base):
    __tablename__ = 'worker_stores'
    __table_args__ = (
        UniqueConstraint('worker_id', 'store_id', name='worker_stores_worker_store_key'),
    )

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True)
    worker_id: Mapped[int] = mapped_column(BigInteger, ForeignKey('workers.id', ondelete='CASCADE'), nullable=False)
    store_id: Mapped[int] = mapped_column(BigInteger, ForeignKey('stores.id', ondelete='CASCADE'), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class InventoryAct(Base):
    __tablename__ = 'inventory_acts'
    __table_args__ = (
        UniqueConstraint('store_id', 'week_year', 'week_number', name='inventory_acts_store_week_key'),
        CheckConstraint('week_number BETWEEN 1 AND 53', name='inventory_acts_week_number_ck'),
    )

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True)
    store_id: Mapped[int] = mapped_column(BigInteger, ForeignKey('stores.id', ondelete='CASCADE'), nullable=False)
    worker_id: Mapped[int] = mapped_column(BigInteger, ForeignKey('workers.id'), nullable=False)
    week_year: Mapped[int] = mapped_column(Integer, nullable=False)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False)
    conducted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    status: Mapped[InventoryActStatus] = mapped_column(
        SQLEnum(InventoryActStatus, name='inventory_act_status', values_callable=_enum_values),
        nullable=False,
        default=InventoryActStatus.PENDING,
        server_default=InventoryActStatus.PENDING.value,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class InventoryActItem(Base):
    __tablename__ = 'inventory_act_items'
    __table_args__ = (
        CheckConstraint('quantity_kg >= 0', name='inventory_act_items_non_negative_ck'),
    )

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True)
    act_id: Mapped[int] = mapped_column(BigInteger, ForeignKey('inventory_acts.id', ondelete='CASCADE'), nullable=False)
    resource_type: Mapped[ResourceType] = mapped_column(
        SQLEnum(ResourceType, name='resource_type', values_callable=_enum_values), nullable=False
    )
    item_name: Mapped[str] = mapped_column(Text, nullable=False)
    quantity_kg: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Shift(Base):
    __tablename__ = 'shifts'

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True)
    worker_id: Mapped[int] = mapped_column(BigInteger, ForeignKey('workers.id'), nullable=False)
    store_id: Mapped[int] = mapped_column(BigInteger, ForeignKey('stores.id'), nullable=False)
    status: Mapped[ShiftStatus] = mapped_column(
        SQLEnum(ShiftStatus, name='shift_status', values_callable=_enum_values),
        nullable=False,
        default=ShiftStatus.OPEN,
        server_default=ShiftStatus.OPEN.value,
    )
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class AuditLog(Base):
    __tablename__ = 'audit_log'

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True)
    action: Mapped[str] = mapped_column(Text, nullable=False)
    meta: Mapped[dict] = mapped_column('metadata', JSON, nullable=False, default=dict, server_default='{}')
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Date, Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Donor(Base):
    __tablename__ = "donors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    blood_group: Mapped[str] = mapped_column(String(3), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255))
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    availability_status: Mapped[str] = mapped_column(String(16), nullable=False, default="available")
    last_donation_date: Mapped[Optional[date]] = mapped_column(Date)
    gender: Mapped[Optional[str]] = mapped_column(String(16))
    contact: Mapped[Optional[str]] = mapped_column(String(32))

    __table_args__ = (
        Index("ix_donor_blood_group_status", "blood_group", "availability_status"),
    )


class BloodBank(Base):
    __tablename__ = "blood_banks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255))
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    contact: Mapped[Optional[str]] = mapped_column(String(32))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    operating_hours: Mapped[Optional[str]] = mapped_column(String(64))
    is_open: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    inventory: Mapped[list["BloodInventory"]] = relationship(
        back_populates="blood_bank",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class BloodInventory(Base):
    __tablename__ = "blood_inventory"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    blood_bank_id: Mapped[str] = mapped_column(ForeignKey("blood_banks.id"), nullable=False)
    blood_group: Mapped[str] = mapped_column(String(3), nullable=False)
    units: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    blood_bank: Mapped[BloodBank] = relationship(back_populates="inventory")

    __table_args__ = (
        UniqueConstraint("blood_bank_id", "blood_group", name="uq_inventory_bank_group"),
        CheckConstraint("units >= 0", name="ck_inventory_units_non_negative"),
        Index("ix_inventory_blood_bank_id", "blood_bank_id"),  # FK index for JOINs
    )


class OxygenSupplier(Base):
    __tablename__ = "oxygen_suppliers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255))
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    contact: Mapped[Optional[str]] = mapped_column(String(32))
    operating_hours: Mapped[Optional[str]] = mapped_column(String(64))


__all__ = ["Donor", "BloodBank", "BloodInventory", "OxygenSupplier"]

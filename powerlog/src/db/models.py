"""
SQLAlchemy ORM models for the powerlog database.

Defines the Device reference table and the PowerReading time-series table
in their post-migration layout (``power.timestamp`` as a native TIMESTAMP).

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

import datetime

from sqlalchemy import DateTime, Double, ForeignKey, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all powerlog ORM models."""

    pass


class Device(Base):
    """A device producing power readings.

    Devices are provisioned externally before any reading references them.
    Deleting a device is not cascaded to its readings.

    Attributes:
        id: Stable string key of the device.
        name: Display name.
        ipv6: Optional network address.
    """

    __tablename__ = "devices"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    ipv6: Mapped[str | None] = mapped_column(Text, nullable=True)

    readings: Mapped[list["PowerReading"]] = relationship(back_populates="device")

    def __repr__(self) -> str:
        """Return string representation of the Device."""
        return f"Device(id={self.id!r}, name={self.name!r})"


class PowerReading(Base):
    """A single power measurement, in watts, owned by exactly one device.

    Attributes:
        id: Stable string key of the reading.
        device_id: Owning device; must exist in ``devices.id``.
        timestamp: Point in time the reading was taken (naive TIMESTAMP).
        power: Measured power in watts.
    """

    __tablename__ = "power"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    device_id: Mapped[str] = mapped_column(
        Text, ForeignKey("devices.id"), nullable=False,
    )
    timestamp: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=False), nullable=False,
    )
    power: Mapped[float] = mapped_column(Double, nullable=False)

    device: Mapped[Device] = relationship(back_populates="readings")

    def __repr__(self) -> str:
        """Return string representation of the PowerReading."""
        return (
            f"PowerReading(id={self.id!r}, device_id={self.device_id!r}, "
            f"timestamp={self.timestamp!r}, power={self.power!r})"
        )

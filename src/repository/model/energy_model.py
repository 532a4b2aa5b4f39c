"""SQLAlchemy model for energy meter measurements."""

from datetime import datetime

from sqlalchemy import DateTime, Float, Index, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    ...


class Energy(Base):
    """
    One row per poll of a meter.

    Column order follows the ``Measurement`` record; each tracked counter
    contributes exp, mantissa, val, x10 and float columns.
    """

    __tablename__ = "energy"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    device_id: Mapped[int] = mapped_column(Integer, nullable=False)
    db_timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
    device_timestamp: Mapped[int] = mapped_column(Integer, nullable=False)

    frequency: Mapped[float] = mapped_column(Float)
    u1: Mapped[float] = mapped_column(Float)
    i1: Mapped[float] = mapped_column(Float)
    pt: Mapped[float] = mapped_column(Float)
    qt: Mapped[float] = mapped_column(Float)
    st: Mapped[float] = mapped_column(Float)
    pft: Mapped[int] = mapped_column(Integer)
    int_temp: Mapped[float] = mapped_column(Float)
    u1_thd: Mapped[float | None] = mapped_column(Float, nullable=True)
    i1_thd: Mapped[float | None] = mapped_column(Float, nullable=True)

    # C1 - import active energy
    c1_exp: Mapped[int | None] = mapped_column(Integer, nullable=True)
    c1_mantissa: Mapped[int | None] = mapped_column(Integer, nullable=True)
    c1_val: Mapped[float | None] = mapped_column(Float, nullable=True)
    c1_x10: Mapped[float | None] = mapped_column(Float, nullable=True)
    c1_float: Mapped[float | None] = mapped_column(Float, nullable=True)

    # C4 - export reactive energy
    c4_exp: Mapped[int | None] = mapped_column(Integer, nullable=True)
    c4_mantissa: Mapped[int | None] = mapped_column(Integer, nullable=True)
    c4_val: Mapped[float | None] = mapped_column(Float, nullable=True)
    c4_x10: Mapped[float | None] = mapped_column(Float, nullable=True)
    c4_float: Mapped[float | None] = mapped_column(Float, nullable=True)

    # X3 - total absolute apparent energy
    x3_exp: Mapped[int | None] = mapped_column(Integer, nullable=True)
    x3_mantissa: Mapped[int | None] = mapped_column(Integer, nullable=True)
    x3_val: Mapped[float | None] = mapped_column(Float, nullable=True)
    x3_x10: Mapped[float | None] = mapped_column(Float, nullable=True)
    x3_float: Mapped[float | None] = mapped_column(Float, nullable=True)

    __table_args__ = (Index("idx_energy_device_ts", "device_id", "db_timestamp"),)

    def __repr__(self) -> str:
        return (
            f"<Energy(id={self.id}, device_id={self.device_id}, "
            f"device_timestamp={self.device_timestamp}, db_timestamp={self.db_timestamp})>"
        )

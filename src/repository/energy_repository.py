"""Repository for energy measurement persistence."""

import logging
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from core.model.measurement import Measurement
from db.engine import create_session_factory, init_database
from exception import StorageError
from repository.model.energy_model import Energy

logger = logging.getLogger(__name__)


class EnergyRepository:
    """Writes one Measurement as one row of the ``energy`` table."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory: async_sessionmaker = create_session_factory(engine)

    async def init_db(self) -> None:
        """Initialize database schema."""
        await init_database(self.engine)

    # --------------------------------------------------------------
    # INSERT
    # --------------------------------------------------------------
    async def insert_measurement(self, measurement: Measurement) -> int:
        """Insert a measurement and return the new row id."""
        row: dict[str, Any] = measurement.to_row()

        unknown = sorted(set(row) - set(Energy.__table__.columns.keys()))
        if unknown:
            raise StorageError(f"No energy column for: {', '.join(unknown)}")

        record = Energy(**row)
        try:
            async with self._session_factory() as session:
                session.add(record)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"[Energy] Insert failed for device={measurement.device_id}: {e}")
            raise StorageError(f"Cannot write measurement into database: {e}") from e

        logger.debug(
            f"[Energy] Inserted id={record.id} device={measurement.device_id} "
            f"device_ts={measurement.device_timestamp}"
        )
        return record.id

    # --------------------------------------------------------------
    # QUERIES
    # --------------------------------------------------------------
    async def get_latest_by_device(self, device_id: int, limit: int = 100) -> list[dict[str, Any]]:
        """Fetch the latest rows for a device, newest first."""
        async with self._session_factory() as session:
            stmt = select(Energy).where(Energy.device_id == device_id).order_by(desc(Energy.id)).limit(limit)
            result = await session.execute(stmt)
            rows = result.scalars().all()

        return [self._energy_to_dict(r) for r in rows]

    @staticmethod
    def _energy_to_dict(record: Energy) -> dict[str, Any]:
        return {column: getattr(record, column) for column in Energy.__table__.columns.keys()}

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from core.device.meter_reader import MeterReader
from core.device.modbus.register_reader import RegisterReader
from core.model.measurement import Measurement
from core.schema.settings_schema import Settings
from core.util.config_manager import ConfigManager
from core.util.logger_config import quiet_library_logs, setup_logging
from db.engine import create_energy_engine
from exception import EnergyLogError
from repository.energy_repository import EnergyRepository

logger = logging.getLogger("CoreMain")

DEFAULT_SETTINGS_PATH = "config/settings.yml"


async def poll_once(settings: Settings) -> Measurement:
    """Read one measurement from the meter described by ``settings``."""
    reader = RegisterReader.from_address(
        settings.modbus_server,
        slave_id=settings.modbus_device_id,
        timeout=settings.modbus_timeout_sec,
        register_type=settings.register_type,
    )
    async with reader:
        meter = MeterReader(reader, device_id=settings.modbus_device_id)
        return await meter.get_measurement()


async def store(settings: Settings, measurement: Measurement) -> int:
    engine = create_energy_engine(settings.psql)
    try:
        repository = EnergyRepository(engine)
        await repository.init_db()
        return await repository.insert_measurement(measurement)
    finally:
        await engine.dispose()


async def main(config_path: str) -> None:
    load_dotenv()
    settings: Settings = ConfigManager.load_settings(config_path)

    setup_logging(settings.log_level, log_to_file=settings.log_to_file, log_dir=settings.log_dir)
    quiet_library_logs()

    logger.info(f"Polling device {settings.modbus_device_id} at {settings.modbus_server}")
    measurement: Measurement = await poll_once(settings)

    row_id: int = await store(settings, measurement)
    logger.info(f"Measurement stored (row id={row_id})")


def cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Read one measurement from a 7M.24 energy meter and store it")
    parser.add_argument("--config", default=DEFAULT_SETTINGS_PATH, help="Path to settings YAML")
    args = parser.parse_args(argv)

    try:
        asyncio.run(main(args.config))
    except EnergyLogError as e:
        if not logging.getLogger().handlers:
            setup_logging()
        logger.exception(f"Poll failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(cli())

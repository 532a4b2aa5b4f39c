from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.device.modbus.register_reader import parse_server_address
from core.util.logger_config import LOG_LEVEL_MAP
from db.engine import DEFAULT_DATABASE_URL


class Settings(BaseModel):
    """Settings file of the poller"""

    model_config = ConfigDict(extra="allow")

    log_level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR")
    log_to_file: bool = Field(default=False, description="Also write a daily rotated log file")
    log_dir: str = Field(default="logs", description="Log directory")

    modbus_server: str = Field(description="Modbus TCP server, host[:port]")
    modbus_device_id: int = Field(ge=1, le=247, description="Modbus slave address of the meter")
    modbus_timeout_sec: float = Field(default=3.0, gt=0, le=60, description="Request timeout seconds")
    register_type: Literal["input", "holding"] = Field(default="input")

    psql: str = Field(default=DEFAULT_DATABASE_URL, description="Database URL for the energy table")

    @field_validator("log_level", mode="before")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        level = str(v).upper()
        if level not in LOG_LEVEL_MAP:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("modbus_server")
    @classmethod
    def check_modbus_server(cls, v: str) -> str:
        parse_server_address(v)
        return v.strip()

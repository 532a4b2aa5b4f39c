"""Energy Meter Logger Exception Definitions"""


class EnergyLogError(Exception):
    """Base exception for the energylog system"""

    pass


class DecodeError(EnergyLogError):
    """Base class for register decoding exceptions"""

    pass


class InvalidInputLength(DecodeError):
    """Register block length does not match what the data type requires"""

    def __init__(self, expected: int, actual: int, data_type: str | None = None):
        label = data_type or "register block"
        super().__init__(f"{label} expects {expected} word(s), got {actual}")
        self.expected = expected
        self.actual = actual
        self.data_type = data_type


class UnknownDataTypeError(DecodeError):
    """Data type name is not part of the 7M.24 catalog"""

    pass


class DeviceError(EnergyLogError):
    """Base class for device-related exceptions"""

    def __init__(self, message: str, device_id: int | None = None):
        super().__init__(message)
        self.device_id = device_id


class DeviceConnectionError(DeviceError):
    """Device connection failure (including Modbus transport errors)"""

    pass


class DeviceResponseError(DeviceError):
    """Device answered with a Modbus exception or a malformed payload"""

    pass


class ConfigError(EnergyLogError):
    """Settings file missing or invalid"""

    pass


class StorageError(EnergyLogError):
    """Measurement could not be written to the database"""

    pass

import math
from dataclasses import dataclass
from typing import Sequence, Union

from pymodbus.client.mixin import ModbusClientMixin

from core.model.enum.data_type_enum import DataType
from exception import InvalidInputLength, UnknownDataTypeError

PF_SIGN_NEGATIVE = 0xFF


def to_float32(value: float) -> float:
    """Round a Python float to the nearest IEEE-754 single precision value."""
    try:
        regs = ModbusClientMixin.convert_to_registers(
            float(value), data_type=ModbusClientMixin.DATATYPE.FLOAT32, word_order="big"
        )
    except OverflowError:
        return math.copysign(math.inf, value)
    return ModbusClientMixin.convert_from_registers(
        regs, data_type=ModbusClientMixin.DATATYPE.FLOAT32, word_order="big"
    )


def powi_float32(base: float, exponent: int) -> float:
    """
    Integer power evaluated in single precision.

    Squares and multiplies with a float32 rounding after every step, then takes
    the reciprocal for negative exponents.
    """
    a = to_float32(base)
    n = abs(exponent)
    result = 1.0
    while True:
        if n & 1:
            result = to_float32(result * a)
        n >>= 1
        if n == 0:
            break
        a = to_float32(a * a)
    if exponent < 0:
        return to_float32(1.0 / result) if result else math.inf
    return result


def powf_float32(base: float, exponent: float) -> float:
    """Floating point power of float32 operands, rounded to float32."""
    try:
        return to_float32(math.pow(to_float32(base), to_float32(exponent)))
    except OverflowError:
        return math.inf


def _check_length(raw: Sequence[int], data_type: DataType) -> None:
    if len(raw) != data_type.word_count:
        raise InvalidInputLength(data_type.word_count, len(raw), data_type.name)


def get_t1(raw: Sequence[int]) -> int:
    """
    Unsigned value (16 bit).

    Example: 12345 stored as 3039(16)
    """
    _check_length(raw, DataType.T1)
    return ModbusClientMixin.convert_from_registers(
        list(raw), data_type=ModbusClientMixin.DATATYPE.UINT16, word_order="big"
    )


def get_t2(raw: Sequence[int]) -> int:
    """
    Signed value (16 bit).

    Example: -12345 stored as CFC7(16)
    """
    _check_length(raw, DataType.T2)
    return ModbusClientMixin.convert_from_registers(
        list(raw), data_type=ModbusClientMixin.DATATYPE.INT16, word_order="big"
    )


def get_t3(raw: Sequence[int]) -> int:
    """
    Signed long value (32 bit), high word first.

    Example: 123456789 stored as 075B CD15(16)
    """
    _check_length(raw, DataType.T3)
    return ModbusClientMixin.convert_from_registers(
        list(raw), data_type=ModbusClientMixin.DATATYPE.INT32, word_order="big"
    )


def _decade_exponent(word0: int) -> int:
    exp = (word0 >> 8) & 0xFF
    return exp - 0x100 if exp & 0x80 else exp


def get_t5(raw: Sequence[int]) -> float:
    """
    Unsigned measurement (32 bit).

    bits # 31..24 = decade exponent (signed 8 bit)
    bits # 23..00 = binary unsigned value (24 bit)

    Example: 123456*10^-3 stored as FD01 E240(16)
    """
    _check_length(raw, DataType.T5)
    exp = _decade_exponent(raw[0])
    value = ((raw[0] & 0xFF) << 16) | (raw[1] & 0xFFFF)
    return to_float32(to_float32(value) * powi_float32(10.0, exp))


def get_t6(raw: Sequence[int]) -> float:
    """
    Signed measurement (32 bit).

    bits # 31..24 = decade exponent (signed 8 bit)
    bits # 23..00 = binary signed value (24 bit)

    Example: -123456*10^-3 stored as FDFE 1DC0(16)
    """
    _check_length(raw, DataType.T6)
    exp = _decade_exponent(raw[0])
    value = ((raw[0] & 0xFF) << 16) | (raw[1] & 0xFFFF)
    if value & 0x800000:
        value -= 0x1000000
    return to_float32(to_float32(value) * powi_float32(10.0, exp))


@dataclass(frozen=True)
class PowerFactor:
    """T7 fields. ``magnitude`` keeps its 4 implied decimal places."""

    import_export: int
    inductive_capacitive: int
    magnitude: int

    @property
    def direction(self) -> int:
        return -1 if self.import_export == PF_SIGN_NEGATIVE else 1

    @property
    def character(self) -> str:
        return "capacitive" if self.inductive_capacitive == PF_SIGN_NEGATIVE else "inductive"

    @property
    def value(self) -> int:
        return self.direction * self.magnitude


def decode_power_factor(raw: Sequence[int]) -> PowerFactor:
    """
    Power factor (32 bit) with both sign flags kept.

    bits # 31..24 = sign: import/export (00/FF)
    bits # 23..16 = sign: inductive/capacitive (00/FF)
    bits # 15..00 = unsigned value (16 bit), 4 decimal places
    """
    _check_length(raw, DataType.T7)
    return PowerFactor(
        import_export=(raw[0] >> 8) & 0xFF,
        inductive_capacitive=raw[0] & 0xFF,
        magnitude=raw[1] & 0xFFFF,
    )


def get_t7(raw: Sequence[int]) -> int:
    """Power factor as a signed integer. The inductive/capacitive flag does not change the value."""
    return decode_power_factor(raw).value


def get_t16(raw: Sequence[int]) -> float:
    """
    Unsigned value (16 bit), 2 decimal places.

    Example: 123.45 stored as 3039(16)
    """
    _check_length(raw, DataType.T16)
    return to_float32(float(raw[0] & 0xFFFF) / 100.0)


def get_t17(raw: Sequence[int]) -> float:
    """
    Signed value (16 bit), 2 decimal places.

    Example: -123.45 stored as CFC7(16)
    """
    _check_length(raw, DataType.T17)
    value = raw[0] & 0xFFFF
    if value & 0x8000:
        value -= 0x10000
    return to_float32(float(value) / 100.0)


def get_float(raw: Sequence[int]) -> float:
    """
    IEEE 754 floating-point single precision value (32 bit).

    bits # 31     = sign bit (1 bit)
    bits # 30..23 = exponent field (8 bit)
    bits # 22..0  = significand (23 bit)

    Example: 123.45 stored as 42F6 E666(16)
    """
    _check_length(raw, DataType.FLOAT)
    sign_bit = (raw[0] >> 15) & 0x1
    exponent = ((raw[0] << 1) & 0xFFFF) >> 8
    significand = ((raw[0] & 0x7F) << 16) | (raw[1] & 0xFFFF)

    bits = (sign_bit << 31) | (exponent << 23) | significand
    return ModbusClientMixin.convert_from_registers(
        [bits >> 16, bits & 0xFFFF], data_type=ModbusClientMixin.DATATYPE.FLOAT32, word_order="big"
    )


_DECODERS = {
    DataType.T1: get_t1,
    DataType.T2: get_t2,
    DataType.T3: get_t3,
    DataType.T5: get_t5,
    DataType.T6: get_t6,
    DataType.T7: get_t7,
    DataType.T16: get_t16,
    DataType.T17: get_t17,
    DataType.FLOAT: get_float,
}


def decode_registers(raw: Sequence[int], fmt: Union[DataType, str]) -> float | int:
    """
    Decode a block of 16-bit registers according to a 7M.24 data type.

    Supported formats:
        - t1 / t2        → unsigned / signed 16-bit integer
        - t3             → signed 32-bit integer, high word first
        - t5 / t6        → unsigned / signed 24-bit value with decade exponent
        - t7             → power factor, signed integer with 4 implied decimals
        - t16 / t17      → unsigned / signed 16-bit value with 2 implied decimals
        - float          → IEEE 754 single precision

    Raises:
        UnknownDataTypeError: fmt is not a known data type
        InvalidInputLength: raw does not hold exactly the words the type needs
    """
    if isinstance(fmt, str):
        fmt_enum = DataType.from_string(fmt)
        if fmt_enum is None:
            raise UnknownDataTypeError(f"Unknown data type: {fmt!r}")
        fmt: DataType = fmt_enum

    return _DECODERS[fmt](raw)

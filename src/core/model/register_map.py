"""Register address map of the 7M.24 meter family (input registers)."""

from dataclasses import dataclass

from core.model.enum.data_type_enum import DataType


@dataclass(frozen=True)
class RegisterField:
    key: str
    label: str
    address: int
    data_type: DataType

    @property
    def count(self) -> int:
        return self.data_type.word_count


@dataclass(frozen=True)
class CounterRegisters:
    """Addresses of the four redundant representations of one counter."""

    name: str
    label: str
    exp_address: int
    mantissa_address: int
    x10_address: int
    float_address: int


RUNTIME = RegisterField("device_timestamp", "Run time", 103, DataType.T3)

MEASUREMENT_FIELDS: tuple[RegisterField, ...] = (
    RegisterField("frequency", "Frequency", 105, DataType.T5),
    RegisterField("u1", "U1", 107, DataType.T5),
    RegisterField("i1", "I1", 126, DataType.T5),
    RegisterField("pt", "Active power total", 140, DataType.T6),
    RegisterField("qt", "Reactive power total", 148, DataType.T6),
    RegisterField("st", "Apparent power total", 156, DataType.T5),
    RegisterField("pft", "Power factor total", 164, DataType.T7),
    RegisterField("temp", "Internal temperature", 181, DataType.T17),
    RegisterField("u1_thd", "U1 THD%", 182, DataType.T17),
    RegisterField("i1_thd", "I1 THD%", 188, DataType.T17),
)

COUNTERS: tuple[CounterRegisters, ...] = (
    # MID certified
    CounterRegisters("c1", "Import active energy", 401, 406, 462, 2638),
    # MID certified
    CounterRegisters("c4", "Export reactive energy", 404, 412, 468, 2644),
    # not certified
    CounterRegisters("x3", "Total absolute apparent energy", 448, 418, 474, 2764),
)

COUNTER_EXP_TYPE = DataType.T2
COUNTER_MANTISSA_TYPE = DataType.T3
COUNTER_X10_TYPE = DataType.T3
COUNTER_FLOAT_TYPE = DataType.FLOAT

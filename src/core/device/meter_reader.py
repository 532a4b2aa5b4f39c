import logging
from typing import Protocol, Sequence

from core.model.enum.data_type_enum import DataType
from core.model.measurement import Counter, Measurement, build_measurement
from core.model.register_map import (
    COUNTER_EXP_TYPE,
    COUNTER_FLOAT_TYPE,
    COUNTER_MANTISSA_TYPE,
    COUNTER_X10_TYPE,
    COUNTERS,
    MEASUREMENT_FIELDS,
    RUNTIME,
    CounterRegisters,
    RegisterField,
)
from core.util.counter_assembler import assemble_counter
from core.util.data_decoder import decode_registers

logger = logging.getLogger("MeterReader")


class RegisterSource(Protocol):
    async def read_regs(self, address: int, count: int) -> list[int]: ...


async def read_block(source: RegisterSource, address: int, data_type: DataType, label: str) -> list[int]:
    raw: list[int] = await source.read_regs(address, data_type.word_count)
    logger.debug(f"{label} raw registers at {address}: {raw}")
    return raw


async def read_and_decode(source: RegisterSource, field: RegisterField) -> int | float:
    """Fetch one field, decode it and log raw => decoded."""
    raw: list[int] = await source.read_regs(field.address, field.count)
    value = decode_registers(raw, field.data_type)
    logger.debug(f"{field.label} is {raw} => {value}")
    return value


class MeterReader:
    """Walks the register map of one meter, in order, and builds a Measurement."""

    def __init__(
        self,
        source: RegisterSource,
        device_id: int,
        fields: Sequence[RegisterField] = MEASUREMENT_FIELDS,
        counters: Sequence[CounterRegisters] = COUNTERS,
    ):
        self.source = source
        self.device_id = int(device_id)
        self.fields = tuple(fields)
        self.counters = tuple(counters)

    async def read_counter(self, registers: CounterRegisters) -> Counter:
        label = f"Energy counter {registers.name}"
        raw_exp = await read_block(self.source, registers.exp_address, COUNTER_EXP_TYPE, f"{label} exponent")
        raw_mantissa = await read_block(
            self.source, registers.mantissa_address, COUNTER_MANTISSA_TYPE, f"{label} mantissa"
        )
        raw_x10 = await read_block(self.source, registers.x10_address, COUNTER_X10_TYPE, f"{label} fine value")
        raw_float = await read_block(self.source, registers.float_address, COUNTER_FLOAT_TYPE, f"{label} float value")

        counter: Counter = assemble_counter(raw_exp, raw_mantissa, raw_x10, raw_float)
        logger.debug(
            f"{label} ({registers.label}): exp={counter.exp} mantissa={counter.mantissa} "
            f"val={counter.val} x10={counter.x10} float={counter.float}"
        )
        return counter

    async def get_measurement(self) -> Measurement:
        runtime = await read_and_decode(self.source, RUNTIME)

        values: dict[str, int | float] = {}
        for field in self.fields:
            values[field.key] = await read_and_decode(self.source, field)

        counters: dict[str, Counter] = {}
        for registers in self.counters:
            counters[registers.name] = await self.read_counter(registers)

        measurement: Measurement = build_measurement(
            device_id=self.device_id,
            device_timestamp=runtime,
            counters=counters,
            **values,
        )
        logger.info(f"Measurement read from device {self.device_id} (runtime={runtime})")
        return measurement

"""Decoded meter readings handed to the storage layer."""

from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, field_validator

MAX_COUNTERS = 3


class Counter(BaseModel):
    """
    One accumulating quantity, read redundantly from four register addresses.

    ``val`` is derived from ``mantissa`` and ``exp``; ``x10`` and ``float`` are
    independent reads of the same counter.
    """

    model_config = ConfigDict(frozen=True)

    exp: int
    mantissa: int
    val: float
    x10: float
    float: float


class Measurement(BaseModel):
    """One poll of the meter. Field order follows the ``energy`` table."""

    model_config = ConfigDict(frozen=True)

    device_id: int
    device_timestamp: int
    frequency: float
    u1: float
    i1: float
    pt: float
    qt: float
    st: float
    pft: int
    temp: float
    u1_thd: float | None = None
    i1_thd: float | None = None
    counters: Mapping[str, Counter]

    @field_validator("counters")
    @classmethod
    def freeze_counters(cls, v: Mapping[str, Counter]) -> Mapping[str, Counter]:
        if not 1 <= len(v) <= MAX_COUNTERS:
            raise ValueError(f"expected 1 to {MAX_COUNTERS} counters, got {len(v)}")
        # read-only view over a private copy, insertion order kept
        return MappingProxyType(dict(v))

    def to_row(self) -> dict[str, Any]:
        """Flatten into the ordered column mapping of one ``energy`` row."""
        row: dict[str, Any] = {
            "device_id": self.device_id,
            "device_timestamp": self.device_timestamp,
            "frequency": self.frequency,
            "u1": self.u1,
            "i1": self.i1,
            "pt": self.pt,
            "qt": self.qt,
            "st": self.st,
            "pft": self.pft,
            "int_temp": self.temp,
            "u1_thd": self.u1_thd,
            "i1_thd": self.i1_thd,
        }
        for name, counter in self.counters.items():
            row[f"{name}_exp"] = counter.exp
            row[f"{name}_mantissa"] = counter.mantissa
            row[f"{name}_val"] = counter.val
            row[f"{name}_x10"] = counter.x10
            row[f"{name}_float"] = counter.float
        return row


def build_measurement(
    device_id: int,
    device_timestamp: int,
    frequency: float,
    u1: float,
    i1: float,
    pt: float,
    qt: float,
    st: float,
    pft: int,
    temp: float,
    counters: Mapping[str, Counter],
    u1_thd: float | None = None,
    i1_thd: float | None = None,
) -> Measurement:
    return Measurement(
        device_id=device_id,
        device_timestamp=device_timestamp,
        frequency=frequency,
        u1=u1,
        i1=i1,
        pt=pt,
        qt=qt,
        st=st,
        pft=pft,
        temp=temp,
        u1_thd=u1_thd,
        i1_thd=i1_thd,
        counters=dict(counters),
    )

import pytest


class FakeRegisterSource:
    """In-memory register source keyed by start address."""

    def __init__(self, registers: dict[int, list[int]]):
        self.registers = registers
        self.calls: list[tuple[int, int]] = []

    async def read_regs(self, address: int, count: int) -> list[int]:
        self.calls.append((address, count))
        return list(self.registers[address][:count])


@pytest.fixture
def meter_registers() -> dict[int, list[int]]:
    """Register contents of one poll, keyed by start address."""
    return {
        103: [0x075B, 0xCD15],  # runtime 123456789
        105: [0xFE00, 0x1388],  # 5000e-2 Hz
        107: [0xFF00, 0x08FD],  # 2301e-1 V
        126: [0xFD00, 0x1403],  # 5123e-3 A
        140: [0xFFFF, 0xD1F3],  # -11789e-1 W
        148: [0xFF00, 0x007B],  # 123e-1 var
        156: [0x0000, 0x049C],  # 1180 VA
        164: [0xFF00, 0x2710],  # export, 1.0000
        181: [0x0DDE],  # 35.50 C
        182: [0x007D],  # 1.25 %
        188: [0x04D2],  # 12.34 %
        # C1
        401: [0xFFFD],
        406: [0x0001, 0xE240],
        462: [0x0000, 0x04D2],
        2638: [0x42F6, 0xE666],
        # C4
        404: [0x0000],
        412: [0x0000, 0x0064],
        468: [0x0000, 0x03E8],
        2644: [0x42C8, 0x0000],
        # X3
        448: [0xFFFF],
        418: [0x0000, 0x3039],
        474: [0x0000, 0x3039],
        2764: [0x449A, 0x5000],
    }


@pytest.fixture
def fake_source(meter_registers) -> FakeRegisterSource:
    return FakeRegisterSource(meter_registers)

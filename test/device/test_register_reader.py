from unittest.mock import AsyncMock, Mock

import pytest
from pymodbus.exceptions import ConnectionException

from core.device.modbus.register_reader import RegisterReader, parse_server_address
from core.model.enum.register_type_enum import RegisterType
from exception import DeviceConnectionError, DeviceResponseError


def _ok_response(registers: list[int]) -> Mock:
    resp = Mock()
    resp.isError = Mock(return_value=False)
    resp.registers = registers
    return resp


class TestRegisterReader:
    @pytest.mark.asyncio
    async def test_reads_input_registers(self):
        mock_client = Mock()
        mock_client.connected = True
        mock_client.read_input_registers = AsyncMock(return_value=_ok_response([0x075B, 0xCD15]))

        reader = RegisterReader(mock_client, slave_id=7)
        result = await reader.read_regs(103, 2)

        assert result == [0x075B, 0xCD15]
        mock_client.read_input_registers.assert_awaited_once_with(address=103, count=2, slave=7)

    @pytest.mark.asyncio
    async def test_reads_holding_registers_when_configured(self):
        mock_client = Mock()
        mock_client.connected = True
        mock_client.read_holding_registers = AsyncMock(return_value=_ok_response([0xCFC7]))

        reader = RegisterReader(mock_client, slave_id=1, register_type="holding")
        assert await reader.read_regs(181, 1) == [0xCFC7]

    @pytest.mark.asyncio
    async def test_when_connection_failure_then_raises(self):
        mock_client = Mock()
        mock_client.connected = False
        mock_client.connect = AsyncMock(return_value=False)

        reader = RegisterReader(mock_client, slave_id=1)
        with pytest.raises(DeviceConnectionError) as exc_info:
            await reader.read_regs(103, 2)
        assert exc_info.value.device_id == 1

    @pytest.mark.asyncio
    async def test_when_transport_exception_then_raises_connection_error(self):
        mock_client = Mock()
        mock_client.connected = True
        mock_client.read_input_registers = AsyncMock(side_effect=ConnectionException("link down"))

        reader = RegisterReader(mock_client, slave_id=1)
        with pytest.raises(DeviceConnectionError):
            await reader.read_regs(103, 2)

    @pytest.mark.asyncio
    async def test_when_modbus_error_response_then_raises(self):
        mock_client = Mock()
        mock_client.connected = True
        mock_response = Mock()
        mock_response.isError = Mock(return_value=True)
        mock_client.read_input_registers = AsyncMock(return_value=mock_response)

        reader = RegisterReader(mock_client, slave_id=1)
        with pytest.raises(DeviceResponseError):
            await reader.read_regs(103, 2)

    @pytest.mark.asyncio
    async def test_when_register_count_is_short_then_raises(self):
        mock_client = Mock()
        mock_client.connected = True
        mock_client.read_input_registers = AsyncMock(return_value=_ok_response([0x075B]))

        reader = RegisterReader(mock_client, slave_id=1)
        with pytest.raises(DeviceResponseError):
            await reader.read_regs(103, 2)

    @pytest.mark.asyncio
    async def test_context_manager_connects_and_closes(self):
        mock_client = Mock()
        mock_client.connected = False
        mock_client.connect = AsyncMock(return_value=True)
        mock_client.close = Mock()

        async with RegisterReader(mock_client, slave_id=1):
            mock_client.connect.assert_awaited_once()

        mock_client.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_context_manager_closes_client_when_connect_fails(self):
        mock_client = Mock()
        mock_client.connected = False
        mock_client.connect = AsyncMock(return_value=False)
        mock_client.close = Mock()

        with pytest.raises(DeviceConnectionError):
            async with RegisterReader(mock_client, slave_id=1):
                pass

        mock_client.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_register_type_accepts_enum_and_plain_string(self):
        mock_client = Mock()
        mock_client.connected = True
        mock_client.read_holding_registers = AsyncMock(return_value=_ok_response([0x0001]))
        mock_client.read_input_registers = AsyncMock(return_value=_ok_response([0x0002]))

        assert await RegisterReader(mock_client, 1, register_type=RegisterType.HOLDING).read_regs(10, 1) == [1]
        assert await RegisterReader(mock_client, 1, register_type="input").read_regs(10, 1) == [2]

    @pytest.mark.asyncio
    async def test_when_unsupported_register_type_then_raises(self):
        mock_client = Mock()
        mock_client.connected = True

        reader = RegisterReader(mock_client, slave_id=1, register_type="coil")
        with pytest.raises(DeviceResponseError):
            await reader.read_regs(0, 1)


@pytest.mark.parametrize(
    "server,expected",
    [
        ("192.168.1.10:502", ("192.168.1.10", 502)),
        ("meter.local:1502", ("meter.local", 1502)),
        ("meter.local", ("meter.local", 502)),
    ],
)
def test_parse_server_address(server, expected):
    assert parse_server_address(server) == expected


@pytest.mark.parametrize("server", ["", ":502", "meter:abc", "meter:0", "meter:70000"])
def test_parse_server_address_rejects_invalid(server):
    with pytest.raises(ValueError):
        parse_server_address(server)

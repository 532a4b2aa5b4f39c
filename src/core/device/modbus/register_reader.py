import logging

from pymodbus.client import AsyncModbusTcpClient
from pymodbus.exceptions import ModbusException
from pymodbus.pdu.pdu import ModbusPDU

from core.model.enum.register_type_enum import RegisterType
from exception import DeviceConnectionError, DeviceResponseError

logger = logging.getLogger("RegisterReader")

DEFAULT_MODBUS_PORT = 502


class RegisterReader:
    def __init__(
        self,
        client: AsyncModbusTcpClient,
        slave_id: int,
        register_type: str = RegisterType.INPUT,
    ):
        """
        Initialize RegisterReader.

        Args:
            client: pymodbus AsyncModbusTcpClient
            slave_id: Modbus slave address
            register_type: "input" or "holding"
        """
        self.client = client
        self.slave_id = int(slave_id)
        self.register_type = register_type

    @classmethod
    def from_address(
        cls,
        server: str,
        slave_id: int,
        timeout: float = 3.0,
        register_type: str = RegisterType.INPUT,
    ) -> "RegisterReader":
        """Create a reader for a ``host:port`` server string."""
        host, port = parse_server_address(server)
        client = AsyncModbusTcpClient(host, port=port, timeout=timeout, retries=0)
        return cls(client, slave_id=slave_id, register_type=register_type)

    async def read_regs(self, address: int, count: int) -> list[int]:
        """
        Read ``count`` registers starting at ``address``.

        Raises:
            DeviceConnectionError: not connected or transport failure
            DeviceResponseError: exception response or wrong number of registers
        """
        await self.ensure_connected()

        try:
            if self.register_type == RegisterType.INPUT:
                resp: ModbusPDU = await self.client.read_input_registers(
                    address=address, count=count, slave=self.slave_id
                )
            elif self.register_type == RegisterType.HOLDING:
                resp: ModbusPDU = await self.client.read_holding_registers(
                    address=address, count=count, slave=self.slave_id
                )
            else:
                raise DeviceResponseError(
                    f"Unsupported register type for read_regs: {self.register_type}", device_id=self.slave_id
                )
        except ModbusException as e:
            logger.error(f"[Bus] Exception reading registers at {address} (slave={self.slave_id}): {e}")
            raise DeviceConnectionError(str(e), device_id=self.slave_id) from e

        if resp.isError():
            logger.warning(f"[Bus] Modbus error response: {resp}")
            raise DeviceResponseError(f"Error response at address {address}: {resp}", device_id=self.slave_id)

        regs = getattr(resp, "registers", None)
        if not isinstance(regs, list) or len(regs) != count:
            raise DeviceResponseError(
                f"Expected {count} registers at address {address}, got {regs!r}", device_id=self.slave_id
            )
        return regs

    async def ensure_connected(self) -> None:
        if self.client.connected:
            return

        is_ok: bool = await self.client.connect()
        if not is_ok:
            logger.error(f"[Bus] connect failed (slave={self.slave_id})")
            raise DeviceConnectionError("Cannot connect to Modbus server", device_id=self.slave_id)

    def close(self) -> None:
        self.client.close()

    async def __aenter__(self) -> "RegisterReader":
        try:
            await self.ensure_connected()
        except DeviceConnectionError:
            self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()
        return False


def parse_server_address(server: str) -> tuple[str, int]:
    """Split ``host[:port]``; the port defaults to 502."""
    host, sep, port = server.strip().rpartition(":")
    if not sep:
        host, port = port, str(DEFAULT_MODBUS_PORT)
    if not host or not port.isdigit() or not 0 < int(port) <= 65535:
        raise ValueError(f"Invalid Modbus server address: {server!r}")
    return host, int(port)

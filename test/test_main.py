import pytest

import core.main as core_main
from db.engine import create_energy_engine
from repository.energy_repository import EnergyRepository


class _FakeReader:
    def __init__(self, source):
        self.source = source

    async def read_regs(self, address: int, count: int) -> list[int]:
        return await self.source.read_regs(address, count)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def settings_file(tmp_path):
    db_url = f"sqlite:///{tmp_path / 'energy.db'}"
    path = tmp_path / "settings.yml"
    path.write_text(
        f"""
log_level: INFO
modbus_server: "127.0.0.1:5020"
modbus_device_id: 5
psql: "{db_url}"
""",
        encoding="utf-8",
    )
    return str(path), db_url


@pytest.mark.asyncio
async def test_main_polls_and_stores_one_row(settings_file, fake_source, monkeypatch):
    path, db_url = settings_file
    seen = {}

    def _from_address(server, slave_id, timeout, register_type):
        seen.update(server=server, slave_id=slave_id, register_type=register_type)
        return _FakeReader(fake_source)

    monkeypatch.setattr(core_main.RegisterReader, "from_address", staticmethod(_from_address))

    await core_main.main(path)

    assert seen == {"server": "127.0.0.1:5020", "slave_id": 5, "register_type": "input"}

    engine = create_energy_engine(db_url)
    try:
        rows = await EnergyRepository(engine).get_latest_by_device(5)
    finally:
        await engine.dispose()

    assert len(rows) == 1
    assert rows[0]["device_timestamp"] == 123456789
    assert rows[0]["x3_val"] == 1234.5


def test_cli_returns_error_code_on_missing_settings(tmp_path):
    assert core_main.cli(["--config", str(tmp_path / "missing.yml")]) == 1

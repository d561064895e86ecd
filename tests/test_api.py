from __future__ import annotations

import io

import pytest

from bleutil.api import CharacteristicNotFoundError, Client, DeviceNotFoundError
from fakes import BATTERY_LEVEL, UART_READ, UART_WRITE, ZERO_WINDOW, FakeGateway, FakePeripheral, uart_services


def _client(*peripherals: FakePeripheral) -> Client:
    return Client(gateway=FakeGateway(*peripherals), settings=ZERO_WINDOW)


def test_public_client_scan_and_ping() -> None:
    client = _client(FakePeripheral("AA:BB:CC:DD:EE:01", "Sensor", uart_services()))

    devices = client.scan()
    assert [d.address for d in devices] == ["AA:BB:CC:DD:EE:01"]

    services = client.ping("AA:BB:CC:DD:EE:01")
    uuids = [c.uuid for s in services for c in s.characteristics]
    assert uuids == [BATTERY_LEVEL, UART_WRITE, UART_READ]


def test_public_client_read_write() -> None:
    peripheral = FakePeripheral("AA:BB:CC:DD:EE:01", None, uart_services(), read_values={BATTERY_LEVEL: b"\x50"})
    client = _client(peripheral)

    assert client.read("AA:BB:CC:DD:EE:01", BATTERY_LEVEL) == b"\x50"
    receipt = client.write("AA:BB:CC:DD:EE:01", UART_WRITE, b"\x01\x02")
    assert receipt.length == 2
    assert receipt.with_response is False


def test_public_client_write_interactive() -> None:
    peripheral = FakePeripheral("AA:BB:CC:DD:EE:01", None, uart_services())
    client = _client(peripheral)

    summary = client.write_interactive("AA:BB:CC:DD:EE:01", io.StringIO("x\ny\nz\n"))
    assert summary.lines == 3
    assert [c[0] for c in peripheral.transport_calls] == ["write", "read"] * 3


def test_public_client_errors() -> None:
    client = _client(FakePeripheral("AA:BB:CC:DD:EE:01", None, uart_services()))

    with pytest.raises(DeviceNotFoundError):
        client.read("AA:BB:CC:DD:EE:02", BATTERY_LEVEL)
    with pytest.raises(CharacteristicNotFoundError):
        client.read("AA:BB:CC:DD:EE:01", "2a19")


def test_settings_exposed() -> None:
    client = _client()
    assert client.settings is ZERO_WINDOW
    assert client.load_warnings == ()

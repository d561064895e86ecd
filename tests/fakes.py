from __future__ import annotations

from bleutil.core.errors import DiscoveryError
from bleutil.core.model import CharacteristicInfo, PeripheralDescriptor, ServiceInfo, Settings

ZERO_WINDOW = Settings(scan_window_s=0.0, write_scan_window_s=0.0)

UART_WRITE = "6e400002-b5a3-f393-e0a9-e50e24dcca9e"
UART_READ = "6e400003-b5a3-f393-e0a9-e50e24dcca9e"
BATTERY_LEVEL = "00002a19-0000-1000-8000-00805f9b34fb"


def service(uuid: str, *chars: tuple[str, tuple[str, ...]]) -> ServiceInfo:
    return ServiceInfo(
        uuid=uuid,
        characteristics=tuple(
            CharacteristicInfo(uuid=char_uuid, properties=props, service_uuid=uuid)
            for char_uuid, props in chars
        ),
    )


def uart_services() -> list[ServiceInfo]:
    return [
        service("0000180f-0000-1000-8000-00805f9b34fb", (BATTERY_LEVEL, ("read", "notify"))),
        service(
            "6e400001-b5a3-f393-e0a9-e50e24dcca9e",
            (UART_WRITE, ("write", "write-without-response")),
            (UART_READ, ("read", "notify")),
        ),
    ]


class FakePeripheral:
    def __init__(
        self,
        address: str,
        name: str | None = None,
        services: list[ServiceInfo] | None = None,
        *,
        read_values: dict[str, bytes] | None = None,
        connect_error: Exception | None = None,
        discover_error: Exception | None = None,
        read_error: Exception | None = None,
        write_error: Exception | None = None,
        write_error_on: int = 1,
    ) -> None:
        self._descriptor = PeripheralDescriptor(address=address, name=name)
        self._services = list(services or [])
        self._discovered = False
        self.read_values = dict(read_values or {})
        self.connect_error = connect_error
        self.discover_error = discover_error
        self.read_error = read_error
        self.write_error = write_error
        self.write_error_on = write_error_on
        self.writes = 0
        self.calls: list[tuple] = []

    @property
    def descriptor(self) -> PeripheralDescriptor:
        return self._descriptor

    async def connect(self) -> None:
        self.calls.append(("connect",))
        if self.connect_error:
            raise self.connect_error

    async def discover_services(self) -> None:
        self.calls.append(("discover",))
        if self.discover_error:
            raise self.discover_error
        self._discovered = True

    def services(self) -> list[ServiceInfo]:
        if not self._discovered:
            raise DiscoveryError("not discovered")
        return list(self._services)

    async def read(self, characteristic: CharacteristicInfo) -> bytes:
        self.calls.append(("read", characteristic.uuid))
        if self.read_error:
            raise self.read_error
        return self.read_values.get(characteristic.uuid, b"")

    async def write(self, characteristic: CharacteristicInfo, data: bytes, *, with_response: bool = False) -> None:
        self.calls.append(("write", characteristic.uuid, data, with_response))
        self.writes += 1
        if self.write_error and self.writes >= self.write_error_on:
            raise self.write_error

    async def disconnect(self) -> None:
        self.calls.append(("disconnect",))

    @property
    def transport_calls(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in ("read", "write")]


class FakeAdapter:
    def __init__(self, peripherals: list[FakePeripheral], *, start_error: Exception | None = None) -> None:
        self._peripherals = peripherals
        self.start_error = start_error
        self.calls: list[str] = []

    async def start_scan(self) -> None:
        self.calls.append("start_scan")
        if self.start_error:
            raise self.start_error

    async def stop_scan(self) -> None:
        self.calls.append("stop_scan")

    def peripherals(self) -> list[FakePeripheral]:
        self.calls.append("peripherals")
        return list(self._peripherals)


class FakeGateway:
    def __init__(self, *peripherals: FakePeripheral, start_error: Exception | None = None) -> None:
        self.peripherals = list(peripherals)
        self.start_error = start_error
        self.adapters: list[FakeAdapter] = []

    def new_adapter(self) -> FakeAdapter:
        adapter = FakeAdapter(self.peripherals, start_error=self.start_error)
        self.adapters.append(adapter)
        return adapter

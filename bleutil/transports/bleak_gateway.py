"""Adapter gateway implemented over bleak."""

from __future__ import annotations

import logging

from bleak import BleakClient, BleakScanner
from bleak.backends.device import BLEDevice
from bleak.exc import BleakBluetoothNotAvailableError, BleakError

from bleutil.core.errors import (
    AdapterUnavailableError,
    ConnectError,
    DiscoveryError,
    PropertiesUnavailableError,
    ScanError,
    TransportError,
)
from bleutil.core.model import CharacteristicInfo, PeripheralDescriptor, ServiceInfo

LOGGER = logging.getLogger(__name__)


class BleakPeripheral:
    def __init__(self, device: BLEDevice, *, connect_timeout_s: float = 10.0) -> None:
        if not device.address:
            raise PropertiesUnavailableError("Discovered peripheral did not report an address")
        self._device = device
        self._descriptor = PeripheralDescriptor(address=device.address, name=device.name)
        self._connect_timeout_s = connect_timeout_s
        self._client: BleakClient | None = None
        self._services: list[ServiceInfo] | None = None

    @property
    def descriptor(self) -> PeripheralDescriptor:
        return self._descriptor

    async def connect(self) -> None:
        client = BleakClient(self._device, timeout=self._connect_timeout_s)
        try:
            await client.connect()
        except (BleakError, OSError) as exc:
            raise ConnectError(f"BLE connect failed for {self._descriptor.address}: {exc}") from exc
        self._client = client
        LOGGER.debug("Connected to %s", self._descriptor.address)

    async def discover_services(self) -> None:
        client = self._require_client()
        # bleak resolves the GATT database while connecting; the collection is
        # only readable once that has finished.
        try:
            collection = client.services
        except BleakError as exc:
            raise DiscoveryError(
                f"Service discovery failed for {self._descriptor.address}: {exc}"
            ) from exc

        services: list[ServiceInfo] = []
        for service in collection:
            characteristics = tuple(
                CharacteristicInfo(
                    uuid=char.uuid,
                    properties=tuple(char.properties),
                    service_uuid=service.uuid,
                    handle=char.handle,
                )
                for char in service.characteristics
            )
            services.append(ServiceInfo(uuid=service.uuid, characteristics=characteristics))
        self._services = services
        LOGGER.debug("Discovered %d services on %s", len(services), self._descriptor.address)

    def services(self) -> list[ServiceInfo]:
        if self._services is None:
            raise DiscoveryError(
                f"Services have not been discovered for {self._descriptor.address}"
            )
        return list(self._services)

    async def read(self, characteristic: CharacteristicInfo) -> bytes:
        client = self._require_client()
        try:
            data = await client.read_gatt_char(_specifier(characteristic))
        except (BleakError, OSError) as exc:
            raise TransportError(f"BLE read of {characteristic.uuid} failed: {exc}") from exc
        return bytes(data)

    async def write(
        self,
        characteristic: CharacteristicInfo,
        data: bytes,
        *,
        with_response: bool = False,
    ) -> None:
        client = self._require_client()
        try:
            await client.write_gatt_char(_specifier(characteristic), data, response=with_response)
        except (BleakError, OSError) as exc:
            raise TransportError(f"BLE write to {characteristic.uuid} failed: {exc}") from exc

    async def disconnect(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        self._services = None
        await client.disconnect()

    def _require_client(self) -> BleakClient:
        if self._client is None:
            raise ConnectError(f"Not connected to {self._descriptor.address}")
        return self._client


class BleakAdapter:
    def __init__(self, scanner: BleakScanner) -> None:
        self._scanner = scanner
        self._scanning = False

    async def start_scan(self) -> None:
        try:
            await self._scanner.start()
        except BleakBluetoothNotAvailableError as exc:
            raise AdapterUnavailableError(f"Bluetooth adapter unavailable: {exc}") from exc
        except (BleakError, OSError) as exc:
            raise ScanError(f"BLE scan failed to start: {exc}") from exc
        self._scanning = True
        LOGGER.debug("Scan started")

    async def stop_scan(self) -> None:
        if not self._scanning:
            return
        self._scanning = False
        await self._scanner.stop()
        LOGGER.debug("Scan stopped")

    def peripherals(self) -> list[BleakPeripheral]:
        peripherals: list[BleakPeripheral] = []
        for device in self._scanner.discovered_devices:
            try:
                peripherals.append(BleakPeripheral(device))
            except PropertiesUnavailableError as exc:
                LOGGER.warning("Skipping discovered peripheral: %s", exc)
        return peripherals


class BleakGateway:
    def new_adapter(self) -> BleakAdapter:
        try:
            scanner = BleakScanner()
        except (BleakError, OSError) as exc:
            raise AdapterUnavailableError(f"No usable Bluetooth adapter: {exc}") from exc
        return BleakAdapter(scanner)


def _specifier(characteristic: CharacteristicInfo) -> int | str:
    # Handles stay unambiguous when a device repeats a UUID across services.
    if characteristic.handle is not None:
        return characteristic.handle
    return characteristic.uuid

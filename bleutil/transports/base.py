"""Adapter gateway interfaces."""

from __future__ import annotations

from typing import Protocol

from bleutil.core.model import CharacteristicInfo, PeripheralDescriptor, ServiceInfo


class Peripheral(Protocol):
    @property
    def descriptor(self) -> PeripheralDescriptor:
        """Address and advertised name captured by the scan."""

    async def connect(self) -> None:
        """Open a GATT connection to the peripheral."""

    async def discover_services(self) -> None:
        """Populate the service snapshot for the current connection."""

    def services(self) -> list[ServiceInfo]:
        """Return services discovered on the current connection."""

    async def read(self, characteristic: CharacteristicInfo) -> bytes:
        """Read the current value of a characteristic."""

    async def write(
        self,
        characteristic: CharacteristicInfo,
        data: bytes,
        *,
        with_response: bool = False,
    ) -> None:
        """Write a value to a characteristic."""

    async def disconnect(self) -> None:
        """Close the GATT connection."""


class Adapter(Protocol):
    async def start_scan(self) -> None:
        """Start an unfiltered scan."""

    async def stop_scan(self) -> None:
        """Stop scanning."""

    def peripherals(self) -> list[Peripheral]:
        """Return peripherals seen since the scan started."""


class AdapterGateway(Protocol):
    def new_adapter(self) -> Adapter:
        """Acquire the first available Bluetooth adapter."""

"""Stable public API for building tooling on top of bleutil.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from typing import TextIO

from bleutil.core.errors import (
    AdapterUnavailableError,
    AmbiguousDeviceError,
    BleutilError,
    CharacteristicNotFoundError,
    ConfigLoadError,
    ConfigValidationError,
    ConnectError,
    DeviceNotFoundError,
    DiscoveryError,
    PropertiesUnavailableError,
    ScanError,
    SessionError,
    TransportError,
)
from bleutil.core.model import (
    CharacteristicInfo,
    ExchangeSummary,
    PeripheralDescriptor,
    ServiceInfo,
    Settings,
    UartSpec,
    WriteReceipt,
)
from bleutil.core.service import BleService
from bleutil.core.session import Echo
from bleutil.transports.base import Adapter, AdapterGateway, Peripheral

__all__ = [
    "BleutilError",
    "AdapterUnavailableError",
    "AmbiguousDeviceError",
    "CharacteristicNotFoundError",
    "ConfigLoadError",
    "ConfigValidationError",
    "ConnectError",
    "DeviceNotFoundError",
    "DiscoveryError",
    "PropertiesUnavailableError",
    "ScanError",
    "SessionError",
    "TransportError",
    "CharacteristicInfo",
    "ExchangeSummary",
    "PeripheralDescriptor",
    "ServiceInfo",
    "Settings",
    "UartSpec",
    "WriteReceipt",
    "Adapter",
    "AdapterGateway",
    "Peripheral",
    "Client",
]


class Client:
    """Public client for interacting with bleutil core capabilities.

    A `Client` runs each call as its own command: a fresh scan, a connection
    to the located peripheral, the operation, then disconnect and scan stop.
    Pass ``gateway`` to drive a different BLE backend and ``settings`` to skip
    loading the YAML config.
    """

    def __init__(
        self,
        *,
        gateway: AdapterGateway | None = None,
        settings: Settings | None = None,
        echo: Echo | None = None,
    ) -> None:
        self._service = BleService(gateway=gateway, settings=settings, echo=echo)

    @property
    def settings(self) -> Settings:
        return self._service.settings

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def scan(self, *, scan_window: float | None = None) -> list[PeripheralDescriptor]:
        return self._service.scan(scan_window)

    def ping(self, address: str, *, scan_window: float | None = None) -> tuple[ServiceInfo, ...]:
        return self._service.ping(address, scan_window)

    def read(self, address: str, char_uuid: str, *, scan_window: float | None = None) -> bytes:
        return self._service.read(address, char_uuid, scan_window)

    def write(
        self,
        address: str,
        char_uuid: str,
        payload: bytes,
        *,
        scan_window: float | None = None,
    ) -> WriteReceipt:
        return self._service.write(address, char_uuid, payload, scan_window)

    def write_interactive(
        self,
        address: str,
        stream: TextIO,
        *,
        scan_window: float | None = None,
    ) -> ExchangeSummary:
        return self._service.write_interactive(address, stream, scan_window)

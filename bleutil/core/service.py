"""Service layer used by CLI and API frontends."""

from __future__ import annotations

import asyncio
from typing import TextIO

from bleutil.core.config_loader import load_config
from bleutil.core.locator import DeviceLocator, adapter_scope
from bleutil.core.model import (
    Enumerate,
    ExchangeSummary,
    InteractiveWriteRead,
    PeripheralDescriptor,
    Read,
    ServiceInfo,
    SessionMode,
    Settings,
    Write,
    WriteReceipt,
)
from bleutil.core.session import Echo, _discard, run_session
from bleutil.transports.base import AdapterGateway


class BleService:
    def __init__(
        self,
        *,
        gateway: AdapterGateway | None = None,
        settings: Settings | None = None,
        echo: Echo | None = None,
    ) -> None:
        if settings is None:
            loaded = load_config()
            settings = loaded.settings
            self.load_warnings = loaded.warnings
        else:
            self.load_warnings = ()
        self.settings = settings
        if gateway is None:
            from bleutil.transports.bleak_gateway import BleakGateway

            gateway = BleakGateway()
        self.gateway = gateway
        self.echo = echo or _discard

    def scan(self, scan_window: float | None = None) -> list[PeripheralDescriptor]:
        window = self.settings.scan_window_s if scan_window is None else scan_window

        async def _run() -> list[PeripheralDescriptor]:
            async with adapter_scope(self.gateway) as adapter:
                return await DeviceLocator(adapter, policy=self.settings.match_policy).scan(window)

        return asyncio.run(_run())

    def ping(self, address: str, scan_window: float | None = None) -> tuple[ServiceInfo, ...]:
        return self._run(address, Enumerate(), self._window(scan_window))

    def read(self, address: str, char_uuid: str, scan_window: float | None = None) -> bytes:
        return self._run(address, Read(char_uuid=char_uuid), self._window(scan_window))

    def write(
        self,
        address: str,
        char_uuid: str,
        payload: bytes,
        scan_window: float | None = None,
    ) -> WriteReceipt:
        mode = Write(char_uuid=char_uuid, payload=payload)
        return self._run(address, mode, self._window(scan_window, write=True))

    def write_interactive(
        self,
        address: str,
        stream: TextIO,
        scan_window: float | None = None,
    ) -> ExchangeSummary:
        mode = InteractiveWriteRead(
            write_char_uuid=self.settings.uart.write_char_uuid,
            read_char_uuid=self.settings.uart.read_char_uuid,
            stream=stream,
        )
        return self._run(address, mode, self._window(scan_window, write=True))

    def _window(self, scan_window: float | None, *, write: bool = False) -> float:
        if scan_window is not None:
            return scan_window
        return self.settings.write_scan_window_s if write else self.settings.scan_window_s

    def _run(self, address: str, mode: SessionMode, scan_window: float):
        async def _session():
            async with adapter_scope(self.gateway) as adapter:
                locator = DeviceLocator(adapter, policy=self.settings.match_policy)
                peripheral = await locator.locate(address, scan_window)
                return await run_session(peripheral, mode, echo=self.echo)

        return asyncio.run(_session())

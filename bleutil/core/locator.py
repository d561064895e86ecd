"""Time-boxed scanning and address lookup."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from bleutil.core.errors import AmbiguousDeviceError, DeviceNotFoundError
from bleutil.core.model import PeripheralDescriptor
from bleutil.transports.base import Adapter, AdapterGateway, Peripheral

MATCH_POLICIES = ("last", "first", "unique")
LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def adapter_scope(gateway: AdapterGateway) -> AsyncIterator[Adapter]:
    """Acquire an adapter for one command and stop scanning when it ends."""
    adapter = gateway.new_adapter()
    try:
        yield adapter
    finally:
        try:
            await adapter.stop_scan()
        except Exception as exc:
            LOGGER.warning("Stopping scan failed: %s", exc)


class DeviceLocator:
    def __init__(self, adapter: Adapter, *, policy: str = "last") -> None:
        if policy not in MATCH_POLICIES:
            raise ValueError(f"Unknown match policy '{policy}'")
        self._adapter = adapter
        self._policy = policy

    async def _collect(self, scan_window: float) -> list[Peripheral]:
        await self._adapter.start_scan()
        LOGGER.debug("Scanning for %.1fs", scan_window)
        await asyncio.sleep(scan_window)
        return self._adapter.peripherals()

    async def scan(self, scan_window: float) -> list[PeripheralDescriptor]:
        return [p.descriptor for p in await self._collect(scan_window)]

    async def locate(self, target_address: str, scan_window: float) -> Peripheral:
        """Return the scanned peripheral whose address equals ``target_address``.

        Matching is an exact, case-sensitive comparison. When several
        peripherals report the address the configured policy decides: ``last``
        keeps the final one enumerated, ``first`` the earliest, and ``unique``
        raises `AmbiguousDeviceError`.
        """
        found: Peripheral | None = None
        matches = 0
        for peripheral in await self._collect(scan_window):
            if peripheral.descriptor.address != target_address:
                continue
            matches += 1
            if self._policy == "unique" and matches > 1:
                raise AmbiguousDeviceError(
                    f"Multiple peripherals reported address {target_address}"
                )
            found = peripheral
            if self._policy == "first":
                break

        if found is None:
            raise DeviceNotFoundError(target_address)
        LOGGER.debug("Located %s (%d match(es), policy=%s)", target_address, matches, self._policy)
        return found

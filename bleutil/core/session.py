"""Connection lifecycle and characteristic operations for one peripheral."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from types import TracebackType
from typing import TextIO

from bleutil.core.errors import CharacteristicNotFoundError, DiscoveryError
from bleutil.core.model import (
    CharacteristicInfo,
    Enumerate,
    ExchangeSummary,
    InteractiveWriteRead,
    Read,
    ServiceInfo,
    SessionMode,
    Write,
    WriteReceipt,
)
from bleutil.transports.base import Peripheral

Echo = Callable[[str], None]
LOGGER = logging.getLogger(__name__)


def _discard(_: str) -> None:
    return None


def format_bytes(data: bytes) -> str:
    return "[" + ", ".join(str(b) for b in data) + "]"


class SessionController:
    """Owns a single connection: connect, discover, then operate.

    Use as an async context manager. Entering connects, echoes ``Connected``
    and runs service discovery; leaving disconnects.
    """

    def __init__(self, peripheral: Peripheral, *, echo: Echo = _discard) -> None:
        self._peripheral = peripheral
        self._echo = echo
        self._services: tuple[ServiceInfo, ...] | None = None

    @property
    def address(self) -> str:
        return self._peripheral.descriptor.address

    async def __aenter__(self) -> SessionController:
        await self._peripheral.connect()
        self._echo("Connected")
        try:
            await self._peripheral.discover_services()
            self._services = tuple(self._peripheral.services())
        except BaseException:
            await self._disconnect()
            raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._services = None
        await self._disconnect()

    async def _disconnect(self) -> None:
        try:
            await self._peripheral.disconnect()
        except Exception as exc:
            LOGGER.warning("Disconnect from %s failed: %s", self.address, exc)

    @property
    def services(self) -> tuple[ServiceInfo, ...]:
        if self._services is None:
            raise DiscoveryError(f"Services have not been discovered for {self.address}")
        return self._services

    def characteristic(self, uuid: str) -> CharacteristicInfo:
        for service in self.services:
            for char in service.characteristics:
                if char.uuid == uuid:
                    return char
        raise CharacteristicNotFoundError(uuid)

    async def read(self, char_uuid: str) -> bytes:
        char = self.characteristic(char_uuid)
        data = await self._peripheral.read(char)
        LOGGER.debug("Read %d bytes from %s", len(data), char_uuid)
        return data

    async def write(self, char_uuid: str, payload: bytes, *, with_response: bool = False) -> WriteReceipt:
        char = self.characteristic(char_uuid)
        await self._peripheral.write(char, payload, with_response=with_response)
        LOGGER.debug("Wrote %d bytes to %s", len(payload), char_uuid)
        return WriteReceipt(char_uuid=char_uuid, length=len(payload), with_response=with_response)

    async def exchange_lines(self, write_uuid: str, read_uuid: str, stream: TextIO) -> ExchangeSummary:
        """Write each stdin-style line, then read the reply, until the stream ends."""
        write_char = self.characteristic(write_uuid)
        read_char = self.characteristic(read_uuid)

        lines = 0
        while True:
            try:
                line = await asyncio.to_thread(stream.readline)
            except (OSError, UnicodeDecodeError) as exc:
                LOGGER.debug("Input read failed, ending exchange: %s", exc)
                break
            if not line:
                break

            payload = line.rstrip().encode("utf-8")
            await self._peripheral.write(write_char, payload, with_response=False)
            self._echo(f"Wrote {len(payload)} bytes to {write_uuid}")

            data = await self._peripheral.read(read_char)
            self._echo(format_bytes(data))
            lines += 1

        return ExchangeSummary(lines=lines)


async def run_session(
    peripheral: Peripheral,
    mode: SessionMode,
    *,
    echo: Echo = _discard,
) -> tuple[ServiceInfo, ...] | bytes | WriteReceipt | ExchangeSummary:
    async with SessionController(peripheral, echo=echo) as session:
        if isinstance(mode, Enumerate):
            return session.services
        if isinstance(mode, Read):
            return await session.read(mode.char_uuid)
        if isinstance(mode, Write):
            return await session.write(mode.char_uuid, mode.payload, with_response=mode.with_response)
        if isinstance(mode, InteractiveWriteRead):
            return await session.exchange_lines(mode.write_char_uuid, mode.read_char_uuid, mode.stream)
    raise TypeError(f"Unsupported session mode {mode!r}")

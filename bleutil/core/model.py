"""Core data models used across locator, session, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TextIO, Union


@dataclass(frozen=True)
class PeripheralDescriptor:
    address: str
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or "Unknown"


@dataclass(frozen=True)
class CharacteristicInfo:
    uuid: str
    properties: tuple[str, ...]
    service_uuid: str
    handle: int | None = None


@dataclass(frozen=True)
class ServiceInfo:
    uuid: str
    characteristics: tuple[CharacteristicInfo, ...]


@dataclass(frozen=True)
class UartSpec:
    write_char_uuid: str
    read_char_uuid: str


@dataclass(frozen=True)
class Settings:
    scan_window_s: float = 3.0
    write_scan_window_s: float = 2.0
    match_policy: str = "last"
    uart: UartSpec = UartSpec(
        write_char_uuid="6e400002-b5a3-f393-e0a9-e50e24dcca9e",
        read_char_uuid="6e400003-b5a3-f393-e0a9-e50e24dcca9e",
    )


@dataclass(frozen=True)
class WriteReceipt:
    char_uuid: str
    length: int
    with_response: bool


@dataclass(frozen=True)
class ExchangeSummary:
    lines: int


# Session modes


@dataclass(frozen=True)
class Enumerate:
    pass


@dataclass(frozen=True)
class Read:
    char_uuid: str


@dataclass(frozen=True)
class Write:
    char_uuid: str
    payload: bytes
    with_response: bool = False


@dataclass(frozen=True)
class InteractiveWriteRead:
    write_char_uuid: str
    read_char_uuid: str
    stream: TextIO


SessionMode = Union[Enumerate, Read, Write, InteractiveWriteRead]

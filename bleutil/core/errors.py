"""Domain-specific errors for bleutil."""


class BleutilError(Exception):
    """Base error for bleutil."""


class ConfigValidationError(BleutilError):
    """Raised when a config file does not conform to schema or semantics."""


class ConfigLoadError(BleutilError):
    """Raised when reading config sources fails."""


class AdapterUnavailableError(BleutilError):
    """Raised when no usable Bluetooth adapter is present."""


class ScanError(BleutilError):
    """Raised when starting or consulting a scan fails."""


class PropertiesUnavailableError(BleutilError):
    """Raised when a discovered peripheral does not report its address."""


class DeviceNotFoundError(BleutilError):
    """Raised when the target address was not seen during the scan window."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Unable to find device {address}")
        self.address = address


class AmbiguousDeviceError(BleutilError):
    """Raised when unique matching is configured and several peripherals match."""


class SessionError(BleutilError):
    """Base session error."""


class ConnectError(SessionError):
    """Raised on BLE connect failures."""


class DiscoveryError(SessionError):
    """Raised when service discovery fails or has not run yet."""


class CharacteristicNotFoundError(SessionError):
    """Raised when no discovered characteristic has the requested UUID."""

    def __init__(self, uuid: str) -> None:
        super().__init__(f"Characteristic {uuid} not found on device")
        self.uuid = uuid


class TransportError(SessionError):
    """Raised when a characteristic read or write fails."""

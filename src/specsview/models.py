"""Data models for specsview."""

from dataclasses import dataclass, field
from enum import Enum


class Category(Enum):
    """Categories offered in the detailed view."""

    CPU = "cpu"
    MEMORY = "memory"
    DISK = "disk"
    GRAPHICS = "graphics"
    BATTERY = "battery"
    NETWORK = "network"

    @property
    def label(self) -> str:
        """Menu label for this category."""
        return _CATEGORY_LABELS[self]

    @property
    def title(self) -> str:
        """Heading printed above the detail table."""
        return _CATEGORY_TITLES[self]


_CATEGORY_LABELS = {
    Category.CPU: "CPU Details",
    Category.MEMORY: "Memory Details",
    Category.DISK: "Disk Details",
    Category.GRAPHICS: "Graphics Details",
    Category.BATTERY: "Battery Details",
    Category.NETWORK: "Network Details",
}

_CATEGORY_TITLES = {
    Category.CPU: "CPU Details",
    Category.MEMORY: "Memory Details",
    Category.DISK: "Storage Details",
    Category.GRAPHICS: "Graphics Details",
    Category.BATTERY: "Battery Details",
    Category.NETWORK: "Network Details",
}


class MenuKey(Enum):
    """Non-category menu actions."""

    ALL = "all"
    DETAILED = "detailed"
    EXIT = "exit"
    BACK = "back"


@dataclass(slots=True, frozen=True)
class MenuChoice:
    """One selectable entry of a menu."""

    label: str
    key: Enum


@dataclass(slots=True, frozen=True)
class DisplayRow:
    """A category/value pair destined for tabular rendering."""

    category: str
    value: str
    style: str | None = None  # rich style for the value cell


@dataclass(slots=True, frozen=True)
class SystemIdentity:
    """Machine manufacturer and model from firmware."""

    manufacturer: str | None
    model: str | None


@dataclass(slots=True, frozen=True)
class CpuCache:
    """CPU cache sizes in KB."""

    l1d: int | None = None
    l1i: int | None = None
    l2: int | None = None
    l3: int | None = None


@dataclass(slots=True, frozen=True)
class CpuInfo:
    """Processor facts. Speeds are in GHz."""

    manufacturer: str
    brand: str
    model: str
    cores: int
    physical_cores: int
    performance_cores: int | None
    speed: float
    speed_min: float
    speed_max: float
    cache: CpuCache = field(default_factory=CpuCache)
    virtualization: bool = False


@dataclass(slots=True, frozen=True)
class MemoryInfo:
    """Memory statistics in bytes."""

    total: int
    free: int
    used: int
    active: int
    available: int
    swap_total: int
    swap_used: int


@dataclass(slots=True, frozen=True)
class GraphicsController:
    """A display adapter."""

    vendor: str
    model: str
    vram: int | None = None  # MB
    driver_version: str | None = None


@dataclass(slots=True, frozen=True)
class OsInfo:
    """Operating system facts."""

    distro: str
    release: str
    arch: str


@dataclass(slots=True, frozen=True)
class DiskInfo:
    """A physical disk."""

    type: str  # 'HD', 'SSD', 'NVMe', ...
    name: str
    size: int  # Bytes
    vendor: str
    model: str


@dataclass(slots=True, frozen=True)
class BatteryInfo:
    """Battery facts. Capacities are in mAh."""

    has_battery: bool
    type: str = ""
    percent: float = 0
    is_charging: bool = False
    current_capacity: int | None = None
    max_capacity: int | None = None
    designed_capacity: int | None = None
    cycle_count: int | None = None
    manufacturer: str | None = None
    model: str | None = None


@dataclass(slots=True, frozen=True)
class NetworkInterface:
    """A network interface and its addresses."""

    iface: str
    type: str  # 'wired', 'wireless', 'virtual'
    mac: str
    ip4: str | None
    ip6: str | None
    internal: bool
    speed: int | None  # Mbps


@dataclass(slots=True, frozen=True)
class SystemSnapshot:
    """Immutable snapshot of every category, gathered in one aggregation call."""

    system: SystemIdentity
    cpu: CpuInfo
    memory: MemoryInfo
    graphics: tuple[GraphicsController, ...]
    os_info: OsInfo
    disks: tuple[DiskInfo, ...]
    battery: BatteryInfo
    network: NetworkInterface | None  # Primary interface, if any

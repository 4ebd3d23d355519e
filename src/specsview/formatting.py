"""Shaping of raw system facts into display rows."""

from collections.abc import Callable, Sequence
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from specsview.errors import RenderError
from specsview.models import (
    BatteryInfo,
    Category,
    CpuInfo,
    DiskInfo,
    DisplayRow,
    GraphicsController,
    MemoryInfo,
    NetworkInterface,
    SystemSnapshot,
)

BYTE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]

NOT_AVAILABLE = "N/A"

# Errors that indicate facts of the wrong shape
_SHAPE_ERRORS = (AttributeError, TypeError, ValueError, KeyError, IndexError)


def format_bytes(size: int | float, decimals: int = 2) -> str:
    """
    Format a byte count with binary prefixes.

    The value is rounded half-up to ``decimals`` places:
    ``format_bytes(1536, 1) == "1.5 KB"``.
    """
    if size == 0:
        return "0 Bytes"
    k = 1024
    places = max(decimals, 0)

    index = 0
    while index < len(BYTE_UNITS) - 1 and size >= k ** (index + 1):
        index += 1

    # Room for every integer digit plus the requested places
    with localcontext() as ctx:
        ctx.prec = len(str(int(size) // k**index)) + places + 10
        value = Decimal(size) / Decimal(k**index)
        rounded = value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    return f"{rounded:f} {BYTE_UNITS[index]}"


def _plain(value: Any) -> str:
    """Render a number without a trailing '.0' for whole floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _or_na(value: Any) -> str:
    """Render a value, or N/A when it is missing or empty."""
    return _plain(value) if value else NOT_AVAILABLE


def summary_rows(snapshot: SystemSnapshot) -> list[DisplayRow]:
    """Build the ordered rows of the "view all" table."""
    try:
        return _summary_rows(snapshot)
    except _SHAPE_ERRORS as exc:
        raise RenderError(f"cannot build summary: {exc}") from exc


def _summary_rows(snapshot: SystemSnapshot) -> list[DisplayRow]:
    """Summary rows without the RenderError wrapping."""
    system = snapshot.system
    cpu = snapshot.cpu
    os_info = snapshot.os_info
    battery = snapshot.battery
    network = snapshot.network

    graphics = "\n".join(
        f"{g.vendor} {g.model}" + (f" ({g.vram}MB VRAM)" if g.vram else "")
        for g in snapshot.graphics
    )
    storage = "\n".join(
        f"{d.type} {d.name} - {format_bytes(d.size)}" for d in snapshot.disks
    )

    if battery.has_battery:
        state = "Charging" if battery.is_charging else "Discharging"
        battery_text = f"{battery.type}, {_plain(battery.percent)}% ({state})"
    else:
        battery_text = "No battery detected"

    if network is not None:
        network_text = f"{network.iface}: {network.ip4 or 'No IP'}, MAC: {network.mac}"
    else:
        network_text = "No network interface found"

    return [
        DisplayRow(
            "System",
            f"{system.manufacturer or 'Unknown'} {system.model or 'Laptop'}",
            style="bold green",
        ),
        DisplayRow(
            "Processor",
            f"{cpu.manufacturer} {cpu.brand} ({cpu.cores} cores, {_plain(cpu.speed)} GHz)",
        ),
        DisplayRow("Memory", format_bytes(snapshot.memory.total)),
        DisplayRow("Graphics", graphics),
        DisplayRow(
            "Operating System", f"{os_info.distro} {os_info.release} ({os_info.arch})"
        ),
        DisplayRow("Storage", storage),
        DisplayRow("Battery", battery_text),
        DisplayRow("Network", network_text),
    ]


def cpu_rows(cpu: CpuInfo) -> list[DisplayRow]:
    """Rows of the CPU detail view."""
    cache = cpu.cache
    cache_text = (
        (f"L1d: {cache.l1d} KB, " if cache.l1d else "")
        + (f"L1i: {cache.l1i} KB, " if cache.l1i else "")
        + f"L2: {_or_na(cache.l2)} KB, L3: {_or_na(cache.l3)} KB"
    )
    return [
        DisplayRow("Manufacturer", cpu.manufacturer),
        DisplayRow("Brand", cpu.brand),
        DisplayRow("Model", cpu.model),
        DisplayRow(
            "Cores",
            f"{cpu.cores} (Physical: {cpu.physical_cores}, "
            f"Performance: {_or_na(cpu.performance_cores)})",
        ),
        DisplayRow(
            "Speed",
            f"{_plain(cpu.speed)} GHz (Min: {_plain(cpu.speed_min)} GHz, "
            f"Max: {_plain(cpu.speed_max)} GHz)",
        ),
        DisplayRow("Cache", cache_text),
        DisplayRow("Virtualization", "Supported" if cpu.virtualization else "Not supported"),
    ]


def memory_rows(mem: MemoryInfo) -> list[DisplayRow]:
    """Rows of the memory detail view."""
    return [
        DisplayRow("Total", format_bytes(mem.total)),
        DisplayRow("Free", format_bytes(mem.free)),
        DisplayRow("Used", format_bytes(mem.used)),
        DisplayRow("Active", format_bytes(mem.active)),
        DisplayRow("Available", format_bytes(mem.available)),
        DisplayRow("Swap Total", format_bytes(mem.swap_total)),
        DisplayRow("Swap Used", format_bytes(mem.swap_used)),
    ]


def disk_rows(disks: Sequence[DiskInfo]) -> list[DisplayRow]:
    """One row per physical disk."""
    return [
        DisplayRow(
            disk.name,
            f"{disk.type} - {format_bytes(disk.size)} ({disk.vendor} {disk.model})",
        )
        for disk in disks
    ]


def graphics_rows(controllers: Sequence[GraphicsController]) -> list[DisplayRow]:
    """Rows for each graphics controller."""
    return [
        DisplayRow(
            f"GPU {number}",
            f"{g.vendor} {g.model}"
            + (f" ({g.vram} MB VRAM)" if g.vram else "")
            + (f"\nDriver: {g.driver_version}" if g.driver_version else ""),
        )
        for number, g in enumerate(controllers, start=1)
    ]


def battery_rows(battery: BatteryInfo) -> list[DisplayRow]:
    """Rows for the battery view; a single status row when there is no battery."""
    if not battery.has_battery:
        return [DisplayRow("Status", "No battery detected")]
    return [
        DisplayRow("Type", battery.type),
        DisplayRow("Model", battery.model or NOT_AVAILABLE),
        DisplayRow("Manufacturer", battery.manufacturer or NOT_AVAILABLE),
        DisplayRow("Cycle Count", _or_na(battery.cycle_count)),
        DisplayRow("Current Level", f"{_plain(battery.percent)}%"),
        DisplayRow("Status", "Charging" if battery.is_charging else "Discharging"),
        DisplayRow("Current Capacity", f"{_or_na(battery.current_capacity)} mAh"),
        DisplayRow("Max Capacity", f"{_or_na(battery.max_capacity)} mAh"),
        DisplayRow("Designed Capacity", f"{_or_na(battery.designed_capacity)} mAh"),
    ]


def network_rows(interface: NetworkInterface | None) -> list[DisplayRow]:
    """Rows of the primary network interface."""
    if interface is None:
        return [DisplayRow("Status", "No active network interfaces found")]
    return [
        DisplayRow("Interface", interface.iface),
        DisplayRow("Type", interface.type),
        DisplayRow("MAC Address", interface.mac),
        DisplayRow("IPv4", interface.ip4 or "Not connected"),
        DisplayRow("IPv6", interface.ip6 or "Not connected"),
        DisplayRow("Internal", "Yes" if interface.internal else "No"),
        DisplayRow("Speed", f"{interface.speed} Mbps" if interface.speed else NOT_AVAILABLE),
    ]


_DETAIL_SHAPERS: dict[Category, Callable[[Any], list[DisplayRow]]] = {
    Category.CPU: cpu_rows,
    Category.MEMORY: memory_rows,
    Category.DISK: disk_rows,
    Category.GRAPHICS: graphics_rows,
    Category.BATTERY: battery_rows,
    Category.NETWORK: network_rows,
}


def detail_rows(category: Category, facts: Any) -> list[DisplayRow]:
    """
    Build the ordered rows of a category's detail table.

    ``facts`` is what the provider returns for that category, except for
    NETWORK where it is the already selected primary interface (or None).
    """
    try:
        return _DETAIL_SHAPERS[category](facts)
    except _SHAPE_ERRORS as exc:
        raise RenderError(f"cannot build {category.value} details: {exc}") from exc

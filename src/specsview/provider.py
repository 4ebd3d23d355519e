"""Hardware/OS query layer for specsview."""

import logging
import os
import platform
import re
import shlex
import socket
import subprocess
import sys
from pathlib import Path
from typing import Protocol

import cpuinfo
import psutil

from specsview.models import (
    BatteryInfo,
    CpuCache,
    CpuInfo,
    DiskInfo,
    GraphicsController,
    MemoryInfo,
    NetworkInterface,
    OsInfo,
    SystemIdentity,
)

logger = logging.getLogger(__name__)

IS_LINUX = sys.platform.startswith("linux")

SYSFS = Path("/sys")

_CPU_VENDORS = {
    "GenuineIntel": "Intel",
    "AuthenticAMD": "AMD",
    "HygonGenuine": "Hygon",
    "CentaurHauls": "VIA",
}

# CpuCache field -> py-cpuinfo key
_CPUINFO_CACHE_KEYS = {
    "l1d": "l1_data_cache_size",
    "l1i": "l1_instruction_cache_size",
    "l2": "l2_cache_size",
    "l3": "l3_cache_size",
}

_PCI_VENDORS = {
    "0x10de": "NVIDIA Corporation",
    "0x1002": "Advanced Micro Devices, Inc. [AMD/ATI]",
    "0x8086": "Intel Corporation",
}

_GPU_CLASSES = ("VGA compatible controller", "3D controller", "Display controller")

# Block devices that are not physical disks
_SKIPPED_BLOCK_PREFIXES = ("loop", "ram", "zram", "dm-", "md", "sr", "fd", "nbd")


class HardwareProvider(Protocol):
    """One read-only query per category of system facts."""

    def system(self) -> SystemIdentity: ...

    def cpu(self) -> CpuInfo: ...

    def memory(self) -> MemoryInfo: ...

    def graphics(self) -> list[GraphicsController]: ...

    def os_info(self) -> OsInfo: ...

    def disks(self) -> list[DiskInfo]: ...

    def battery(self) -> BatteryInfo: ...

    def network_interfaces(self) -> list[NetworkInterface]: ...


def _read_text(path: Path) -> str | None:
    """Read a small sysfs file, returning None when it is unavailable."""
    try:
        value = path.read_text(encoding="utf-8", errors="replace").strip()
    except OSError:
        return None
    return value or None


def _read_int(path: Path) -> int | None:
    """Read a sysfs file holding a single integer."""
    value = _read_text(path)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_cache_size(size: str) -> int | None:
    """Convert a cache size such as '32K', '8M' or '256 KiB' to KB."""
    match = re.fullmatch(r"(\d+)\s*([KMG]?)(?:i?B)?", size.strip(), re.IGNORECASE)
    if not match:
        return None
    value, unit = int(match.group(1)), match.group(2).upper()
    return value * {"": 1, "K": 1, "M": 1024, "G": 1024 * 1024}[unit]


def _cache_kb(value: int | str | None) -> int | None:
    """Convert a py-cpuinfo cache size (bytes, or a string in older releases) to KB."""
    if not value:
        return None
    if isinstance(value, int):
        return value // 1024
    return _parse_cache_size(value)


def _clean_cpu_brand(model_name: str, manufacturer: str) -> str:
    """
    Reduce a raw CPU model name to its brand.

    'Intel(R) Core(TM) i7-8550U CPU @ 1.80GHz' becomes 'Core i7-8550U'.
    """
    brand = re.sub(r"\((R|TM|tm|r)\)", "", model_name)
    brand = re.sub(r"@.*$", "", brand)
    brand = re.sub(r"\b(CPU|Processor)\b", "", brand)
    if manufacturer and brand.strip().lower().startswith(manufacturer.lower()):
        brand = brand.strip()[len(manufacturer) :]
    return " ".join(brand.split())


class PsutilProvider:
    """
    HardwareProvider backed by psutil, py-cpuinfo, platform and Linux sysfs.

    Facts that the platform cannot report are returned as None. Only failures
    of the core psutil calls propagate to the caller.
    """

    def __init__(self, sysfs: Path = SYSFS) -> None:
        """
        Initialize the PsutilProvider.

        Args:
            sysfs: Root of the sysfs tree, replaceable in tests.
        """
        self._sysfs = sysfs

    def system(self) -> SystemIdentity:
        """Get manufacturer and model of the machine."""
        if IS_LINUX:
            dmi = self._sysfs / "class" / "dmi" / "id"
            return SystemIdentity(
                manufacturer=_read_text(dmi / "sys_vendor"),
                model=_read_text(dmi / "product_name"),
            )
        if sys.platform == "darwin":
            return SystemIdentity(manufacturer="Apple Inc.", model=platform.machine() or None)
        return SystemIdentity(manufacturer=None, model=None)

    def cpu(self) -> CpuInfo:
        """Get processor facts from py-cpuinfo and psutil."""
        info = cpuinfo.get_cpu_info()
        vendor_id = info.get("vendor_id_raw") or ""
        manufacturer = _CPU_VENDORS.get(vendor_id, vendor_id)
        model_name = info.get("brand_raw") or platform.processor() or "Unknown"
        if not manufacturer:
            manufacturer = model_name.split()[0] if model_name else "Unknown"

        freq = psutil.cpu_freq()
        speed = round(freq.current / 1000, 2) if freq else 0.0
        speed_min = round(freq.min / 1000, 2) if freq else 0.0
        speed_max = round(freq.max / 1000, 2) if freq else 0.0

        flags = info.get("flags") or []
        cores = psutil.cpu_count(logical=True) or 0
        model = info.get("model")

        return CpuInfo(
            manufacturer=manufacturer,
            brand=_clean_cpu_brand(model_name, manufacturer),
            model="" if model is None else str(model),
            cores=cores,
            physical_cores=psutil.cpu_count(logical=False) or cores,
            performance_cores=None,
            speed=speed,
            speed_min=speed_min,
            speed_max=speed_max,
            cache=self._cpu_cache(info),
            virtualization="vmx" in flags or "svm" in flags,
        )

    def _cpu_cache(self, info: dict) -> CpuCache:
        """Cache sizes from py-cpuinfo, with sysfs filling any gaps on Linux."""
        sizes = {
            field: _cache_kb(info.get(key)) for field, key in _CPUINFO_CACHE_KEYS.items()
        }
        if IS_LINUX and None in sizes.values():
            for field, kb in self._sysfs_cache_sizes().items():
                if sizes[field] is None:
                    sizes[field] = kb
        return CpuCache(**sizes)

    def _sysfs_cache_sizes(self) -> dict[str, int]:
        """Read cache sizes of cpu0 from sysfs."""
        base = self._sysfs / "devices" / "system" / "cpu" / "cpu0" / "cache"
        sizes: dict[str, int] = {}
        if not base.is_dir():
            return sizes

        for index in sorted(base.glob("index*")):
            level = _read_text(index / "level")
            kind = _read_text(index / "type") or ""
            size = _read_text(index / "size")
            if level is None or size is None:
                continue
            kb = _parse_cache_size(size)
            if kb is None:
                continue
            if level == "1" and kind == "Data":
                sizes["l1d"] = kb
            elif level == "1" and kind == "Instruction":
                sizes["l1i"] = kb
            elif level in ("2", "3"):
                sizes[f"l{level}"] = kb
        return sizes

    def memory(self) -> MemoryInfo:
        """Get memory and swap statistics."""
        mem = psutil.virtual_memory()
        swap = psutil.swap_memory()
        return MemoryInfo(
            total=mem.total,
            free=mem.free,
            used=mem.used,
            active=getattr(mem, "active", mem.used),
            available=mem.available,
            swap_total=swap.total,
            swap_used=swap.used,
        )

    def graphics(self) -> list[GraphicsController]:
        """List graphics controllers found on the PCI bus."""
        if not IS_LINUX:
            return []
        try:
            result = subprocess.run(
                ["lspci", "-mm"],
                capture_output=True,
                text=True,
                check=True,
            )
        except (OSError, subprocess.CalledProcessError):
            logger.debug("lspci unavailable, falling back to DRM sysfs")
            return self._drm_controllers()

        controllers: list[GraphicsController] = []
        for line in result.stdout.splitlines():
            try:
                parts = shlex.split(line)
            except ValueError:
                continue
            if len(parts) < 4 or parts[1] not in _GPU_CLASSES:
                continue
            slot, _, vendor, model = parts[:4]
            device = self._sysfs / "bus" / "pci" / "devices" / f"0000:{slot}"
            controllers.append(self._controller(device, vendor, model))
        return controllers

    def _drm_controllers(self) -> list[GraphicsController]:
        """List controllers from /sys/class/drm when lspci is missing."""
        controllers: list[GraphicsController] = []
        for card in sorted((self._sysfs / "class" / "drm").glob("card[0-9]")):
            device = card / "device"
            vendor_id = _read_text(device / "vendor")
            if vendor_id is None:
                continue
            vendor = _PCI_VENDORS.get(vendor_id, vendor_id)
            model = _read_text(device / "device") or "Unknown"
            controllers.append(self._controller(device, vendor, model))
        return controllers

    def _controller(self, device: Path, vendor: str, model: str) -> GraphicsController:
        """Build a controller record, reading VRAM and driver version from sysfs."""
        vram_bytes = _read_int(device / "mem_info_vram_total")
        driver_version = None
        driver_link = device / "driver"
        if driver_link.exists():
            driver = os.path.basename(os.path.realpath(driver_link))
            driver_version = _read_text(self._sysfs / "module" / driver / "version")
        return GraphicsController(
            vendor=vendor,
            model=model,
            vram=vram_bytes // (1024 * 1024) if vram_bytes else None,
            driver_version=driver_version,
        )

    def os_info(self) -> OsInfo:
        """Get distribution, release and architecture."""
        arch = platform.machine()
        if IS_LINUX:
            try:
                release = platform.freedesktop_os_release()
            except OSError:
                release = {}
            return OsInfo(
                distro=release.get("NAME", "Linux"),
                release=release.get("VERSION_ID") or platform.release(),
                arch=arch,
            )
        if sys.platform == "darwin":
            return OsInfo(distro="macOS", release=platform.mac_ver()[0], arch=arch)
        return OsInfo(distro=platform.system(), release=platform.release(), arch=arch)

    def disks(self) -> list[DiskInfo]:
        """List physical disks."""
        block = self._sysfs / "block"
        if not IS_LINUX or not block.is_dir():
            return self._partition_disks()

        disks: list[DiskInfo] = []
        for entry in sorted(block.iterdir()):
            name = entry.name
            if name.startswith(_SKIPPED_BLOCK_PREFIXES):
                continue
            sectors = _read_int(entry / "size") or 0
            if name.startswith("nvme"):
                kind = "NVMe"
            elif _read_text(entry / "queue" / "rotational") == "1":
                kind = "HD"
            else:
                kind = "SSD"
            disks.append(
                DiskInfo(
                    type=kind,
                    name=name,
                    size=sectors * 512,
                    vendor=_read_text(entry / "device" / "vendor") or "",
                    model=_read_text(entry / "device" / "model") or "",
                )
            )
        return disks

    def _partition_disks(self) -> list[DiskInfo]:
        """Fallback for platforms without /sys/block: report mounted partitions."""
        disks: list[DiskInfo] = []
        for part in psutil.disk_partitions(all=False):
            try:
                usage = psutil.disk_usage(part.mountpoint)
            except OSError:
                logger.debug("Skipping unreadable mount %s", part.mountpoint)
                continue
            disks.append(
                DiskInfo(
                    type=part.fstype or "Disk",
                    name=part.device,
                    size=usage.total,
                    vendor="",
                    model=part.mountpoint,
                )
            )
        return disks

    def battery(self) -> BatteryInfo:
        """Get battery status and capacity facts."""
        sensors_battery = getattr(psutil, "sensors_battery", None)
        status = sensors_battery() if sensors_battery else None
        supply = self._battery_supply()

        if status is None and supply is None:
            return BatteryInfo(has_battery=False)

        percent = status.percent if status else _read_int(supply / "capacity") or 0
        if supply is None:
            return BatteryInfo(
                has_battery=True,
                type="",
                percent=round(percent),
                is_charging=bool(status.power_plugged) and percent < 100,
            )

        state = _read_text(supply / "status")
        if state is not None:
            is_charging = state == "Charging"
        else:
            is_charging = bool(status and status.power_plugged) and percent < 100

        return BatteryInfo(
            has_battery=True,
            type=_read_text(supply / "technology") or "",
            percent=round(percent),
            is_charging=is_charging,
            current_capacity=self._capacity(supply, "now"),
            max_capacity=self._capacity(supply, "full"),
            designed_capacity=self._capacity(supply, "full_design"),
            cycle_count=_read_int(supply / "cycle_count"),
            manufacturer=_read_text(supply / "manufacturer"),
            model=_read_text(supply / "model_name"),
        )

    def _battery_supply(self) -> Path | None:
        """Find the first power supply of type Battery."""
        if not IS_LINUX:
            return None
        for supply in sorted((self._sysfs / "class" / "power_supply").glob("*")):
            if _read_text(supply / "type") == "Battery":
                return supply
        return None

    def _capacity(self, supply: Path, suffix: str) -> int | None:
        """Capacity in mAh from charge_* (uAh) or energy_* (uWh) files."""
        charge = _read_int(supply / f"charge_{suffix}")
        if charge is not None:
            return charge // 1000
        energy = _read_int(supply / f"energy_{suffix}")
        voltage = _read_int(supply / "voltage_min_design")
        if energy is not None and voltage:
            return energy * 1000 // voltage
        return None

    def network_interfaces(self) -> list[NetworkInterface]:
        """List network interfaces with addresses and link speed."""
        addrs = psutil.net_if_addrs()
        stats = psutil.net_if_stats()

        interfaces: list[NetworkInterface] = []
        for name, entries in addrs.items():
            mac = ""
            ip4 = ip6 = None
            for addr in entries:
                if addr.family == psutil.AF_LINK and not mac:
                    mac = addr.address
                elif addr.family == socket.AF_INET and ip4 is None:
                    ip4 = addr.address
                elif addr.family == socket.AF_INET6 and ip6 is None:
                    ip6 = addr.address.split("%", 1)[0]

            stat = stats.get(name)
            internal = name in ("lo", "lo0") or bool(ip4 and ip4.startswith("127."))
            interfaces.append(
                NetworkInterface(
                    iface=name,
                    type=self._interface_type(name, internal),
                    mac=mac,
                    ip4=ip4,
                    ip6=ip6,
                    internal=internal,
                    speed=stat.speed if stat and stat.speed else None,
                )
            )
        return interfaces

    def _interface_type(self, name: str, internal: bool) -> str:
        """Classify an interface as wired, wireless or virtual."""
        if IS_LINUX:
            net = self._sysfs / "class" / "net" / name
            if (net / "wireless").exists() or (net / "phy80211").exists():
                return "wireless"
            if internal or not (net / "device").exists():
                return "virtual"
            return "wired"
        lowered = name.lower()
        if "wi-fi" in lowered or "wlan" in lowered:
            return "wireless"
        return "virtual" if internal else "wired"

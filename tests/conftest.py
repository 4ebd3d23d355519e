"""Shared fixtures: a fake hardware provider with fixed facts."""

import io

import pytest
from rich.console import Console

from specsview.display import SpecsDisplay
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
from specsview.settings import ViewerSettings

GIB = 1024**3


def make_interface(name: str, ip4: str | None = "192.168.1.20") -> NetworkInterface:
    return NetworkInterface(
        iface=name,
        type="wireless" if "wlan" in name else "wired",
        mac="aa:bb:cc:dd:ee:ff",
        ip4=ip4,
        ip6="fe80::1",
        internal=False,
        speed=1000,
    )


class FakeProvider:
    """HardwareProvider returning fixture data and recording every call."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: list[str] = []
        self.fail_on = fail_on
        self.interfaces = [make_interface("eth0"), make_interface("wlan0")]
        self.battery_info = BatteryInfo(
            has_battery=True,
            type="Li-ion",
            percent=87,
            is_charging=False,
            current_capacity=4100,
            max_capacity=4700,
            designed_capacity=5000,
            cycle_count=312,
            manufacturer="SMP",
            model="5B10W13930",
        )

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise RuntimeError(f"{name} unavailable")

    def system(self) -> SystemIdentity:
        self._record("system")
        return SystemIdentity(manufacturer="LENOVO", model="ThinkPad X1")

    def cpu(self) -> CpuInfo:
        self._record("cpu")
        return CpuInfo(
            manufacturer="Intel",
            brand="Core i7-8550U",
            model="142",
            cores=8,
            physical_cores=4,
            performance_cores=None,
            speed=1.8,
            speed_min=0.4,
            speed_max=4.0,
            cache=CpuCache(l1d=32, l1i=32, l2=256, l3=8192),
            virtualization=True,
        )

    def memory(self) -> MemoryInfo:
        self._record("memory")
        return MemoryInfo(
            total=16 * GIB,
            free=2 * GIB,
            used=6 * GIB,
            active=5 * GIB,
            available=9 * GIB,
            swap_total=2 * GIB,
            swap_used=0,
        )

    def graphics(self) -> list[GraphicsController]:
        self._record("graphics")
        return [
            GraphicsController(
                vendor="Intel Corporation",
                model="UHD Graphics 620",
                vram=None,
                driver_version=None,
            ),
            GraphicsController(
                vendor="NVIDIA Corporation",
                model="GP108M [GeForce MX150]",
                vram=2048,
                driver_version="535.54.03",
            ),
        ]

    def os_info(self) -> OsInfo:
        self._record("os_info")
        return OsInfo(distro="Ubuntu", release="24.04", arch="x86_64")

    def disks(self) -> list[DiskInfo]:
        self._record("disks")
        return [
            DiskInfo(
                type="NVMe",
                name="nvme0n1",
                size=512 * GIB,
                vendor="Samsung",
                model="PM981",
            )
        ]

    def battery(self) -> BatteryInfo:
        self._record("battery")
        return self.battery_info

    def network_interfaces(self) -> list[NetworkInterface]:
        self._record("network")
        return self.interfaces


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def display() -> SpecsDisplay:
    """SpecsDisplay writing to in-memory consoles."""
    return SpecsDisplay(
        ViewerSettings(),
        console=Console(file=io.StringIO(), width=100, color_system=None),
        error_console=Console(file=io.StringIO(), width=100, color_system=None),
    )


def console_output(console: Console) -> str:
    return console.file.getvalue()

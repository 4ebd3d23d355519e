"""Tests for display-row shaping."""

import pytest

from conftest import GIB, FakeProvider, make_interface
from specsview.errors import RenderError
from specsview.formatting import (
    battery_rows,
    cpu_rows,
    detail_rows,
    disk_rows,
    format_bytes,
    graphics_rows,
    memory_rows,
    network_rows,
    summary_rows,
)
from specsview.models import (
    BatteryInfo,
    Category,
    CpuCache,
    DisplayRow,
    SystemIdentity,
    SystemSnapshot,
)


def make_snapshot(provider: FakeProvider, **overrides) -> SystemSnapshot:
    fields = dict(
        system=provider.system(),
        cpu=provider.cpu(),
        memory=provider.memory(),
        graphics=tuple(provider.graphics()),
        os_info=provider.os_info(),
        disks=tuple(provider.disks()),
        battery=provider.battery(),
        network=make_interface("wlan0"),
    )
    fields.update(overrides)
    return SystemSnapshot(**fields)


class TestFormatBytes:
    """Tests for format_bytes."""

    def test_zero(self):
        """Test format_bytes with zero."""
        assert format_bytes(0) == "0 Bytes"

    def test_kilobyte(self):
        """Test format_bytes with kilobyte values."""
        assert format_bytes(1024) == "1.00 KB"

    def test_custom_decimals(self):
        """Test format_bytes with custom decimal places."""
        assert format_bytes(1536, 1) == "1.5 KB"

    def test_gigabyte(self):
        """Test format_bytes with gigabyte values."""
        assert format_bytes(1073741824) == "1.00 GB"

    def test_below_one_kilobyte(self):
        """Test format_bytes with byte values."""
        assert format_bytes(500) == "500.00 Bytes"

    def test_rounds_half_up(self):
        """Test 1.125 KB rounds up to 1.13, not to even."""
        assert format_bytes(1152) == "1.13 KB"

    def test_zero_decimals(self):
        """Test format_bytes with no decimal places."""
        assert format_bytes(1536, 0) == "2 KB"

    def test_negative_decimals_treated_as_zero(self):
        """Test negative decimals behave like zero."""
        assert format_bytes(1536, -3) == "2 KB"

    def test_clamped_to_terabytes(self):
        """Test sizes beyond TB stay in TB."""
        assert format_bytes(2048 * 1024**4) == "2048.00 TB"

    def test_exact_unit_boundaries(self):
        """Test values exactly on a unit boundary."""
        assert format_bytes(1024**2) == "1.00 MB"
        assert format_bytes(1024**4) == "1.00 TB"
        assert format_bytes(1024**2 - 1) == "1024.00 KB"

    def test_many_decimals(self):
        """Test more decimal places than the default Decimal precision."""
        assert format_bytes(1536 * 1024**3, 30) == "1.5" + "0" * 29 + " TB"

    def test_huge_size(self):
        """Test a size with more integer digits than the default precision."""
        assert format_bytes(10**40) == "9094947017729282379150390625.00 TB"


class TestSummaryRows:
    """Tests for the "view all" rows."""

    def test_row_order(self, provider):
        """Test summary rows come in display order."""
        rows = summary_rows(make_snapshot(provider))
        assert [row.category for row in rows] == [
            "System",
            "Processor",
            "Memory",
            "Graphics",
            "Operating System",
            "Storage",
            "Battery",
            "Network",
        ]

    def test_values(self, provider):
        """Test summary row values."""
        rows = {row.category: row for row in summary_rows(make_snapshot(provider))}
        assert rows["System"].value == "LENOVO ThinkPad X1"
        assert rows["System"].style == "bold green"
        assert rows["Processor"].value == "Intel Core i7-8550U (8 cores, 1.8 GHz)"
        assert rows["Memory"].value == "16.00 GB"
        assert rows["Graphics"].value == (
            "Intel Corporation UHD Graphics 620\n"
            "NVIDIA Corporation GP108M [GeForce MX150] (2048MB VRAM)"
        )
        assert rows["Operating System"].value == "Ubuntu 24.04 (x86_64)"
        assert rows["Storage"].value == "NVMe nvme0n1 - 512.00 GB"
        assert rows["Battery"].value == "Li-ion, 87% (Discharging)"
        assert rows["Network"].value == "wlan0: 192.168.1.20, MAC: aa:bb:cc:dd:ee:ff"

    def test_unknown_system_identity(self, provider):
        """Test unknown manufacturer and model fall back."""
        snapshot = make_snapshot(provider, system=SystemIdentity(None, None))
        assert summary_rows(snapshot)[0].value == "Unknown Laptop"

    def test_no_battery(self, provider):
        """Test the summary without a battery."""
        snapshot = make_snapshot(provider, battery=BatteryInfo(has_battery=False))
        assert summary_rows(snapshot)[6].value == "No battery detected"

    def test_no_network(self, provider):
        """Test the summary without a network interface."""
        snapshot = make_snapshot(provider, network=None)
        assert summary_rows(snapshot)[7].value == "No network interface found"

    def test_interface_without_ip(self, provider):
        """Test an interface without an IPv4 address."""
        snapshot = make_snapshot(provider, network=make_interface("eth0", ip4=None))
        assert summary_rows(snapshot)[7].value == "eth0: No IP, MAC: aa:bb:cc:dd:ee:ff"

    def test_malformed_snapshot_raises_render_error(self, provider):
        """Test a malformed snapshot raises RenderError."""
        snapshot = make_snapshot(provider, disks=(None,))
        with pytest.raises(RenderError):
            summary_rows(snapshot)


class TestDetailRows:
    """Tests for per-category detail rows."""

    def test_cpu_rows(self, provider):
        """Test CPU detail rows."""
        rows = cpu_rows(provider.cpu())
        assert rows == [
            DisplayRow("Manufacturer", "Intel"),
            DisplayRow("Brand", "Core i7-8550U"),
            DisplayRow("Model", "142"),
            DisplayRow("Cores", "8 (Physical: 4, Performance: N/A)"),
            DisplayRow("Speed", "1.8 GHz (Min: 0.4 GHz, Max: 4 GHz)"),
            DisplayRow("Cache", "L1d: 32 KB, L1i: 32 KB, L2: 256 KB, L3: 8192 KB"),
            DisplayRow("Virtualization", "Supported"),
        ]

    def test_cpu_cache_without_l1_or_l3(self, provider):
        """Test CPU cache rows when L1 or L3 is unknown."""
        from dataclasses import replace

        cpu = replace(provider.cpu(), cache=CpuCache(l2=512), virtualization=False)
        rows = {row.category: row.value for row in cpu_rows(cpu)}
        assert rows["Cache"] == "L2: 512 KB, L3: N/A KB"
        assert rows["Virtualization"] == "Not supported"

    def test_memory_rows(self, provider):
        """Test memory detail rows."""
        rows = memory_rows(provider.memory())
        assert [row.category for row in rows] == [
            "Total",
            "Free",
            "Used",
            "Active",
            "Available",
            "Swap Total",
            "Swap Used",
        ]
        assert rows[0].value == "16.00 GB"
        assert rows[-1].value == "0 Bytes"

    def test_disk_rows(self, provider):
        """Test disk detail rows."""
        assert disk_rows(provider.disks()) == [
            DisplayRow("nvme0n1", "NVMe - 512.00 GB (Samsung PM981)")
        ]

    def test_graphics_rows(self, provider):
        """Test graphics detail rows."""
        rows = graphics_rows(provider.graphics())
        assert rows == [
            DisplayRow("GPU 1", "Intel Corporation UHD Graphics 620"),
            DisplayRow(
                "GPU 2",
                "NVIDIA Corporation GP108M [GeForce MX150] (2048 MB VRAM)\nDriver: 535.54.03",
            ),
        ]

    def test_battery_rows(self, provider):
        """Test battery detail rows."""
        rows = {row.category: row.value for row in battery_rows(provider.battery())}
        assert rows == {
            "Type": "Li-ion",
            "Model": "5B10W13930",
            "Manufacturer": "SMP",
            "Cycle Count": "312",
            "Current Level": "87%",
            "Status": "Discharging",
            "Current Capacity": "4100 mAh",
            "Max Capacity": "4700 mAh",
            "Designed Capacity": "5000 mAh",
        }

    def test_battery_missing_optional_fields(self):
        """Test battery rows with missing optional fields."""
        battery = BatteryInfo(has_battery=True, type="Li-poly", percent=50, is_charging=True)
        rows = {row.category: row.value for row in battery_rows(battery)}
        assert rows["Model"] == "N/A"
        assert rows["Manufacturer"] == "N/A"
        assert rows["Cycle Count"] == "N/A"
        assert rows["Status"] == "Charging"
        assert rows["Current Capacity"] == "N/A mAh"

    def test_no_battery_is_single_status_row(self):
        """Test other battery fields are ignored when there is no battery."""
        battery = BatteryInfo(
            has_battery=False,
            type="Li-ion",
            percent=99,
            cycle_count=10,
            manufacturer="SMP",
        )
        assert battery_rows(battery) == [DisplayRow("Status", "No battery detected")]

    def test_network_rows(self):
        """Test network detail rows."""
        rows = {row.category: row.value for row in network_rows(make_interface("wlan0"))}
        assert rows == {
            "Interface": "wlan0",
            "Type": "wireless",
            "MAC Address": "aa:bb:cc:dd:ee:ff",
            "IPv4": "192.168.1.20",
            "IPv6": "fe80::1",
            "Internal": "No",
            "Speed": "1000 Mbps",
        }

    def test_network_rows_not_connected(self):
        """Test network rows for a disconnected interface."""
        from dataclasses import replace

        interface = replace(make_interface("eth0", ip4=None), ip6=None, speed=None)
        rows = {row.category: row.value for row in network_rows(interface)}
        assert rows["IPv4"] == "Not connected"
        assert rows["IPv6"] == "Not connected"
        assert rows["Speed"] == "N/A"

    def test_no_network_interface(self):
        """Test network rows without an interface."""
        assert network_rows(None) == [
            DisplayRow("Status", "No active network interfaces found")
        ]

    def test_detail_rows_dispatch(self, provider):
        """Test detail_rows picks the shaper for each category."""
        assert detail_rows(Category.DISK, provider.disks()) == disk_rows(provider.disks())

    def test_detail_rows_wraps_shape_errors(self):
        """Test detail_rows raises RenderError on bad facts."""
        with pytest.raises(RenderError):
            detail_rows(Category.MEMORY, object())

    def test_memory_rows_total(self, provider):
        """Test the memory total row."""
        assert memory_rows(provider.memory())[1].value == format_bytes(2 * GIB)

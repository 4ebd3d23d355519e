"""Query aggregation for specsview."""

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any

from specsview import formatting
from specsview.errors import QueryError
from specsview.models import Category, DisplayRow, NetworkInterface, SystemSnapshot
from specsview.provider import HardwareProvider

logger = logging.getLogger(__name__)

_WIRELESS_MARKERS = ("wi-fi", "wlan")


def pick_primary_interface(
    interfaces: Sequence[NetworkInterface],
) -> NetworkInterface | None:
    """
    Pick the interface to report as the machine's network connection.

    The first Wi-Fi/WLAN interface by name wins, otherwise the first
    interface. Returns None for an empty list.
    """
    for interface in interfaces:
        name = interface.iface.lower()
        if any(marker in name for marker in _WIRELESS_MARKERS):
            return interface
    return interfaces[0] if interfaces else None


@dataclass(slots=True, frozen=True)
class DetailView:
    """Title and rows of one detailed category view."""

    title: str
    rows: list[DisplayRow]


class SystemAggregator:
    """
    Issues system queries against a HardwareProvider and shapes the results.

    The summary snapshot is gathered with all queries running in parallel on a
    thread pool; detail views query only their own category.
    """

    def __init__(self, provider: HardwareProvider, max_workers: int = 8) -> None:
        """
        Initialize the SystemAggregator.

        Args:
            provider: Source of hardware/OS facts.
            max_workers: Thread pool size for the summary fan-out.
        """
        self._provider = provider
        self._max_workers = max(1, max_workers)

    def fetch_summary(self) -> SystemSnapshot:
        """
        Gather every category into a single snapshot.

        Raises:
            QueryError: If any of the queries fails. No partial snapshot is
                returned.
        """
        queries: dict[str, Callable[[], Any]] = {
            "system": self._provider.system,
            "cpu": self._provider.cpu,
            "memory": self._provider.memory,
            "graphics": self._provider.graphics,
            "os_info": self._provider.os_info,
            "disks": self._provider.disks,
            "battery": self._provider.battery,
            "network": self._provider.network_interfaces,
        }

        started = time.monotonic()
        with ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix="SystemQuery",
        ) as pool:
            futures: dict[Future, str] = {
                pool.submit(query): name for name, query in queries.items()
            }
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)

            for future in done:
                exc = future.exception()
                if exc is not None:
                    for other in pending:
                        other.cancel()
                    name = futures[future]
                    raise QueryError(f"{name} query failed: {exc}") from exc

        results = {name: future.result() for future, name in futures.items()}
        logger.debug("Collected summary in %.3fs", time.monotonic() - started)

        network = pick_primary_interface(results["network"])
        logger.debug("Primary interface: %s", network.iface if network else None)

        return SystemSnapshot(
            system=results["system"],
            cpu=results["cpu"],
            memory=results["memory"],
            graphics=tuple(results["graphics"]),
            os_info=results["os_info"],
            disks=tuple(results["disks"]),
            battery=results["battery"],
            network=network,
        )

    def fetch_detail(self, category: Category) -> DetailView:
        """
        Query a single category and shape its detail rows.

        Raises:
            QueryError: If the category's query fails.
            RenderError: If the returned facts cannot be shaped.
        """
        query: Callable[[], Any] = {
            Category.CPU: self._provider.cpu,
            Category.MEMORY: self._provider.memory,
            Category.DISK: self._provider.disks,
            Category.GRAPHICS: self._provider.graphics,
            Category.BATTERY: self._provider.battery,
            Category.NETWORK: self._provider.network_interfaces,
        }[category]

        try:
            facts = query()
        except Exception as exc:
            raise QueryError(f"{category.value} query failed: {exc}") from exc

        if category is Category.NETWORK:
            facts = pick_primary_interface(facts)

        return DetailView(title=category.title, rows=formatting.detail_rows(category, facts))

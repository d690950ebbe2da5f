"""Real-time CLI dashboard for relay monitoring."""

from datetime import datetime
from pathlib import Path
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log

console = Console()


class RelayInfo:
    """Info about a single relayed request."""

    def __init__(self, route: str, outcome: str, timestamp: datetime):
        self.route = route
        self.outcome = outcome
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing per-route counts and recent relays."""

    def __init__(self, config: Config, log_file: Path | None = None):
        self.config = config
        self._log_file = log_file
        self._lock = Lock()
        self._recent: list[RelayInfo] = []
        self._max_recent = 8
        self._counts: dict[str, dict[str, int]] = {
            route.local_path: {"ok": 0, "failed": 0} for route in config.routes
        }
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_relay(self, route: str, upstream_url: str) -> None:
        """Log the start of a relay."""
        write_cli_log("RELAY", route, log_file=self._log_file, upstream=upstream_url)

    def log_success(self, route: str, status: int, elapsed_ms: float) -> None:
        """Log a relay that returned the upstream payload."""
        with self._lock:
            self._counts.setdefault(route, {"ok": 0, "failed": 0})["ok"] += 1
            self._remember(RelayInfo(route, f"{status} in {elapsed_ms:.0f}ms", datetime.now()))
            self._refresh()
            write_cli_log(
                "OK", route, log_file=self._log_file, status=status, elapsed_ms=f"{elapsed_ms:.1f}"
            )

    def log_error(self, route: str, status: int | None, message: str) -> None:
        """Log a failed relay."""
        with self._lock:
            self._counts.setdefault(route, {"ok": 0, "failed": 0})["failed"] += 1
            self._remember(RelayInfo(route, "500", datetime.now()))
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status or '-'}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], log_file=self._log_file, route=route, status=status)

    def snapshot(self) -> dict[str, dict[str, int]]:
        """Copy of the per-route counters."""
        with self._lock:
            return {route: dict(counts) for route, counts in self._counts.items()}

    def _remember(self, info: RelayInfo) -> None:
        self._recent.insert(0, info)
        self._recent = self._recent[: self._max_recent]

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["body"].split_row(
            Layout(name="routes", ratio=1),
            Layout(name="recent", ratio=1),
        )

        layout["header"].update(self._build_header())
        layout["routes"].update(self._build_routes_panel())
        layout["recent"].update(self._build_recent_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        total_ok = sum(c["ok"] for c in self._counts.values())
        total_failed = sum(c["failed"] for c in self._counts.values())

        stats = Text()
        stats.append("Berg Relay", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"OK: {total_ok}", style="green")
        stats.append("  |  ")
        stats.append(f"Failed: {total_failed}", style="red")
        stats.append("  |  ")
        stats.append(f"Upstream: {self.config.upstream.base_url}", style="dim")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_routes_panel(self) -> Panel:
        """Build per-route counters panel."""
        table = Table(show_header=True, header_style="bold", expand=True, box=None)
        table.add_column("Route", ratio=2)
        table.add_column("OK", style="green", width=6)
        table.add_column("Failed", style="red", width=6)

        for route, counts in self._counts.items():
            table.add_row(route, str(counts["ok"]), str(counts["failed"]))

        return Panel(table, title="[blue]Routes[/blue]", border_style="blue")

    def _build_recent_panel(self) -> Panel:
        """Build recent relays panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Route", ratio=2)
            table.add_column("Result", ratio=1)

            for info in self._recent:
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.route,
                    info.outcome,
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[magenta]Recent[/magenta]", border_style="magenta")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"Relaying on http://{self.config.proxy.host}:{self.config.proxy.port}",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")

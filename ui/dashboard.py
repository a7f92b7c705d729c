"""Real-time CLI dashboard for worker call monitoring."""

from collections import Counter
from datetime import datetime
from threading import Lock
from typing import Any

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from core.headers import Header
from ui.log_utils import write_cli_log, write_worker_log

console = Console()


class CallInfo:
    """Info about a single worker call."""

    def __init__(
        self,
        operation: str,
        method: str,
        url: str,
        tenant_id: str | None,
        timestamp: datetime,
    ):
        self.operation = operation
        self.method = method
        self.url = url[:60] + "..." if len(url) > 60 else url
        self.tenant_id = tenant_id
        self.status: int | None = None
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent worker calls."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._calls: list[CallInfo] = []
        self._max_calls = 10
        self._counts: Counter[str] = Counter()
        self._failures = 0
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

    def log_worker_call(
        self,
        operation: str,
        method: str,
        url: str,
        headers: dict[str, str],
        *,
        body: Any = None,
    ) -> None:
        """Log an outbound worker call."""
        with self._lock:
            self._counts[operation] += 1
            info = CallInfo(
                operation=operation,
                method=method,
                url=url,
                tenant_id=headers.get(Header.TENANT_ID),
                timestamp=datetime.now(),
            )
            self._calls.insert(0, info)
            self._calls = self._calls[: self._max_calls]
            self._refresh()

            write_worker_log(operation, method, url, headers, body)
            write_cli_log("WORKER", f"{method} {url}", operation=operation)

    def log_worker_result(self, operation: str, status: int) -> None:
        """Record the status of the most recent call for ``operation``."""
        with self._lock:
            for call in self._calls:
                if call.operation == operation and call.status is None:
                    call.status = status
                    break
            if status >= 300:
                self._failures += 1
            self._refresh()

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], route=route, status=status)

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
            Layout(name="counts", ratio=1),
            Layout(name="calls", ratio=3),
        )

        layout["header"].update(self._build_header())
        layout["counts"].update(self._build_counts_panel())
        layout["calls"].update(self._build_calls_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Worker Bridge", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Calls: {sum(self._counts.values())}", style="blue")
        stats.append("  |  ")
        stats.append(f"Failed: {self._failures}", style="red")
        stats.append("  |  ")
        stats.append(f"Worker: {self.config.worker.base_url}", style="magenta")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_counts_panel(self) -> Panel:
        """Build per-operation counters."""
        if self._counts:
            content = Table.grid(padding=(0, 1))
            content.add_column()
            content.add_column(justify="right")
            for operation, count in self._counts.most_common():
                content.add_row(f"[bold]{operation}[/bold]", str(count))
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Operations[/blue]", border_style="blue")

    def _build_calls_panel(self) -> Panel:
        """Build recent calls table."""
        if self._calls:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Operation", width=18)
            table.add_column("Request", ratio=2)
            table.add_column("Tenant", ratio=1)
            table.add_column("Status", width=6)

            for call in self._calls:
                if call.status is None:
                    status = "[dim]...[/dim]"
                elif call.status >= 300:
                    status = f"[red]{call.status}[/red]"
                else:
                    status = f"[green]{call.status}[/green]"
                table.add_row(
                    call.timestamp.strftime("%H:%M:%S"),
                    call.operation,
                    f"{call.method} {call.url}",
                    call.tenant_id or "[dim]-[/dim]",
                    status,
                )

            content = table
        else:
            content = Text("No worker calls yet...", style="dim")

        return Panel(content, title="[magenta]Worker calls[/magenta]", border_style="magenta")

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
                f"Serving on http://localhost:{self.config.proxy.port}/api",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")

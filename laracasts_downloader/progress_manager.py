from typing import Optional
from rich.console import Console
from rich.progress import Progress, TaskID, TextColumn, BarColumn, TimeRemainingColumn, TransferSpeedColumn, DownloadColumn
from rich.panel import Panel
from rich.text import Text

from .models import DownloadSummary

console = Console()


class ProgressDisplay:
    """Byte progress for the file currently being downloaded."""

    def __init__(self, enabled: bool = True, output: Optional[Console] = None):
        self.progress = Progress(
            TextColumn("[bold blue]{task.fields[filename]}", justify="right"),
            BarColumn(bar_width=40),
            "[progress.percentage]{task.percentage:>3.1f}%",
            "•",
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            "•",
            TimeRemainingColumn(),
            console=output or console,
            transient=True,
            disable=not enabled,
        )

    def add_task(self, filename: str, total_size: Optional[int] = None) -> TaskID:
        """Add a download task to the progress display."""
        return self.progress.add_task("download", filename=filename, total=total_size)

    def advance(self, task_id: TaskID, size: int):
        self.progress.update(task_id, advance=size)

    def remove_task(self, task_id: TaskID):
        self.progress.remove_task(task_id)

    def __enter__(self):
        self.progress.start()
        return self

    def __exit__(self, *exc_info):
        self.progress.stop()


def print_banner():
    """Print a clean banner."""
    banner_text = Text()
    banner_text.append("🚀 LARACASTS DOWNLOADER\n", style="bold cyan")
    banner_text.append("Crawl once, download everything\n", style="green")

    panel = Panel(
        banner_text,
        title="Starting",
        border_style="cyan",
        padding=(1, 2)
    )
    console.print(panel)


def print_completion_summary(summary: DownloadSummary, total_time: float):
    """Print completion summary."""
    status_text = Text()

    if summary.failed == 0:
        status_text.append("🎉 All lessons processed successfully!\n", style="bold green")
    else:
        status_text.append(f"⚠️  Finished with {summary.failed} failures\n", style="bold yellow")

    status_text.append(f"✅ Downloaded: {summary.downloaded}\n", style="green")
    status_text.append(f"⏭️  Already present: {summary.exists}\n", style="dim")
    status_text.append(f"⚠️  Size mismatch (left untouched): {summary.mismatch}\n",
                       style="yellow" if summary.mismatch else "dim")
    status_text.append(f"❌ Failed: {summary.failed}\n", style="red" if summary.failed else "dim")
    status_text.append(f"⏱️  Total time: {total_time:.1f}s\n", style="blue")

    panel = Panel(
        status_text,
        title="Download Complete",
        border_style="green" if summary.failed == 0 else "yellow",
        padding=(1, 2)
    )
    console.print(panel)

"""Custom TUI widgets for the generation form."""
from time import perf_counter
from typing import Optional

from rich.markup import escape
from textual.reactive import reactive
from textual.widgets import Static

from ..models import ImageReference


class StatusLine(Static):
    """One-line status: error, in-flight indicator with elapsed time, or ready.

    Example output:
        ● Generating image... (5s)
        ✗ Failed to generate image: quota exceeded
        ✓ Image ready
    """

    # Status icons using Rich markup
    ICONS = {
        "idle": "[dim]○[/dim]",
        "running": "[cyan]●[/cyan]",
        "complete": "[green]✓[/green]",
        "error": "[red]✗[/red]",
    }

    is_loading = reactive(False)
    has_result = reactive(False)
    error: reactive[Optional[str]] = reactive(None)

    def __init__(self, id: Optional[str] = None):
        super().__init__(id=id)
        self._started: Optional[float] = None
        self._elapsed_timer = None

    def on_mount(self):
        """Tick once a second so the elapsed time stays current."""
        self._elapsed_timer = self.set_interval(1, self.refresh)

    def watch_is_loading(self, loading: bool) -> None:
        self._started = perf_counter() if loading else None

    def render(self) -> str:
        if self.is_loading:
            elapsed = ""
            if self._started is not None:
                elapsed = f" ({int(perf_counter() - self._started)}s)"
            return f"{self.ICONS['running']} Generating image...{elapsed}"
        if self.error:
            return f"{self.ICONS['error']} [red]{escape(self.error)}[/red]"
        if self.has_result:
            return f"{self.ICONS['complete']} Image ready"
        return f"{self.ICONS['idle']} [dim]Enter a prompt and press Generate[/dim]"


class ImagePanel(Static):
    """Summary of the generated image and where it was saved."""

    image: reactive[Optional[ImageReference]] = reactive(None)
    saved_path: reactive[Optional[str]] = reactive(None)

    def render(self) -> str:
        if self.image is None:
            return "[dim]No image yet[/dim]"

        size_kb = self.image.size / 1024
        lines = [f"[bold]{self.image.mime_type}[/bold]  {size_kb:.1f} KB"]
        if self.saved_path:
            lines.append(f"[green]Saved:[/green] {self.saved_path}")
        else:
            lines.append("[dim]Press ctrl+s to save[/dim]")
        return "\n".join(lines)

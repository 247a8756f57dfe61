"""TUI application for the generation form.

CRITICAL: Do NOT import Rich console or use console.print() in TUI code.
Rich and Textual cannot mix - terminal state will be corrupted.
"""
import logging
from pathlib import Path
from typing import Optional

from textual import work
from textual.app import App
from textual.containers import Vertical
from textual.widgets import Button, Input, Static

from ..controller import RequestController
from ..models import ControllerState
from .results import FormResult
from .widgets import ImagePanel, StatusLine

logger = logging.getLogger(__name__)


class ImagenFormApp(App[FormResult]):
    """Prompt form bound to a RequestController.

    Generation runs in a non-exclusive async worker on the app's event loop,
    so a second press never cancels the call in flight; the controller
    ignores it instead.
    """

    TITLE = "Imagen Form"

    CSS = """
    Screen {
        align: center top;
    }

    #form {
        width: 80;
        height: auto;
        padding: 1 2;
        border: round $primary;
    }

    #title {
        text-style: bold;
        margin-bottom: 1;
    }

    #prompt {
        margin-bottom: 1;
    }

    #generate {
        width: 100%;
    }

    #status {
        height: auto;
        margin-top: 1;
    }

    #image {
        height: auto;
        margin-top: 1;
        padding-top: 1;
        border-top: solid $primary;
    }
    """

    BINDINGS = [
        ("ctrl+s", "save", "Save image"),
        ("escape", "quit", "Quit"),
    ]

    def __init__(self, controller: RequestController, output_dir: Path):
        """Initialize ImagenFormApp.

        Args:
            controller: Controller owning the form state
            output_dir: Directory that saved images are written to
        """
        super().__init__()
        self.controller = controller
        self.output_dir = Path(output_dir)
        self.saved_path: Optional[Path] = None
        self._unsubscribe = None

    def compose(self):
        """Create child widgets."""
        with Vertical(id="form"):
            yield Static("Imagen Image Generator", id="title")
            yield Input(
                value=self.controller.prompt,
                placeholder="Describe the image you want...",
                id="prompt",
            )
            yield Button("Generate Image", id="generate", variant="primary")
            yield StatusLine(id="status")
            yield ImagePanel(id="image")

    def on_mount(self):
        self._unsubscribe = self.controller.subscribe(self._render_state)
        self._render_state(self.controller.snapshot())

    def on_unmount(self):
        if self._unsubscribe:
            self._unsubscribe()

    def on_input_changed(self, event: Input.Changed) -> None:
        self.controller.prompt = event.value

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.run_generation()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "generate":
            self.run_generation()

    @work(group="generation")
    async def run_generation(self) -> None:
        await self.controller.generate()

    def _render_state(self, state: ControllerState) -> None:
        button = self.query_one("#generate", Button)
        button.disabled = not state.can_generate
        button.label = "Generating..." if state.is_loading else "Generate Image"

        self.query_one("#prompt", Input).disabled = not state.enabled

        status = self.query_one("#status", StatusLine)
        status.is_loading = state.is_loading
        status.error = state.error
        status.has_result = state.result is not None

        panel = self.query_one("#image", ImagePanel)
        if panel.image is not state.result:
            self.saved_path = None
            panel.saved_path = None
        panel.image = state.result

    def action_save(self) -> None:
        """Save the current image into the output directory."""
        image = self.controller.result
        if image is None:
            self.notify("No image to save", severity="warning")
            return

        path = image.save(self.output_dir / image.default_filename())
        logger.info("Saved image to %s", path)
        self.saved_path = path
        self.query_one("#image", ImagePanel).saved_path = str(path)
        self.notify(f"Saved {path}")

    async def action_quit(self) -> None:
        await self.controller.aclose()
        self.exit(FormResult(
            image=self.controller.result,
            saved_path=self.saved_path,
            error=self.controller.error,
        ))

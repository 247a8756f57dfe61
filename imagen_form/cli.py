"""
CLI for Imagen Form.
"""

import asyncio
import json
import logging
from pathlib import Path
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from imagen_form import __version__
from imagen_form.config import Config, GLOBAL_CONFIG_FILE
from imagen_form.controller import RequestController
from imagen_form.display import preview_image

console = Console()


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _key_status(cfg: Config) -> None:
    console.print("[bold]API Key Status:[/bold]")
    console.print(f"  Google (Imagen): {'[green]configured[/green]' if cfg.api_keys.google else '[red]missing[/red]'}")


async def _run_once(controller: RequestController) -> None:
    try:
        await controller.generate()
    finally:
        await controller.aclose()


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """Imagen Form - generate images from text prompts."""
    configure_logging(verbose)


@main.command("setup-keys")
@click.option("--google", "google_key", required=True, help="Google API key")
def setup_keys(google_key: str):
    """Configure the API key for Imagen Form."""
    cfg = Config.load()
    cfg.api_keys.google = google_key
    cfg.save()

    console.print(f"[green]API key saved to {GLOBAL_CONFIG_FILE}[/green]\n")
    _key_status(cfg)


@main.command("check-keys")
def check_keys():
    """Check API key configuration status."""
    cfg = Config.load()
    issues = cfg.validate()

    _key_status(cfg)

    if issues:
        console.print("\n[red]Missing required keys:[/red]")
        for issue in issues:
            console.print(f"  - {issue}")
        sys.exit(1)
    else:
        console.print("\n[green]All required keys configured![/green]")


@main.command()
@click.argument("prompt", nargs=-1, required=True)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Where to save the image")
@click.option("--inline", is_flag=True, default=False, help="Show inline image preview (iTerm2/Kitty/WezTerm)")
@click.option("--json", "json_output", is_flag=True, help="Output final state as JSON")
def generate(prompt: tuple, output: Optional[str], inline: bool, json_output: bool):
    """Generate one image from a prompt."""
    prompt_text = " ".join(prompt)
    config = Config.load()

    controller = RequestController.from_config(config, initial_prompt=prompt_text)
    if not controller.enabled:
        console.print(f"[red]Error: {controller.error}[/red]")
        sys.exit(1)

    if json_output:
        asyncio.run(_run_once(controller))
    else:
        console.print(f"[bold]Generating:[/bold] {prompt_text}")
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Generating image with Imagen...", total=None)
            asyncio.run(_run_once(controller))

    state = controller.snapshot()
    if state.result is None and state.error is None:
        # The controller skips blank prompts without touching its state
        console.print("[red]Prompt is empty[/red]")
        sys.exit(1)

    saved_path = None
    if state.result is not None:
        target = Path(output) if output else config.output_dir / state.result.default_filename()
        saved_path = state.result.save(target)

    if json_output:
        data = state.to_dict()
        if data["result"]:
            # The data URL can be megabytes; the file path is what callers want
            data["result"].pop("data_url")
        data["saved_path"] = str(saved_path) if saved_path else None
        click.echo(json.dumps(data, indent=2))
        if state.error:
            sys.exit(1)
        return

    if state.error:
        console.print(f"[red]{state.error}[/red]")
        sys.exit(1)

    console.print(f"[green]Image saved:[/green] {saved_path}")
    if inline or config.defaults.inline_preview:
        preview_image(state.result, max_width=60)


@main.command()
@click.option("--prompt", "-p", "initial_prompt", help="Initial prompt text")
@click.option("--output-dir", type=click.Path(file_okay=False), help="Directory for saved images")
def ui(initial_prompt: Optional[str], output_dir: Optional[str]):
    """Open the interactive generation form."""
    from textual.logging import TextualHandler
    from imagen_form.tui import ImagenFormApp

    # Log records written to stderr would corrupt the Textual screen
    logging.basicConfig(level=logging.getLogger().level, handlers=[TextualHandler()], force=True)

    config = Config.load()
    controller = RequestController.from_config(config, initial_prompt=initial_prompt)
    app = ImagenFormApp(
        controller=controller,
        output_dir=Path(output_dir) if output_dir else config.output_dir,
    )
    result = app.run()

    if result is None:
        return

    if result.saved_path:
        console.print(Panel.fit(
            f"[green]Image saved:[/green] {result.saved_path}",
            title="Imagen Form",
        ))
    elif result.error:
        console.print(f"[yellow]{result.error}[/yellow]")

    if result.image is not None and config.defaults.inline_preview:
        preview_image(result.image, max_width=60)


if __name__ == "__main__":
    main()

"""Shared Rich console and styles for CLI output."""

from rich.console import Console
from rich.theme import Theme

# Named styles used in renderer markup ("[ok]✓[/ok]")
THEME = Theme(
    {
        "ok": "bold green",
        "fail": "bold red",
        "muted": "dim",
        "digest": "cyan",
    }
)

console = Console(theme=THEME, highlight=False)

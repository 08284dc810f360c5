"""Theme for consistent Rich styling across CLI commands."""

from rich.console import Console
from rich.table import Table
from rich.theme import Theme


class Colors:
    """Standardized color palette for CLI output."""

    SUCCESS = "bold green"
    ERROR = "bold red"
    WARNING = "bold yellow"
    INFO = "bold blue"

    PRIMARY = "cyan"
    SECONDARY = "blue"
    ACCENT = "magenta"
    MUTED = "dim"

    HEADER = "bold cyan"


class Icons:
    """Standardized icons for different message types."""

    SUCCESS = "✓"
    ERROR = "✗"
    WARNING = "!"
    INFO = "i"
    BULLET = "•"
    ARROW = "→"

    @classmethod
    def get_icon(cls, icon_name: str, use_icons: bool = True) -> str:
        if not use_icons:
            return ""
        return str(getattr(cls, icon_name.upper(), ""))


KLAY_THEME = Theme(
    {
        "success": Colors.SUCCESS,
        "error": Colors.ERROR,
        "warning": Colors.WARNING,
        "info": Colors.INFO,
        "primary": Colors.PRIMARY,
        "secondary": Colors.SECONDARY,
        "accent": Colors.ACCENT,
        "muted": Colors.MUTED,
    }
)


class ThemedConsole:
    """Console wrapper with the klay theme applied."""

    def __init__(self, use_icons: bool = True, console: Console | None = None) -> None:
        self.console = console or Console(theme=KLAY_THEME)
        self.use_icons = use_icons

    def _print(self, icon_name: str, message: str, style: str) -> None:
        icon = Icons.get_icon(icon_name, self.use_icons)
        text = f"{icon} {message}" if icon else message
        self.console.print(text, style=style, highlight=False)

    def print_success(self, message: str) -> None:
        self._print("SUCCESS", message, "success")

    def print_error(self, message: str) -> None:
        self._print("ERROR", message, "error")

    def print_warning(self, message: str) -> None:
        self._print("WARNING", message, "warning")

    def print_info(self, message: str) -> None:
        self._print("INFO", message, "info")

    def print_list_item(self, message: str, indent: int = 1) -> None:
        """Print list item with bullet and styling."""
        spacing = "  " * indent
        bullet = Icons.get_icon("BULLET", self.use_icons) or "-"
        self.console.print(f"{spacing}{bullet} {message}", style="primary", highlight=False)


def create_basic_table(title: str = "") -> Table:
    """Create a basic styled table."""
    return Table(
        title=title or None,
        show_header=True,
        header_style=Colors.HEADER,
        border_style=Colors.SECONDARY,
    )


def get_themed_console(use_icons: bool = True) -> ThemedConsole:
    """Get a themed console instance."""
    return ThemedConsole(use_icons=use_icons)

import logging
from typing import Any, Optional, Sequence

from rich.box import HEAVY, ROUNDED, SIMPLE, Box
from rich.console import Console, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from reviewclient.domain.interfaces.user_interface import UserInterface
from reviewclient.domain.models.review import ReviewRecord, ServerAck

logger = logging.getLogger(__name__)

MAX_RATING = 5


def format_rating(rating: Any) -> str:
    """Renders a 0-5 rating as stars; out-of-range values are clamped."""
    try:
        value = int(rating)
    except (TypeError, ValueError):
        return "-"
    value = max(0, min(MAX_RATING, value))
    return "★" * value + "☆" * (MAX_RATING - value)


class ConsoleDisplay(UserInterface):
    """Terminal output for the review commands, rendered with rich."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    @property
    def console(self) -> Console:
        return self._console

    def _show_panel(self, body: RenderableType, title: str, colour: str, box: Box = HEAVY) -> None:
        self.console.print(Panel(
            body,
            title=f"[bold {colour}]{title}[/bold {colour}]",
            border_style=colour,
            box=box,
            padding=(0, 1),
        ))

    def display_reviews(self, reviews: Sequence[ReviewRecord], **kwargs: Any) -> None:
        """Displays reviews as a table, or an info panel when there are none."""
        if not reviews:
            self.display_info("No reviews yet.")
            return

        table = Table(title=kwargs.get("title", "Reviews"), box=ROUNDED, show_lines=True)
        table.add_column("Name", style="bold")
        table.add_column("City")
        table.add_column("Rating", style="yellow", no_wrap=True)
        table.add_column("Message")
        table.add_column("Approved", style="dim", no_wrap=True)
        for review in reviews:
            table.add_row(
                str(review.get("name", "")),
                str(review.get("city", "")),
                format_rating(review.get("rating")),
                str(review.get("message", "")),
                str(review.get("approvedAt") or ""),
            )
        self.console.print(table)
        logger.debug(f"Displayed {len(reviews)} review(s)")

    def display_ack(self, ack: ServerAck, **kwargs: Any) -> None:
        """Displays the backend acknowledgment as key/value lines."""
        body = Text()
        if isinstance(ack, dict) and ack:
            for key, value in ack.items():
                body.append(f"{key}: ", style="bold")
                body.append(f"{value}\n")
        else:
            body.append("Review received.")
        self._show_panel(body, "Submitted", "green", box=ROUNDED)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        self._show_panel(Text(error_message), "Error", "red")

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        self._show_panel(Text(info_message), "Info", "blue", box=SIMPLE)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        logger.warning(warning_message)
        self._show_panel(Text(warning_message), "Warning", "yellow")

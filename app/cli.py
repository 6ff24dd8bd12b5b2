"""Command-line tools for the Bookshelf backend."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

from app.core.config import settings
from app.db.session import SessionLocal
from app.utils.reviews import most_reviewed_day, most_reviewed_month

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="bookshelf",
    no_args_is_help=True,
    help="Bookshelf maintenance commands.",
)


@app.callback()
def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL)


@app.command("most-reviewed")
def most_reviewed(
    by_month: Annotated[
        bool,
        typer.Option("--by-month", "-m", help="Display results by month instead of by day."),
    ] = False,
) -> None:
    """Display the day or month with the highest number of published reviews."""
    db = SessionLocal()
    try:
        result = most_reviewed_month(db) if by_month else most_reviewed_day(db)
    finally:
        db.close()

    if result is None:
        typer.secho("[ERROR] No reviews found.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    period_type = "month" if by_month else "day"
    period = result.period.strftime("%Y-%m" if by_month else "%Y-%m-%d")
    typer.secho(
        f"[OK] The {period_type} with the most reviews ({result.review_count}) was {period}",
        fg=typer.colors.GREEN,
    )


if __name__ == "__main__":
    app()

import json
import logging
import sys
from typing import Optional, Tuple

import click
from dotenv import load_dotenv

from .config import Settings
from .core import NewsAggregator, count_items
from .exceptions import EstateNewsError
from .logging_setup import configure_logging
from .registry import build_default_registry
from .render import DEFAULT_DIGEST_TITLE, render_digest

logger = logging.getLogger(__name__)


@click.command()
@click.option("--category", "-c", "categories", multiple=True,
              help="Category key to fetch (repeatable). Defaults to every category.")
@click.option("--format", "fmt", type=click.Choice(["html", "json"]), default="html", show_default=True)
@click.option("--output", "-o", type=click.Path(dir_okay=False, writable=True), default=None,
              help="Write to this file instead of stdout.")
@click.option("--env-file", type=click.Path(dir_okay=False), default=".env", show_default=True)
@click.option("--log-level", default=None, help="Overrides LOG_LEVEL.")
@click.option("--cookie", default=None, help="Folo session cookie. Overrides FOLO_COOKIE.")
@click.option("--title", default=DEFAULT_DIGEST_TITLE, show_default=True)
def main(categories: Tuple[str, ...], fmt: str, output: Optional[str], env_file: str,
         log_level: Optional[str], cookie: Optional[str], title: str):
    """Fetch real-estate news from every configured source and print a digest."""
    # Existing environment variables win over the .env file
    load_dotenv(env_file, override=False)

    try:
        settings = Settings.from_env()
    except EstateNewsError as e:
        configure_logging()
        logger.error("Invalid configuration: %s", e)
        sys.exit(2)

    configure_logging(log_level or settings.log_level)

    registry = build_default_registry()
    aggregator = NewsAggregator(registry, settings, cookie=cookie)

    if categories:
        data = {key: aggregator.fetch_category(key) for key in categories}
    else:
        data = aggregator.fetch_all()
    logger.info("Collected %d items across %d categories", count_items(data), len(data))

    if fmt == "json":
        text = json.dumps(
            {key: [it.to_dict() for it in items] for key, items in data.items()},
            ensure_ascii=False,
            indent=2,
        ) + "\n"
    else:
        text = render_digest(data, registry, title=title)

    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info("Wrote %s", output)
    else:
        click.echo(text, nl=False)


if __name__ == "__main__":
    main()

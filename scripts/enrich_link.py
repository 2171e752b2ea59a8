#!/usr/bin/env python3
"""
Run one enrichment pass for a MyFigureCollection link and print the result.

Uses the same pipeline as the form (debounce, single-flight, merge), against
the collection API configured in the environment or .env file.

Usage:
    python scripts/enrich_link.py https://myfigurecollection.net/item/12345
    python scripts/enrich_link.py LINK --name "Already typed name" --debug
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from enrichment.client import HttpEnrichmentClient  # noqa: E402
from enrichment.config import ConfigError, load_settings  # noqa: E402
from enrichment.form import FigureForm  # noqa: E402
from enrichment.logging_config import configure_logging, get_logger  # noqa: E402
from enrichment.models import Notification, OutcomeKind  # noqa: E402
from enrichment.pipeline import EnrichmentPipeline  # noqa: E402

logger = get_logger(__name__)


class PrintingNotifier:
    """Collects notifications and echoes them to stdout."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)
        print(f"[{notification.kind.value}] {notification.text}")


async def enrich_once(link: str, form: FigureForm, api_url: str | None = None) -> OutcomeKind | None:
    """Feed ``link`` into a fresh pipeline and wait for it to settle."""
    overrides = {"api_url": api_url} if api_url else {}
    settings = load_settings(**overrides)
    notifier = PrintingNotifier()

    async with HttpEnrichmentClient.from_settings(settings) as client:
        pipeline = EnrichmentPipeline(form, notifier, client, settings=settings)
        async with pipeline.bind():
            form.set_field(pipeline.trigger_field, link)
            pipeline.on_edit()
            if pipeline.scheduler.pending is None:
                print(f"Not a recognized {settings.recognized_domain} /{settings.resource_segment}/ link: {link}")
                return None

            # Wait out the quiet period, then the request itself
            await asyncio.sleep(settings.debounce_seconds + 0.05)
            await pipeline.wait_idle()
            return pipeline.last_outcome


def main() -> int:
    parser = argparse.ArgumentParser(description="Enrich a figure form from a MyFigureCollection link")
    parser.add_argument("link", help="MyFigureCollection item link")
    parser.add_argument("--api-url", help="Collection API base URL (overrides API_URL)")
    parser.add_argument("--manufacturer", default="", help="Pre-filled manufacturer")
    parser.add_argument("--name", default="", help="Pre-filled figure name")
    parser.add_argument("--scale", default="", help="Pre-filled scale")
    parser.add_argument("--image-url", default="", help="Pre-filled image URL")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    load_dotenv()
    configure_logging(source="cli", debug=args.debug)

    form = FigureForm(
        manufacturer=args.manufacturer,
        name=args.name,
        scale=args.scale,
        imageUrl=args.image_url,
    )

    try:
        outcome = asyncio.run(enrich_once(args.link, form, api_url=args.api_url))
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    form.on_scale_blur()
    print("=" * 60)
    for name, value in form.to_dict().items():
        print(f"  {name:14} {value}")
    print("=" * 60)

    return 0 if outcome in (OutcomeKind.PARTIAL_MERGE, OutcomeKind.NO_OP_MERGE) else 1


if __name__ == "__main__":
    sys.exit(main())

"""Entry point for the catalog collator CLI."""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, TextIO

from catalog_collator import __version__
from catalog_collator.config import CollatorConfig, LogLevel, get_config
from catalog_collator.domains.catalog import DefaultCatalogCollator
from catalog_collator.utils.errors import CollatorError


def setup_logging(level: LogLevel) -> None:
    """Configure logging for the collator."""
    logging.basicConfig(
        level=level.value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="catalog-collator",
        description="Collate software catalog entities into search documents (JSON lines)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML config file",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Backend base URL (default: from config or http://localhost:7007)",
    )

    # Collator options
    parser.add_argument(
        "--kind",
        action="append",
        default=None,
        help="Only collate entities of this kind (repeatable)",
    )
    parser.add_argument(
        "--location-template",
        default=None,
        help="Location template (default: /catalog/:namespace/:kind/:name)",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> CollatorConfig:
    """Build config from args, falling back to config file, environment and defaults.

    Without a config file or overriding flags, the process-wide config is used.
    """
    config_kwargs: dict[str, Any] = {}

    if args.base_url:
        config_kwargs["base_url"] = args.base_url

    if args.log_level:
        config_kwargs["log_level"] = LogLevel(args.log_level)

    if args.config:
        return CollatorConfig.from_yaml(args.config, **config_kwargs)
    if config_kwargs:
        return CollatorConfig(**config_kwargs)
    return get_config()


async def collate(collator: DefaultCatalogCollator, out: TextIO) -> int:
    """Write every collated document to ``out`` as one JSON object per line."""
    count = 0
    async for document in collator.execute():
        out.write(json.dumps(document.to_dict()) + "\n")
        count += 1
    out.flush()
    return count


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = build_config(args)
    except (CollatorError, ValueError) as e:
        setup_logging(LogLevel.INFO)
        logging.getLogger(__name__).error(f"Configuration error: {e}")
        return 1

    setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(f"Starting catalog collator v{__version__}")

    try:
        collator = DefaultCatalogCollator.from_config(
            config,
            filter_spec={"kind": args.kind} if args.kind else None,
            location_template=args.location_template,
        )
        count = asyncio.run(collate(collator, sys.stdout))
    except CollatorError as e:
        logger.error(f"Collation failed: {e}")
        return 1

    logger.info(f"Collated {count} documents")
    return 0


if __name__ == "__main__":
    sys.exit(main())

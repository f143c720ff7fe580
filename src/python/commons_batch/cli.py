"""
Command-line entry point: render an image set for review.

Usage:
    commons-batch imageset.yaml [--config config.yaml] [--csv out.csv] [--strict] [-v]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from commons_batch.batch import (
    find_duplicate_titles,
    populate_metadata,
    render_image_set,
    renders_to_dataframe,
)
from commons_batch.config import load_image_set, load_settings
from commons_batch.models.enums import Namespace
from commons_batch.templating.context import build_context, context_to_dict
from commons_batch.templating.keys import editable_keys, namespaced_keys

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()]
    )
    logging.getLogger("commons_batch").setLevel(logging.DEBUG if verbose else logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commons-batch",
        description="Render titles and descriptions for a batch of images."
    )
    parser.add_argument(
        "image_set",
        type=Path,
        help="Image set YAML file"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--csv",
        type=Path,
        help="Write the rendered batch to a CSV file"
    )
    parser.add_argument(
        "--dump-context",
        action="store_true",
        help="Print the lookup context of each image"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 if any value is missing"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
        image_set = load_image_set(args.image_set)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if settings.extract_metadata:
        populated = populate_metadata(image_set)
        logger.info("Read metadata for %d images", populated)

    templates = [image_set.title_template, image_set.template]
    undefined_globals = [
        key for key in namespaced_keys(templates, Namespace.GLOBAL)
        if key not in image_set.global_values
    ]
    if undefined_globals:
        logger.warning("Templates reference undefined global values: %s", ", ".join(undefined_globals))

    fields = editable_keys(*templates)
    print(f"Per-image fields: {', '.join(fields) if fields else '(none)'}")

    renders = render_image_set(image_set, settings)

    for rendered, image in zip(renders, image_set.ordered_images):
        marker = "" if rendered.is_complete else f"  [{rendered.missing_count} missing]"
        print(f"\n#{rendered.index} {rendered.name} -> {rendered.title}{marker}")
        print(rendered.description)

        if args.dump_context:
            context = build_context(
                image.name,
                rendered.index - 1,
                local=image.keys,
                global_values=image_set.global_values,
                metadata=image.metadata,
                date_fields=settings.date_fields,
            )
            print(yaml.safe_dump(context_to_dict(context), sort_keys=True, allow_unicode=True))

    duplicates = find_duplicate_titles(renders)
    for title, ids in duplicates.items():
        print(f"Warning: title '{title}' is used by {len(ids)} images: {', '.join(ids)}")

    incomplete = [rendered for rendered in renders if not rendered.is_complete]
    print(f"\nRendered {len(renders)} images, {len(incomplete)} with missing values.")

    if args.csv:
        renders_to_dataframe(renders).to_csv(args.csv, index=False)
        print(f"Wrote {args.csv}")

    if args.strict and incomplete:
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())

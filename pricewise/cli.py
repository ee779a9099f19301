"""CLI entry point for PriceWise."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from .camera import TagCamera, collect_uploads
from .config import load_config, parse_scale
from .entry import ManualEntryError, parse_manual_entry
from .models import ProductInfo
from .normalizer import normalize
from .report import ranking_to_dict, render_ranking
from .session import Session
from .vision import create_backend

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="pricewise",
        description="Scan grocery price tags and rank them by unit price",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to a TOML config file",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # cameras
    sub.add_parser("cameras", help="List available cameras")

    # scan
    scan_parser = sub.add_parser("scan", help="Capture or upload tags and rank them")
    scan_parser.add_argument(
        "--image", type=str, nargs="+", help="Use existing image files"
    )
    _add_item_arg(scan_parser)
    _add_output_args(scan_parser)

    # compare
    compare_parser = sub.add_parser("compare", help="Rank manually entered items")
    _add_item_arg(compare_parser, required=True)
    _add_output_args(compare_parser)

    # normalize
    norm_parser = sub.add_parser("normalize", help="Show the rate table for one tag")
    norm_parser.add_argument("price", type=str)
    norm_parser.add_argument("quantity", type=str)
    norm_parser.add_argument("unit", type=str, nargs="+")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    _load_dotenv()
    config = load_config(args.config)
    _setup_logging("DEBUG" if args.verbose else config.logging.level)

    match args.command:
        case "cameras":
            _cmd_cameras()
        case "scan":
            asyncio.run(_cmd_scan(config, args))
        case "compare":
            _cmd_compare(config, args)
        case "normalize":
            _cmd_normalize(args)


def _add_item_arg(p: argparse.ArgumentParser, required: bool = False) -> None:
    p.add_argument(
        "--item",
        type=str,
        action="append",
        required=required,
        metavar="NAME,PRICE,QTY,UNIT[,BRAND]",
        help="Manually entered item (repeatable)",
    )


def _add_output_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--scale", type=str, default=None, choices=["small", "large"],
        help="Comparison scale (default from config)",
    )
    p.add_argument("--json", action="store_true", help="Output JSON")


def _load_dotenv() -> None:
    from dotenv import load_dotenv

    load_dotenv()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_item_spec(spec: str) -> ProductInfo:
    """Parse "NAME,PRICE,QTY,UNIT[,BRAND]" into a validated entry."""
    fields = [f.strip() for f in spec.split(",")]
    if len(fields) not in (4, 5):
        raise ManualEntryError(
            "item", f"expected NAME,PRICE,QTY,UNIT[,BRAND], got {spec!r}"
        )
    name, price, qty, unit = fields[:4]
    brand = fields[4] if len(fields) == 5 else None
    return parse_manual_entry(name, price, qty, unit, brand=brand)


def _session_for(config, args) -> Session:
    scale = parse_scale(args.scale) if args.scale else config.compare.scale
    return Session.with_scale(scale)


def _add_items(session: Session, specs: list[str] | None) -> None:
    for spec in specs or []:
        try:
            session.add_manual(parse_item_spec(spec))
        except ManualEntryError as e:
            print(f"Invalid item: {e}", file=sys.stderr)
            sys.exit(2)


def _print_ranking(session: Session, config, as_json: bool) -> None:
    ranking = session.ranking()
    if as_json:
        print(json.dumps(ranking_to_dict(ranking), ensure_ascii=False, indent=2))
    else:
        print(render_ranking(ranking, currency=config.compare.currency))


def _cmd_cameras() -> None:
    cameras = TagCamera.list_cameras()
    if not cameras:
        print("No cameras found.")
        return
    print(f"Available cameras: {len(cameras)}")
    for idx in cameras:
        print(f"  camera {idx}")


async def _cmd_scan(config, args) -> None:
    session = _session_for(config, args)
    _add_items(session, args.item)

    # Get images
    if args.image:
        try:
            image_paths = collect_uploads(args.image)
        except (FileNotFoundError, ValueError) as e:
            print(f"Invalid image: {e}", file=sys.stderr)
            sys.exit(2)
    else:
        camera = TagCamera(
            camera_indices=config.camera.indices,
            save_dir=config.camera.save_dir,
            jpeg_quality=config.camera.jpeg_quality,
            warmup_frames=config.camera.warmup_frames,
        )
        print("Capturing...", file=sys.stderr)
        image_paths = camera.capture_all()
        print(f"  captured {len(image_paths)} image(s)", file=sys.stderr)

    backend = create_backend(config)
    logger.debug("Using %s vision backend", config.vision.backend)
    ids = session.add_batch(image_paths)
    print(f"Reading {len(ids)} tag(s)...", file=sys.stderr)
    await session.analyze(
        backend, ids, max_concurrency=config.vision.max_concurrency
    )

    _print_ranking(session, config, args.json)


def _cmd_compare(config, args) -> None:
    session = _session_for(config, args)
    _add_items(session, args.item)
    _print_ranking(session, config, args.json)


def _cmd_normalize(args) -> None:
    unit = " ".join(args.unit)
    try:
        entry = parse_manual_entry("item", args.price, args.quantity, unit)
    except ManualEntryError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        sys.exit(2)

    result = normalize(entry.price, entry.quantity, unit)
    print(f"category: {result.category.value} (base {result.base_unit})")
    for label, rate in result.rates.items():
        print(f"  {label:<6} {rate:.4f}")

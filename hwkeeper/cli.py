"""CLI entry point for Hardware Keeper."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict

from dotenv import load_dotenv

from .config import load_config
from .db import PRODUCT_STATUSES, ProductCreate, ProductDB, products_from_result
from .processor import create_processor


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="hwkeeper",
        description="Hardware Keeper: track purchased hardware from receipt photos",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to the configuration file (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # scan
    scan_parser = sub.add_parser("scan", help="Extract products from a receipt image")
    scan_parser.add_argument("image", type=str, help="Image file path or URL")
    scan_parser.add_argument("--json", action="store_true", help="Print JSON output")
    scan_parser.add_argument(
        "--save", action="store_true", help="Add the extracted products to the inventory"
    )
    scan_parser.add_argument(
        "--select", type=str, default=None, metavar="N,N",
        help="1-based product numbers to save (default: all)",
    )

    # add
    add_parser = sub.add_parser("add", help="Add a product manually")
    add_parser.add_argument("--name", required=True)
    add_parser.add_argument("--brand", default=None)
    add_parser.add_argument("--model", default=None)
    add_parser.add_argument("--price", type=float, default=None)
    add_parser.add_argument("--purchase-date", default=None, metavar="YYYY-MM-DD")
    add_parser.add_argument("--warranty-months", type=int, default=None)
    add_parser.add_argument("--notes", default=None)
    add_parser.add_argument("--public", action="store_true")

    # list
    list_parser = sub.add_parser("list", help="List inventory products")
    list_parser.add_argument("--status", choices=PRODUCT_STATUSES, default=None)
    list_parser.add_argument("--search", default=None)
    list_parser.add_argument(
        "--expiring", action="store_true", help="Only warranties ending within 30 days"
    )
    list_parser.add_argument("--json", action="store_true", help="Print JSON output")

    # update
    update_parser = sub.add_parser("update", help="Change a product")
    update_parser.add_argument("id", type=int)
    update_parser.add_argument("--status", choices=PRODUCT_STATUSES, default=None)
    update_parser.add_argument("--reason", default=None, help="Discontinue reason")
    update_parser.add_argument("--purchase-date", default=None, metavar="YYYY-MM-DD")
    update_parser.add_argument("--warranty-months", type=int, default=None)
    update_parser.add_argument("--notes", default=None)

    # delete
    delete_parser = sub.add_parser("delete", help="Delete a product")
    delete_parser.add_argument("id", type=int)

    # stats
    sub.add_parser("stats", help="Show inventory counts")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s [%(name)s] %(message)s",
    )
    load_dotenv()
    config = load_config(args.config)

    if args.command == "scan":
        asyncio.run(_cmd_scan(config, args))
        return

    db = ProductDB(config.database.path)
    try:
        match args.command:
            case "add":
                _cmd_add(db, args)
            case "list":
                _cmd_list(db, args)
            case "update":
                _cmd_update(db, args)
            case "delete":
                db.delete_product(args.id)
                print(f"Deleted product {args.id}")
            case "stats":
                _cmd_stats(db)
    except (LookupError, ValueError) as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


def _parse_selection(raw: str | None, count: int) -> list[int] | None:
    """Turn ``"1,3"`` into zero-based indexes."""
    if raw is None:
        return None
    indexes = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        number = int(part)
        if not 1 <= number <= count:
            raise ValueError(f"No product number {number} (1..{count})")
        indexes.append(number - 1)
    return indexes


async def _cmd_scan(config, args) -> None:
    try:
        processor = create_processor(config)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    if not args.json:
        print("🔍 Processing receipt...")
    result = await processor.process(args.image)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    elif result.success:
        if result.used_fallback:
            print("⚠  OCR service failed; showing the sample receipt instead.")
        if result.store:
            print(f"Store: {result.store}")
        if result.receipt_date:
            print(f"Date:  {result.receipt_date}")
        if result.total is not None:
            print(f"Total: ${result.total:,.2f}")
        if not result.products:
            print("No products found. Add them manually with `hwkeeper add`.")
        else:
            print(f"\n🧾 Products found ({len(result.products)}):")
            for n, p in enumerate(result.products, start=1):
                print(
                    f"  {n}. {p.name:<40} ${p.price:>10,.2f}  "
                    f"[{p.product_type}] {p.confidence:.0%}"
                )

    if not result.success:
        print(f"Processing failed: {result.error}", file=sys.stderr)
        sys.exit(1)

    if not args.save or not result.products:
        return

    try:
        selected = _parse_selection(args.select, len(result.products))
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    db = ProductDB(config.database.path)
    try:
        saved = db.create_products(products_from_result(result, selected))
    finally:
        db.close()
    print(f"Saved {len(saved)} products to the inventory.")


def _cmd_add(db: ProductDB, args) -> None:
    product = db.create_product(
        ProductCreate(
            name=args.name,
            brand=args.brand,
            model=args.model,
            purchase_date=args.purchase_date,
            warranty_months=args.warranty_months,
            purchase_price=args.price,
            is_public=args.public,
            notes=args.notes,
        )
    )
    print(f"Added product {product.id}: {product.name}")


def _cmd_list(db: ProductDB, args) -> None:
    products = db.list_products(
        status=args.status, search=args.search, expiring_only=args.expiring
    )
    if args.json:
        print(json.dumps([asdict(p) for p in products], ensure_ascii=False, indent=2))
        return
    if not products:
        print("No products.")
        return
    for p in products:
        price = f"${p.purchase_price:,.2f}" if p.purchase_price is not None else "-"
        warranty = p.warranty_expires_at or "-"
        print(f"  {p.id:>4}  {p.name:<40} {price:>12}  {p.status:<12} warranty: {warranty}")


def _cmd_update(db: ProductDB, args) -> None:
    changes = {}
    if args.status is not None:
        changes["status"] = args.status
    if args.reason is not None:
        changes["discontinue_reason"] = args.reason
    if args.purchase_date is not None:
        changes["purchase_date"] = args.purchase_date
    if args.warranty_months is not None:
        changes["warranty_months"] = args.warranty_months
    if args.notes is not None:
        changes["notes"] = args.notes
    product = db.update_product(args.id, **changes)
    print(f"Updated product {product.id}: {product.name} ({product.status})")


def _cmd_stats(db: ProductDB) -> None:
    stats = db.product_stats()
    print(f"Total products:    {stats['total']}")
    print(f"Active:            {stats['active']}")
    print(f"Public:            {stats['public']}")
    print(f"Warranty expiring: {stats['expiring_soon']}")

import argparse
import asyncio
import os
import sys

# Add app directory to path
sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'app'))

from inspector import inspect_record
from persistence import DynamoManager, StoreError
from record_filters import available_columns, filter_records
from settings import configure_logging, load_config


def parse_filters(pairs):
    filters = {}
    for pair in pairs or []:
        column, sep, value = pair.partition('=')
        if not sep:
            raise argparse.ArgumentTypeError(f"Filter must look like column=value, got '{pair}'")
        filters[column] = value
    return filters


def print_inspection(name, result):
    print(f"--- {name}: {result.title} ---")
    if result.codec:
        print(f"(decompressed with {result.codec.label})")
    if result.diagnostic:
        print(f"WARNING: {result.diagnostic}")
    print(result.content)
    print()


def run(args, db):
    if args.list or not args.table:
        tables = db.list_tables()
        if not tables:
            print("No tables found.")
        for name in tables:
            print(name)
        return

    records = db.scan_table(args.table, limit=args.limit)
    filters = parse_filters(args.filter)
    matches = filter_records(records, search_term=args.search, column_filters=filters)

    print(f"--- Table: {args.table} ---")
    print(f"Scanned {len(records)} items, {len(matches)} match.")
    print(f"Columns: {', '.join(available_columns(records))}")

    if not args.attribute:
        return
    if not 0 <= args.index < len(matches):
        print(f"No matching item at index {args.index}.")
        return

    record = matches[args.index]
    missing = [name for name in args.attribute if name not in record]
    for name in missing:
        print(f"Attribute '{name}' not present on item {args.index}.")

    results = asyncio.run(inspect_record(record, args.attribute))
    print()
    for name, result in results.items():
        print_inspection(name, result)


def main():
    parser = argparse.ArgumentParser(description="Browse DynamoDB tables and inspect (compressed) attributes.")
    parser.add_argument("table", nargs="?", help="Table to scan. Lists tables when omitted.")
    parser.add_argument("--list", action="store_true", help="List tables and exit.")
    parser.add_argument("--limit", type=int, default=None, help="Maximum items to scan.")
    parser.add_argument("--search", default="", help="Search across all attributes.")
    parser.add_argument("--filter", action="append", metavar="COLUMN=VALUE", help="Per-column filter, repeatable.")
    parser.add_argument("--index", type=int, default=0, help="Which matching item to inspect.")
    parser.add_argument("--attribute", action="append", help="Attribute to decompress and classify, repeatable.")
    args = parser.parse_args()

    config = load_config()
    configure_logging(config)

    try:
        db = DynamoManager(config)
        run(args, db)
    except (StoreError, argparse.ArgumentTypeError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

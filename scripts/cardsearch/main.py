"""Command-line entry point for the API server and the build scripts."""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from cardsearch.assets import copy_assets, get_bucket_client, publish_assets
from cardsearch.constants import ASSET_DESTINATIONS, NUM_CHUNKS, SQL_OUTPUT_DIR
from cardsearch.errors import CardSearchError
from cardsearch.settings import load_settings
from cardsearch.sql_export import write_import_scripts


def cmd_serve(args, settings):
    from cardsearch.app import create_app

    app = create_app(settings)
    app.run(host=args.host, port=args.port, debug=args.debug)


def cmd_export_sql(args, settings):
    cards_dir = Path(args.cards_dir).resolve() if args.cards_dir else settings["CARDS_DIR"]
    output_dir = Path(args.output_dir).resolve()

    print("Card SQL Export")
    print("=" * 50)
    write_import_scripts(cards_dir, output_dir, num_chunks=args.chunks)


def cmd_copy_assets(args, settings):
    source = Path(args.source).resolve() if args.source else settings["ASSETS_SOURCE"]

    print("Card Asset Copy")
    print("=" * 50)
    print("\n[1/2] Copying to build destinations...")
    copy_assets(source, ASSET_DESTINATIONS)

    if not args.publish:
        print("\n[2/2] Skipping bucket publish (no --publish)")
        return

    print("\n[2/2] Publishing to bucket...")
    client = get_bucket_client(settings)
    publish_assets(source, client, settings["ASSETS_BUCKET"], settings["ASSETS_PREFIX"])


def build_parser():
    parser = argparse.ArgumentParser(prog="punk-records",
                                     description="One Piece card catalogue search")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the search + analytics API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5000)
    serve.add_argument("--debug", action="store_true")
    serve.set_defaults(func=cmd_serve)

    export = sub.add_parser("export-sql", help="Generate import-cards-part-N.sql files")
    export.add_argument("--cards-dir", help="Card tree root (default: CARDS_DIR)")
    export.add_argument("--output-dir", default=str(SQL_OUTPUT_DIR))
    export.add_argument("--chunks", type=int, default=NUM_CHUNKS,
                        help="Number of SQL files to split the import into")
    export.set_defaults(func=cmd_export_sql)

    assets = sub.add_parser("copy-assets", help="Copy card data into hosting locations")
    assets.add_argument("--source", help="Directory to copy (default: ASSETS_SOURCE)")
    assets.add_argument("--publish", action="store_true",
                        help="Also upload to ASSETS_BUCKET")
    assets.set_defaults(func=cmd_copy_assets)

    return parser


def main(argv=None):
    load_dotenv()
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    args = build_parser().parse_args(argv)
    if getattr(args, "chunks", 1) < 1:
        print("Error: --chunks must be at least 1")
        return 2

    try:
        settings = load_settings()
        args.func(args, settings)
    except CardSearchError as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

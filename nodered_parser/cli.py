"""CLI for nodered-parser."""

import argparse
import sys

from nodered_parser.admin_client import AdminApiError
from nodered_parser.catalog_cache import NodeCatalog
from nodered_parser.config import CatalogConfig, setup_logging
from nodered_parser.output.catalog_writer import CatalogWriter
from nodered_parser.sources import HtmlSourceError, source_for


def _catalog(args, config: CatalogConfig) -> NodeCatalog:
    source = source_for(args.source, token=config.node_red_token, api_prefix=config.api_prefix)
    return NodeCatalog(
        source,
        ttl_ms=config.ttl_ms,
        custom_modules=config.custom_modules,
        verbose=config.verbose or getattr(args, 'verbose', False),
    )


def main(argv=None):
    parser = argparse.ArgumentParser(prog='nodered-parser', description='Node-RED node catalog parser')
    subparsers = parser.add_subparsers(dest='command')

    # dump command
    dump_parser = subparsers.add_parser('dump', help='Parse /nodes HTML and dump catalog JSON')
    dump_parser.add_argument('source', help='Path to saved /nodes HTML or Node-RED base URL')
    dump_parser.add_argument('output', help='Output directory')
    dump_parser.add_argument('--no-pretty', action='store_true', help='Disable pretty printing')
    dump_parser.add_argument('--verbose', action='store_true', help='Emit extra build warnings')

    # search command
    search_parser = subparsers.add_parser('search', help='Search the catalog')
    search_parser.add_argument('source', help='Path to saved /nodes HTML or Node-RED base URL')
    search_parser.add_argument('query', help='Search text')
    search_parser.add_argument('--custom-only', action='store_true', help='Only custom nodes')
    search_parser.add_argument('--module', help='Module substring filter')
    search_parser.add_argument('--category', help='Category substring filter')
    search_parser.add_argument('--limit', type=int, default=25, help='Max results (default: 25)')

    # types command
    types_parser = subparsers.add_parser('types', help='List parsed node types')
    types_parser.add_argument('source', help='Path to saved /nodes HTML or Node-RED base URL')

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return

    config = CatalogConfig.from_env()
    setup_logging(config.log_level)
    catalog = _catalog(args, config)

    try:
        if args.command == 'dump':
            print(f"Parsing {args.source}...")
            snapshot = catalog.refresh()
            paths = CatalogWriter(args.output, pretty=not args.no_pretty).write(snapshot)
            print(f"Done! Parsed {len(snapshot.nodes)} node types ({len(snapshot.warnings)} warnings)")
            print(f"Output: {paths[0]}")

        elif args.command == 'search':
            hits = catalog.search(args.query, custom_only=args.custom_only, module=args.module,
                                  category=args.category, limit=args.limit)
            for hit in hits:
                print(f"  {hit['type']}  [{hit['module'] or '-'}]  {hit['category'] or ''}")
            if not hits:
                print(f"No nodes matching {args.query!r}")

        elif args.command == 'types':
            for node in catalog.get_catalog().nodes:
                print(f"  {node.type}")

    except (AdminApiError, HtmlSourceError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()

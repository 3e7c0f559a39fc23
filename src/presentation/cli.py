"""CLI interface for the bulk deletion tool."""
import sys
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from domain.exceptions import DomainException
from infrastructure.config import ConfigLoader, RunConfig
from infrastructure.storage import CsvFailureSink
from application.factories import BackendFactory
from application.orchestrator import BulkDeleteOrchestrator
from shared.logging import setup_logger, get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Delete objects listed in a file from an S3-compatible store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input lines: bucket,raw id,preview id,name (extra fields ignored).
The object key deleted is PREFIX + preview id.

The failure file uses the same layout with the preview id already prefixed.
Replay it with an empty PREFIX:
  s3-bulk-delete failed.csv http://minio:9000 10 100 0 failed-again.csv ""

Examples:
  # 20 workers, progress every 1000 deletions, one request per object
  s3-bulk-delete objects.csv http://minio:9000 20 1000 0 failed.csv

  # batches of 500 keys per request, keys prefixed with urn:oid:
  s3-bulk-delete objects.csv http://minio:9000 10 100 500 failed.csv urn:oid:
"""
    )
    # Numeric positionals are kept as strings: malformed values fall back to defaults
    parser.add_argument('input', help='Input file with one object per line')
    parser.add_argument('endpoint', help='S3 endpoint URL')
    parser.add_argument('workers', help='Number of concurrent workers (default 10 if malformed)')
    parser.add_argument('pivot', help='Log progress every PIVOT deletions in single mode (default 100 if malformed)')
    parser.add_argument('batch_size', help='Keys per delete request, 0 for one request per object')
    parser.add_argument('output', help='CSV file receiving objects that could not be deleted')
    parser.add_argument('prefix', nargs='?', default=None, help='Prefix prepended to every preview id')
    parser.add_argument('--config', type=Path, help='Config YAML file')
    parser.add_argument('--separator', help='Input field separator (default: ",")')
    parser.add_argument('--interval', type=float, help='Idle interval in seconds before the run is considered done (default: 15)')
    parser.add_argument('--ramp-up', type=float, help='Seconds between worker starts (default: 1)')
    parser.add_argument('--backend', choices=['api', 'command'], help='Delete through boto3 (api) or the aws CLI (command)')
    parser.add_argument('--command-timeout', type=float, help='Seconds before an aws command is abandoned (default: 300)')
    parser.add_argument('--region', help='Region used for request signing')
    parser.add_argument('--no-verify-ssl', action='store_true', help='Do not verify TLS certificates')
    parser.add_argument('--log-file', type=Path, help='Also write logs to this file')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose')
    return parser


def load_config(args: argparse.Namespace) -> RunConfig:
    overrides = {
        'input_path': args.input,
        'endpoint': args.endpoint,
        'workers': args.workers,
        'progress_pivot': args.pivot,
        'batch_size': args.batch_size,
        'output_path': args.output,
        'prefix': args.prefix,
        'separator': args.separator,
        'idle_interval': args.interval,
        'ramp_up_delay': args.ramp_up,
        'backend': args.backend,
        'command_timeout': args.command_timeout,
        'region': args.region,
        'log_file': args.log_file,
    }
    if args.no_verify_ssl:
        overrides['verify_ssl'] = False

    return ConfigLoader(config_path=args.config).load(overrides=overrides)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logger('', level=log_level, log_file=args.log_file)
    # boto's own debug output drowns the progress lines
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    logger = get_logger(__name__)
    sink = None
    try:
        config = load_config(args)
        if config.log_file != args.log_file:
            setup_logger('', level=log_level, log_file=config.log_file)
        backend = BackendFactory().create(config)
        sink = CsvFailureSink(config.output_path)

        orchestrator = BulkDeleteOrchestrator(config, backend, sink)
        summary = orchestrator.run()

        logger.info("=" * 60)
        logger.info(f"Deleted: {summary.deleted}")
        logger.info(f"Failed: {summary.failed} (see {config.output_path})")
        logger.info(f"Skipped lines: {summary.skipped}")
        logger.info(f"Elapsed: {summary.elapsed_seconds:.1f}s, mean velocity {summary.mean_rate:.1f} f/s")
        logger.info("=" * 60)
        return 0

    except DomainException as e:
        logger.error(f"Bulk delete error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130
    finally:
        if sink is not None:
            sink.close()


if __name__ == '__main__':
    sys.exit(main())

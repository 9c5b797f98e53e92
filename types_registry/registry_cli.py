import sys
import argparse
import logging

from .registry_publisher import RegistryPublisher
from .registry_settings import RegistrySettings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Publish the types-registry package when new @types packages were added')
    parser.add_argument('--dry', action='store_true',
                        help='Generate the registry package but do not upload it')
    parser.add_argument('--output-path',
                        help='Root directory for generated packages (default: $TYPES_REGISTRY_OUTPUT_PATH or ./output)')
    parser.add_argument('--data-dir',
                        help='Directory holding typesData.json and additions.json (default: $TYPES_REGISTRY_DATA_DIR or ./data)')
    parser.add_argument('--logs-dir',
                        help='Directory the run log is written to (default: $TYPES_REGISTRY_LOGS_DIR or ./logs)')
    parser.add_argument('--registry-url',
                        help='npm registry URL (default: $NPM_REGISTRY_URL or https://registry.npmjs.org)')
    parser.add_argument('--log-level',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO',
                        help='Set the logging level')
    return parser


def main(argv=None):
    """Main entry point for the registry publishing CLI."""
    args = build_parser().parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        settings = RegistrySettings.from_env(
            output_path=args.output_path,
            data_dir=args.data_dir,
            logs_dir=args.logs_dir,
            registry_url=args.registry_url,
        )
        outcome = RegistryPublisher(settings).run(dry=args.dry)
        logging.getLogger("types.registry.cli").info(f"Run finished: {outcome.value}")
    except Exception as e:
        logging.error(f"Command failed: {e}")
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()

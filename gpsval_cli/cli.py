"""
GPS Validator CLI - Main entry point.

Validates survey CSV files (areas and their sectors) and prints the
verdict report; optionally mirrors verdicts to an MQTT broker.
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from gpsval_geometry import Coordinates, Region
from gpsval_logging import LogEvent, create_logger
from gpsval_validation import (
    BatchSummary,
    BatchValidator,
    MQTTConfig,
    MultiSink,
    RecordError,
    TextSink,
    ValidationSink,
    ValidatorConfig,
    ValidatorService,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_INVALID = 2
EXIT_CANCELLED = 130

MESSAGE_INPUT_ERROR = "Oops. Something went wrong. Check log for details."


def setup_logging(level: int = logging.INFO, log_file: Optional[Path] = None) -> None:
    """
    Setup logging (stderr + optional file).

    Args:
        level: Root logging level
        log_file: Optional path to log file
    """
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr),
            *(
                [logging.FileHandler(log_file)]
                if log_file
                else []
            )
        ],
        force=True,
    )


def load_config(args: argparse.Namespace) -> ValidatorConfig:
    """Load YAML config (if given) and apply command-line overrides."""
    config = ValidatorConfig.from_yaml(args.config) if args.config else ValidatorConfig()

    mqtt_config = config.mqtt_config
    if args.mqtt_broker:
        mqtt_config = MQTTConfig(
            broker=args.mqtt_broker,
            port=args.mqtt_port,
            verdict_topic=args.mqtt_topic or "gpsval/verdicts",
        )

    return config.with_overrides(
        log_level=args.log_level,
        log_file=args.log_file,
        show_progress=True if args.progress else None,
        mqtt_config=mqtt_config,
    )


def validate_file(args: argparse.Namespace) -> int:
    """Run the `validate` subcommand."""
    config = load_config(args)
    setup_logging(config.logging_level, config.log_file)

    path = Path(args.file)
    text_sink = TextSink(sys.stdout, show_progress=config.show_progress)
    validator = BatchValidator(
        logger=create_logger("validator", level=config.logging_level, path=str(path))
    )

    publisher = connect_publisher(config)
    try:
        sink = MultiSink(text_sink, publisher) if publisher is not None else text_sink
        text_sink.write(f"Processing file: {path.resolve()}")
        summary = run_service(path, sink, config, validator)
    finally:
        if publisher is not None:
            publisher.disconnect()

    if summary is None:
        text_sink.write(MESSAGE_INPUT_ERROR)
        return EXIT_INPUT_ERROR

    if summary.cancelled:
        text_sink.write("")
        text_sink.write("Processing cancelled.")
        return EXIT_CANCELLED

    text_sink.write("")
    text_sink.write("Finished processing file.")
    logger.info(f"Summary: {summary}")
    return EXIT_OK if summary.all_valid else EXIT_INVALID


def connect_publisher(config: ValidatorConfig):
    """Connected VerdictPublisher, or None when MQTT is off or unreachable."""
    if config.mqtt_config is None:
        return None

    # paho loads only when MQTT is configured
    from gpsval_mqtt import VerdictPublisher

    publisher = VerdictPublisher(
        config.mqtt_config,
        create_logger("publisher", level=config.logging_level),
    )
    if not publisher.connect():
        logger.warning(f"MQTT broker {publisher.broker} unavailable, continuing without it")
        return None
    return publisher


def run_service(
    path: Path,
    sink: ValidationSink,
    config: ValidatorConfig,
    validator: BatchValidator,
) -> Optional[BatchSummary]:
    """
    Validate the file on a worker thread; Ctrl+C cancels it.

    Returns:
        BatchSummary, or None if the file could not be read
    """
    try:
        service = ValidatorService.for_file(path, sink, config.columns, validator)
        previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: service.cancel())
        try:
            service.start()
            return service.wait()
        finally:
            signal.signal(signal.SIGINT, previous_handler)
    except (OSError, RecordError) as e:
        validator.logger.error(
            event=LogEvent.INPUT_ERROR,
            message="Failed to process survey file",
            exc_info=e,
        )
        return None


def print_order(args: argparse.Namespace) -> int:
    """Run the `order` subcommand."""
    values = args.values
    corners = [Coordinates(values[i], values[i + 1]) for i in range(0, 8, 2)]
    region = Region(*corners)
    for coordinate in region.coordinates:
        print(coordinate)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gpsval",
        description="GPS sector validator - check survey sectors against their areas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate a survey export
  gpsval validate data/survey.csv

  # With config file and progress lines
  gpsval validate data/survey.csv --config config/validator_config.yaml --progress

  # Mirror verdicts to an MQTT broker
  gpsval validate data/survey.csv --mqtt-broker localhost

  # Show perimeter order of 4 corners (lat lon pairs)
  gpsval order 2 3  0 0  2 0  0 3
"""
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    validate = subparsers.add_parser('validate', help='Validate a survey CSV file')
    validate.add_argument('file', help='Path to survey CSV file')
    validate.add_argument('--config', help='Path to validator config YAML')
    validate.add_argument('--progress', action='store_true', help='Print progress lines')
    validate.add_argument('--log-level', default=None, help='Logging level (default: INFO)')
    validate.add_argument('--log-file', type=Path, default=None, help='Also log to this file')
    validate.add_argument('--mqtt-broker', default=None, help='MQTT broker host')
    validate.add_argument('--mqtt-port', type=int, default=1883, help='MQTT broker port (default: 1883)')
    validate.add_argument('--mqtt-topic', default=None, help='Verdict topic (default: gpsval/verdicts)')

    order = subparsers.add_parser('order', help='Print perimeter order of 4 corners')
    order.add_argument(
        'values', nargs=8, type=float, metavar='DEG',
        help='4 corners as latitude longitude pairs'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_INPUT_ERROR

    try:
        if args.command == 'validate':
            return validate_file(args)
        if args.command == 'order':
            return print_order(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    return EXIT_INPUT_ERROR


if __name__ == '__main__':
    sys.exit(main())

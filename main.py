"""training-log-parser — turn ODK training logs into an action-sequence report."""

import logging
import sys
from argparse import ArgumentParser

from training_log_parser.config import load_config, load_yaml_config
from training_log_parser.pipeline import run

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [PARSER] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser. Every flag is optional."""
    parser = ArgumentParser(
        prog="training-log-parser",
        description="Group training log actions into timed action sequences.",
    )
    parser.add_argument(
        "--config",
        help="Path to YAML config file (default: $CONFIG_PATH, else config.yml)",
    )
    parser.add_argument(
        "--log-folder",
        help="Folder of log files to parse, searched recursively",
    )
    parser.add_argument(
        "--output-folder",
        help="Folder the PARSED_ report is written to",
    )
    parser.add_argument(
        "--combine-day",
        action="store_true",
        help="Append to one report per day instead of one per run",
    )
    parser.add_argument(
        "--reset-between-files",
        action="store_true",
        help="Drop an unfinished action sequence at each new file",
    )
    parser.add_argument(
        "--no-echo",
        action="store_true",
        help="Do not echo matching log lines to stdout",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args, load_yaml_config(args.config))
        logger.info("Config: log_folder=%s, output_folder=%s, %d end-of-flow keyword(s)",
                    config.log_folder, config.output_folder, len(config.end_of_flow))
        run(config)
    except Exception as e:
        print("Error parsing log files.", file=sys.stderr)
        print(e, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(1)

import argparse
import logging
import sys

from . import make_provider
from .config import load_config
from .console import Console
from .errors import SetupError
from .procedure import provision


def build_parser():
    parser = argparse.ArgumentParser(
        prog="s3-website-setup",
        description=(
            "Create and configure an S3 bucket for public static website hosting."
        ),
    )
    parser.add_argument("--bucket", help="Name of the S3 bucket (env: S3_SITE_BUCKET).")
    parser.add_argument("--region", help="AWS region of the bucket (env: AWS_REGION).")
    parser.add_argument(
        "--index-document",
        help="Suffix served for directory requests (default: index.html).",
    )
    parser.add_argument(
        "--error-document",
        help="Key served for errors (default: 404.html).",
    )
    parser.add_argument(
        "--provider",
        help="Backend used to talk to AWS: boto3 or awscli (default: boto3).",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Reconfigure an existing bucket without asking.",
    )
    parser.add_argument(
        "--wait-initial-delay",
        type=float,
        help="Seconds to wait before the first post-creation check (default: 5).",
    )
    parser.add_argument(
        "--wait-backoff",
        type=float,
        help="Multiplier applied to the delay after each miss (default: 2).",
    )
    parser.add_argument(
        "--wait-max-attempts",
        type=int,
        help="Post-creation checks before giving up (default: 4).",
    )
    parser.add_argument(
        "--wait-max-delay",
        type=float,
        help="Upper bound for a single delay in seconds (default: 30).",
    )
    parser.add_argument(
        "--propagation-delay",
        type=float,
        help="Seconds to pause after changing public access settings (default: 3).",
    )
    parser.add_argument(
        "--log-dir",
        help="Directory for AWS CLI output logs (env: S3_SITE_LOG_DIR).",
    )
    parser.add_argument(
        "--no-color", action="store_true", help="Disable coloured output."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    return parser


def _stdin_is_tty() -> bool:
    return sys.stdin is not None and sys.stdin.isatty()


def main(argv=None, console=None, sleep=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    console = console or Console(color=not args.no_color)
    try:
        config = load_config(
            bucket=args.bucket,
            region=args.region,
            index_document=args.index_document,
            error_document=args.error_document,
            provider=args.provider,
            log_dir=args.log_dir,
            assume_yes=args.yes,
            interactive=_stdin_is_tty(),
            wait_initial_delay=args.wait_initial_delay,
            wait_backoff=args.wait_backoff,
            wait_max_attempts=args.wait_max_attempts,
            wait_max_delay=args.wait_max_delay,
            propagation_delay=args.propagation_delay,
        )
        provider = make_provider(config)
    except SetupError as error:
        console.error(str(error))
        return error.exit_code
    kwargs = {} if sleep is None else {"sleep": sleep}
    try:
        result = provision(config, provider, console=console, **kwargs)
    except KeyboardInterrupt:
        console.error("Interrupted")
        return 130
    return result.exit_code


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()

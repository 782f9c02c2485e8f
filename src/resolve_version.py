"""resolve-version - pick a node or yarn release from the binary bucket.

    Prints ``"<version> <url>"`` on success.

    Returns:
        int: Exit code
"""
import logging
import sys

from constants import Constants, ExitCodes
from errors import ConfigError, ResolveVersionError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from buildinfo import BuildInfo, now_ms
from cli_config import build_config
from versioning.models import BinaryKind
from versioning.service import resolve_release

logger = logging.getLogger(__name__)


def _setup_logging(args) -> None:
    """Configure logging from --loglevel / --logfile."""
    configure_logging(getattr(args, "LOG_LEVEL", None))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            raise ConfigError(f"Cannot open log file {log_file}: {e.strerror or e}") from e
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        ))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def _record_buildinfo(path, binary, requirement, start_ms, release) -> None:
    """Append resolution timing and outcome to the build-info log."""
    info = BuildInfo(path)
    info.time(f"{binary}-resolve-time", start_ms)
    info.set(f"{binary}-version-requested", requirement)
    if release is not None:
        info.set(f"{binary}-version-resolved", str(release.version))


def main(argv=None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    if args.BINARY is None or args.REQUIREMENT is None:
        print(Constants.USAGE)
        return ExitCodes.SUCCESS.value

    try:
        _setup_logging(args)
    except ConfigError as e:
        print(e)
        return ExitCodes.RESOLUTION_ERROR.value
    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    kinds = {kind.value: kind for kind in BinaryKind}
    binary_kind = kinds.get(args.BINARY)
    if binary_kind is None:
        print(f"Unsupported binary: {args.BINARY}")
        return ExitCodes.RESOLUTION_ERROR.value

    start = now_ms()
    release = None
    try:
        config = build_config(args, binary_kind)
        release = resolve_release(config)
    except ResolveVersionError as e:
        logger.debug(
            "Resolution failed",
            extra=extra_context(event="function_exit", component="cli", outcome=e.kind)
        )
        print(e)
        return ExitCodes.RESOLUTION_ERROR.value
    finally:
        if getattr(args, "BUILDINFO", None):
            try:
                _record_buildinfo(args.BUILDINFO, args.BINARY, args.REQUIREMENT, start, release)
            except OSError as e:
                logger.warning("Could not write build info to %s: %s", args.BUILDINFO, e)

    print(f"{release.version} {release.download_url}")
    return ExitCodes.SUCCESS.value


def cli() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()

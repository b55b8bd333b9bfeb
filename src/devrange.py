"""devrange - point Composer dependencies at their development branches."""
import json
import logging
import os
import sys

from args import parse_args
from cli_config import apply_cli_overrides, apply_config, load_config
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from registry.composer import (
    ManifestError,
    build_rules,
    default_rules,
    load_requirements,
    resolve_manifest_path,
    select_dev_requirements,
    write_dev_requirements,
)
from registry.release_history import ReleaseHistoryClient, ReleaseHistoryError
from versioning.constraint import to_dev
from versioning.models import TransformMode

logger = logging.getLogger(__name__)


def _setup_logging(args) -> None:
    """Configure logging based on CLI arguments."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ["DEVRANGE_LOG_LEVEL"] = str(args.LOG_LEVEL).upper()
    configure_logging()

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def _parse_cli_rules(raw_rules):
    """Parse PATTERN=MODE strings from --rule.

    Raises:
        ValueError: If a rule is malformed or names an unknown mode.
    """
    pairs = []
    for raw in raw_rules:
        pattern, sep, mode = raw.rpartition("=")
        if not sep or not pattern.strip() or not mode.strip():
            raise ValueError(f"Invalid rule '{raw}', expected PATTERN=MODE")
        pairs.append((pattern.strip(), mode.strip()))
    return build_rules(pairs)


def run_convert(args, out=None) -> int:
    """Print the dev form of each constraint given on the command line."""
    out = out or sys.stdout
    mode = TransformMode.from_name(args.MODE)
    for constraint in args.CONSTRAINTS:
        dev = to_dev(constraint, mode)
        logger.debug("Converted '%s' to '%s' (%s)", constraint, dev, mode.value)
        out.write(dev + "\n")
    return ExitCodes.SUCCESS.value


def run_manifest(args, out=None) -> int:
    """Compute, print and optionally write dev requirements of a manifest."""
    out = out or sys.stdout
    path = resolve_manifest_path(args.MANIFEST)
    try:
        rules = _parse_cli_rules(args.RULES) if args.RULES else default_rules()
    except ValueError as exc:
        logger.error("%s", exc)
        return ExitCodes.USAGE_ERROR.value

    try:
        require = load_requirements(path)
        selected = select_dev_requirements(require, rules)
        if args.WRITE:
            write_dev_requirements(path, selected)
    except ManifestError as exc:
        logger.error("%s", exc)
        return ExitCodes.FILE_ERROR.value

    if is_debug_enabled(logger):
        logger.debug(
            "Manifest processed",
            extra=extra_context(
                event="decision",
                component="cli",
                action="manifest",
                outcome="empty" if not selected else "non_empty",
                count=len(selected),
            ),
        )
    if not selected:
        logger.warning("No requirements in %s matched the selection rules.", path)

    if args.OUTPUT_FORMAT == "json":
        payload = [
            {
                "package": req.package,
                "constraint": req.constraint,
                "dev_constraint": req.dev_constraint,
                "mode": req.mode.value,
            }
            for req in selected
        ]
        out.write(json.dumps(payload, indent=2) + "\n")
    else:
        for req in selected:
            out.write(req.as_dependency() + "\n")
    return ExitCodes.SUCCESS.value


def run_latest(args, out=None) -> int:
    """Print the latest release of a project within a dev range."""
    out = out or sys.stdout
    client = ReleaseHistoryClient(
        base_url=Constants.RELEASE_HISTORY_URL,
        api_version=Constants.RELEASE_HISTORY_API,
        prefix=Constants.RELEASE_CHANNEL_PREFIX,
    )
    try:
        latest = client.get_latest_stable_release(
            args.PROJECT, args.RANGE, stable_only=not args.INCLUDE_UNSTABLE
        )
    except ReleaseHistoryError as exc:
        logger.error("%s", exc)
        return ExitCodes.CONNECTION_ERROR.value

    if latest is None:
        logger.warning("No release of %s found for %s", args.PROJECT, args.RANGE)
        return ExitCodes.NOT_FOUND.value
    out.write(latest + "\n")
    return ExitCodes.SUCCESS.value


_COMMANDS = {
    "convert": run_convert,
    "manifest": run_manifest,
    "latest": run_latest,
}


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    apply_config(load_config(getattr(args, "CONFIG", None)))
    apply_cli_overrides(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.COMMAND)
        )

    sys.exit(_COMMANDS[args.COMMAND](args))


if __name__ == "__main__":
    main()

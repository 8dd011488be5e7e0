"""Command-line interface for trapmail.

``trapmail`` accepts a sendmail-compatible subset of arguments, reads the
message from STDIN and records it in the mail store instead of delivering it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import BinaryIO, TextIO

import structlog

from trapmail import __version__
from trapmail.config import get_settings
from trapmail.exceptions import TrapmailError
from trapmail.models import InvocationOptions, Mail
from trapmail.store import MailStore

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trapmail",
        description="Store mail in a directory instead of sending it",
    )
    parser.add_argument("--debug", action="store_true", help="Non-standard debug output")
    parser.add_argument(
        "-i",
        dest="ignore_dots",
        action="store_true",
        help="Ignore dots alone on lines by themselves in incoming message",
    )
    parser.add_argument(
        "-t",
        dest="inline_recipients",
        action="store_true",
        help="Read message for recipient list",
    )
    parser.add_argument(
        "--dump",
        type=Path,
        default=None,
        help="Ignore everything else and dump the contents of a mail file instead",
    )
    parser.add_argument(
        "--list",
        dest="list_mails",
        action="store_true",
        help="List all mail in the store and exit",
    )
    parser.add_argument("addresses", nargs="*", help="Addresses to send mail to")
    return parser


def read_body(stream: BinaryIO, ignore_dots: bool) -> bytes:
    """Read a message body the way sendmail does.

    Unless ``ignore_dots`` is set, a line consisting of a single dot ends the
    message and is not part of it.
    """
    if ignore_dots:
        return stream.read()

    lines = []
    for line in stream:
        if line.rstrip(b"\r\n") == b".":
            break
        lines.append(line)
    return b"".join(lines)


def format_mail(mail: Mail) -> str:
    """Render a mail for human inspection."""
    options = mail.invocation_options
    body = mail.raw_body.decode("utf-8", errors="replace")
    return (
        f"Timestamp (us): {mail.timestamp_us}\n"
        f"PID: {mail.pid}\n"
        f"PPID: {mail.ppid}\n"
        f"Addresses: {', '.join(options.addresses) or '(none)'}\n"
        f"Flags: debug={options.debug} ignore_dots={options.ignore_dots} "
        f"inline_recipients={options.inline_recipients}\n"
        f"\n{body}"
    )


def _cmd_capture(parsed: argparse.Namespace, stdin: BinaryIO, stderr: TextIO) -> int:
    options = InvocationOptions(
        debug=parsed.debug,
        ignore_dots=parsed.ignore_dots,
        inline_recipients=parsed.inline_recipients,
        addresses=tuple(parsed.addresses),
    )
    raw_body = read_body(stdin, parsed.ignore_dots)

    store = MailStore.from_settings()
    path = store.add(Mail.capture(options, raw_body))
    if parsed.debug:
        print(f"Mail stored at {path}", file=stderr)
    return 0


def _cmd_dump(parsed: argparse.Namespace, stdout: TextIO) -> int:
    mail = Mail.load(parsed.dump)
    print(format_mail(mail), file=stdout)
    return 0


def _cmd_list(stdout: TextIO, stderr: TextIO) -> int:
    store = MailStore.from_settings()
    exit_code = 0
    for result in store.iter_mails():
        if result.mail is None:
            print(f"{result.path.name}\tERROR\t{result.error}", file=stderr)
            exit_code = 1
            continue
        addresses = ", ".join(result.mail.invocation_options.addresses)
        print(f"{result.path.name}\t{addresses}", file=stdout)
    return exit_code


def main(
    args: list[str] | None = None,
    stdin: BinaryIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Main entry point for the trapmail CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.
        stdin: Binary stream the message is read from. Defaults to STDIN.
        stdout: Output for dumps and listings.
        stderr: Output for diagnostics.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]
    stdin = stdin or sys.stdin.buffer
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    settings = get_settings()

    # Configure logging; stdout is reserved for mail output.
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(file=stderr),
    )

    parsed = _build_parser().parse_args(args)
    logger.debug("trapmail_started", version=__version__, store=str(settings.store))

    try:
        if parsed.dump is not None:
            return _cmd_dump(parsed, stdout)
        if parsed.list_mails:
            return _cmd_list(stdout, stderr)
        return _cmd_capture(parsed, stdin, stderr)
    except TrapmailError as exc:
        logger.debug("trapmail_failed", error=str(exc), path=str(exc.path or ""))
        print(f"trapmail: {exc}", file=stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

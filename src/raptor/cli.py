import argparse
import logging
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from raptor.config import RconConfig
from raptor.errors import RconException, UnserializableCommand
from raptor.session import RconSession
from raptor.utils import format_error_message, log_error, log_info, setup_logging

EXIT_WORDS = ("exit", "quit")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="raptor",
        description="Send commands to a Minecraft / Source RCON server.",
    )
    p.add_argument("-H", "--host", help="server host (RCON_HOST)")
    p.add_argument("-p", "--port", type=int, help="server port (RCON_PORT)")
    p.add_argument("-P", "--password", help="RCON password (RCON_PASSWORD)")
    p.add_argument("-t", "--timeout", type=float, help="socket timeout in seconds")
    p.add_argument(
        "--no-multi",
        dest="multi_packet",
        action="store_const",
        const=False,
        help="do not wait for multi-packet responses",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    p.add_argument("command", nargs="*", help="command to run; omit for a console")
    return p


def run_console(session: RconSession, prompt_session: PromptSession | None = None) -> None:
    """Read commands until exit/quit, EOF or Ctrl-C."""
    prompt_session = prompt_session or PromptSession(history=InMemoryHistory())
    while True:
        try:
            line = prompt_session.prompt("> ")
        except (EOFError, KeyboardInterrupt):
            return

        cmd = line.strip()
        if not cmd:
            continue
        if cmd.lower() in EXIT_WORDS:
            return

        try:
            print(session.send_command(cmd))
        except UnserializableCommand as e:
            print(format_error_message(str(e)), file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = RconConfig.from_env()
    except ValueError as e:
        print(format_error_message(f"Invalid configuration: {e}"), file=sys.stderr)
        return 2

    config = config.with_overrides(
        host=args.host,
        port=args.port,
        password=args.password,
        timeout=args.timeout,
        multi_packet=args.multi_packet,
    )
    is_valid, error_message = config.validate()
    if not is_valid:
        print(format_error_message(error_message), file=sys.stderr)
        return 2

    try:
        with RconSession(
            config.host,
            config.port,
            config.password,
            timeout=config.timeout,
            multi_packet=config.multi_packet,
        ) as session:
            log_info("Connect", f"authenticated to {config.host}:{config.port}")
            if args.command:
                print(session.send_command(" ".join(args.command)))
            else:
                run_console(session)
    except RconException as e:
        log_error("RCON", e)
        print(format_error_message(str(e)), file=sys.stderr)
        return 1
    return 0

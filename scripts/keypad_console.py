from __future__ import annotations

import argparse
import logging
import sys
import uuid
from typing import Iterable, List, Protocol, TextIO

from keycalc.services.calculator import CalculatorSession
from keycalc.services.calculator_http import RemoteCalculator, RemoteCalculatorError

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger("keypad_console")


class Keypad(Protocol):
    def press(self, key: str) -> "Keypad": ...

    def screen(self) -> str: ...


def build_keypad(remote: str | None, session_id: str | None, timeout: float = 5.0) -> Keypad:
    if not remote:
        return CalculatorSession()
    session = session_id or f"console-{uuid.uuid4().hex[:8]}"
    logger.info("Driving remote keypad session %s at %s", session, remote)
    return RemoteCalculator(base_url=remote.rstrip("/"), session_id=session, timeout=timeout)


def run_lines(keypad: Keypad, lines: Iterable[str], out: TextIO) -> List[str]:
    """Press every character of each line and print the screen after the line."""
    screens: List[str] = []
    for line in lines:
        for key in line.rstrip("\r\n"):
            keypad.press(key)
        screen = keypad.screen()
        screens.append(screen)
        print(screen, file=out)
    return screens


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Feed typed characters to a keypad calculator one key at a time.")
    parser.add_argument(
        "--keys",
        type=str,
        default=None,
        help="Keys to press instead of reading lines from standard input.",
    )
    parser.add_argument(
        "--remote",
        type=str,
        default=None,
        help="Base URL of a keycalc server; presses are sent to a remote session.",
    )
    parser.add_argument(
        "--session",
        type=str,
        default=None,
        help="Remote session identifier (default: a generated one).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="Timeout in seconds for remote requests.",
    )
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    keypad = build_keypad(args.remote, args.session, timeout=args.timeout)
    lines = [args.keys] if args.keys is not None else sys.stdin
    try:
        run_lines(keypad, lines, sys.stdout)
    except RemoteCalculatorError as exc:
        logger.error("Remote keypad failed: %s", exc.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

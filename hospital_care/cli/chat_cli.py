"""Terminal chat with the HospitalCare assistant.

Usage:
    python -m hospital_care.cli.chat_cli [--directory csv] [-m "find a cardiologist"]
"""

from __future__ import annotations

import argparse
from typing import List, Optional

from hospital_care.chatbot.engine import ChatEngine
from hospital_care.data.directory import load_directory

QUIT_WORDS = ("quit", "exit", "q")


def _print_result(engine: ChatEngine, message: str) -> None:
    result = engine.handle(message)
    print(f"[{result.intent}] {result.response}")


def repl(engine: ChatEngine) -> None:
    print("HospitalCare Assistant (type 'quit' to exit)")
    print()
    print(engine.respond("hello"))

    while True:
        try:
            msg = input("\nYou > ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye!")
            return

        if msg.lower() in QUIT_WORDS:
            print("Goodbye!")
            return
        if msg:
            _print_result(engine, msg)


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Chat with the HospitalCare assistant")
    ap.add_argument(
        "--directory", choices=["memory", "csv", "supabase"],
        help="doctor directory backend (default: $DOCTOR_DIRECTORY or memory)",
    )
    ap.add_argument("-m", "--message", help="classify one message, print the reply and exit")
    args = ap.parse_args(argv)

    engine = ChatEngine(load_directory(args.directory))
    if args.message is not None:
        if not args.message.strip():
            ap.error("message must not be empty")
        _print_result(engine, args.message)
        return
    repl(engine)


if __name__ == "__main__":
    main()

import sys
import os
import time
from typing import List, Optional

from . import printing
from .parser import grammar, main as reader
from .parser.engine import ParseError

MODES = ("term", "rule", "file")

class ReaderConfig:
    def __init__(self, input_path: str, mode: str, debug: bool, timing: bool):
        self.input_path = input_path
        self.mode = mode
        self.debug = debug
        self.timing = timing

    @staticmethod
    def default(input_path: str) -> 'ReaderConfig':
        return ReaderConfig(input_path, mode="file", debug=False, timing=False)

    @staticmethod
    def from_args(args: List[str]) -> Optional['ReaderConfig']:
        if not args:
            return None
        config = ReaderConfig.default(os.path.abspath(args[0]))
        options = set(args[1:])
        config.debug = "debug" in options
        config.timing = "time" in options
        config.mode = next((a for a in args[1:] if a in MODES), config.mode)
        return config

def render(config: ReaderConfig, source: str) -> str:
    if config.mode == "term":
        return printing.show_term(reader.read_term(source))
    if config.mode == "rule":
        rule = reader.read_rule(source)
        return printing.show_rule(rule) if rule is not None else "No rule found."
    return printing.show_file(reader.read_file(source))

def main(argv: Optional[List[str]] = None) -> int:
    config = ReaderConfig.from_args(sys.argv[1:] if argv is None else argv)
    if config is None:
        print("Usage: python -m lamtext <input-file> [term|rule|file] [debug] [time]")
        return 2

    if config.debug:
        grammar.DEBUG_PARSE = True
        print("=== lamtext reader ===")
        print(f"Input: {config.input_path}")
        print(f"Mode: {config.mode}")
        print()

    try:
        with open(config.input_path, 'r', encoding='utf-8') as f:
            source = f.read()
    except OSError as e:
        print(f"Failed to read file: {config.input_path}")
        print(f"Error: {e}")
        return 1

    start = time.time() * 1000
    try:
        output = render(config, source)
    except ParseError as e:
        print(f"Parse error: {e}")
        return 1
    finally:
        grammar.DEBUG_PARSE = False
    end = time.time() * 1000

    print(output)
    if config.timing:
        print(f"Time: {int(end - start)}ms")
    return 0

if __name__ == "__main__":
    sys.exit(main())

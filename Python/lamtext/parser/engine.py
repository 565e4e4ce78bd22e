from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, TypeVar, Any

A = TypeVar('A')

# ======================================
# State & Errors
# ======================================

@dataclass(frozen=True)
class State:
    code: str
    index: int = 0

    def __repr__(self):
        return f"State({self.index}/{len(self.code)})"

class ParseError(Exception):
    def __init__(self, expected: str, state: State):
        self.expected = expected
        self.index = state.index
        self.code = state.code
        line, column = location(state.code, state.index)
        self.line = line
        self.column = column
        super().__init__(f"Expected `{expected}` at line {line}, column {column}")

def location(code: str, index: int) -> Tuple[int, int]:
    line = code.count("\n", 0, index) + 1
    column = index - (code.rfind("\n", 0, index) + 1) + 1
    return line, column

def expected(label: str, state: State):
    raise ParseError(label, state)

# A parser consumes a state and answers (next_state, value)
Parser = Callable[[State], Tuple[State, A]]

# ======================================
# Characters
# ======================================

def head(state: State) -> Optional[str]:
    if state.index < len(state.code):
        return state.code[state.index]
    return None

def tail(state: State) -> State:
    if state.index < len(state.code):
        return State(state.code, state.index + 1)
    return state

def is_name_char(ch: str) -> bool:
    return (ch.isascii() and ch.isalnum()) or ch in "_.$"

def skip_comment(state: State) -> Tuple[State, bool]:
    if state.code.startswith("//", state.index):
        end = state.code.find("\n", state.index)
        return State(state.code, len(state.code) if end < 0 else end), True
    return state, False

def skip_spaces(state: State) -> Tuple[State, bool]:
    idx = state.index
    while idx < len(state.code) and state.code[idx].isspace():
        idx += 1
    return State(state.code, idx), idx != state.index

def skip(state: State) -> Tuple[State, bool]:
    skipped = False
    while True:
        state, spaces = skip_spaces(state)
        state, comment = skip_comment(state)
        if not (spaces or comment):
            return state, skipped
        skipped = True

def get_char(state: State) -> Tuple[State, str]:
    state, _ = skip(state)
    ch = head(state)
    if ch is None:
        return state, "\0"
    return tail(state), ch

# ======================================
# Text & Names
# ======================================

def text_here(pattern: str, state: State) -> Tuple[State, bool]:
    if state.code.startswith(pattern, state.index):
        return State(state.code, state.index + len(pattern)), True
    return state, False

def text(pattern: str, state: State) -> Tuple[State, bool]:
    skipped, _ = skip(state)
    new_state, matched = text_here(pattern, skipped)
    if matched:
        return new_state, True
    return state, False

def text_parser(pattern: str) -> Parser[bool]:
    return lambda state: text(pattern, state)

def consume(pattern: str, state: State) -> Tuple[State, None]:
    new_state, matched = text(pattern, state)
    if not matched:
        skipped, _ = skip(state)
        expected(pattern, skipped)
    return new_state, None

def name(state: State) -> Tuple[State, str]:
    state, _ = skip(state)
    end = state.index
    while end < len(state.code) and is_name_char(state.code[end]):
        end += 1
    return State(state.code, end), state.code[state.index:end]

def name1(state: State) -> Tuple[State, str]:
    new_state, nam = name(state)
    if not nam:
        expected("name", skip(state)[0])
    return new_state, nam

def done(state: State) -> Tuple[State, bool]:
    state, _ = skip(state)
    return state, state.index >= len(state.code)

# ======================================
# Combinators
# ======================================

def guard(predicate: Parser[bool], body: Parser[A], state: State) -> Tuple[State, Optional[A]]:
    """Speculatively checks `predicate`; on success runs `body` from the
    untouched state. A predicate that raises is a refusal, but errors from
    an accepted body propagate."""
    try:
        _, accepted = predicate(state)
    except ParseError:
        accepted = False
    if not accepted:
        return state, None
    return body(state)

def choice(choices: List[Parser[Optional[A]]], state: State) -> Tuple[State, Optional[A]]:
    for alternative in choices:
        new_state, got = alternative(state)
        if got is not None:
            return new_state, got
    return state, None

def grammar(label: str, choices: List[Parser[Optional[A]]], state: State) -> Tuple[State, A]:
    new_state, got = choice(choices, state)
    if got is not None:
        return new_state, got
    skipped, _ = skip(state)
    expected(label, skipped)

def maybe(parser: Parser[A], state: State) -> Tuple[State, Optional[A]]:
    new_state, got = parser(state)
    if got is None or got is False:
        return state, None
    return new_state, got

def until(terminator: Parser[bool], element: Parser[A], state: State) -> Tuple[State, List[A]]:
    results: List[A] = []
    while True:
        new_state, finished = terminator(state)
        if finished:
            return new_state, results
        if done(state)[1]:
            # Only reached when the terminator is a literal that never showed up
            expected(_label_of(terminator), skip(state)[0])
        state, value = element(state)
        results.append(value)

def sequence(open_: str, close: str, element: Parser[A], state: State) -> Tuple[State, List[A]]:
    state, _ = consume(open_, state)
    return until(literal(close), element, state)

def _label_of(terminator: Parser[Any]) -> str:
    return getattr(terminator, "label", "end of sequence")

def literal(pattern: str) -> Parser[bool]:
    """Like `text_parser`, but remembers its pattern for error messages."""
    parser = text_parser(pattern)
    parser.label = pattern  # type: ignore[attr-defined]
    return parser

# ======================================
# Entry
# ======================================

def read(parser: Parser[A], code: str) -> A:
    _, value = parser(State(code, 0))
    return value

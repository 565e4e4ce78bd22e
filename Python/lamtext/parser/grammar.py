from typing import Callable, List, Optional, Tuple
from ..syntax.ast import (
    Term, Var, Dup, Let, Lam, App, Ctr, Num, Op2, Oper, Rule, File,
    U64_MAX, make_list, make_string,
)
from .engine import (
    State, Parser, expected, head, tail, skip, get_char, text, text_here,
    text_parser, literal, consume, name1, done, guard, grammar, choice, maybe,
    until, sequence,
)

DEBUG_PARSE = False

def log(msg: str):
    if DEBUG_PARSE:
        print(f"[PARSE] {msg}")

OP_CHARS = set("+-*/%&|^<>=!")

def guarded(label: str, predicate: Parser[bool], body: Parser[Term]) -> Parser[Optional[Term]]:
    def traced(state: State) -> Tuple[State, Term]:
        log(f"{label} @ {state.index}")
        return body(state)
    def parser(state: State) -> Tuple[State, Optional[Term]]:
        return guard(predicate, traced, state)
    return parser

def char_test(test: Callable[[str], bool]) -> Parser[bool]:
    def predicate(state: State) -> Tuple[State, bool]:
        state, ch = get_char(state)
        return state, test(ch)
    return predicate

def is_upper(ch: str) -> bool: return "A" <= ch <= "Z"
def is_lower(ch: str) -> bool: return "a" <= ch <= "z"
def is_digit(ch: str) -> bool: return "0" <= ch <= "9"

# ======================================
# Binders
# ======================================

def let_body(state: State) -> Tuple[State, Term]:
    state, _ = consume("let ", state)
    state, nam = name1(state)
    state, _ = consume("=", state)
    state, expr = parse_term(state)
    state, _ = consume(";", state)
    state, body = parse_term(state)
    return state, Let(nam, expr, body)

def dup_body(state: State) -> Tuple[State, Term]:
    state, _ = consume("dup ", state)
    state, nam0 = name1(state)
    state, nam1 = name1(state)
    state, _ = consume("=", state)
    state, expr = parse_term(state)
    state, _ = consume(";", state)
    state, body = parse_term(state)
    return state, Dup(nam0, nam1, expr, body)

def lam_head(state: State) -> Tuple[State, bool]:
    new_state, matched = text("λ", state)
    if matched:
        return new_state, True
    return text("@", state)

def lam_body(state: State) -> Tuple[State, Term]:
    state, matched = lam_head(state)
    if not matched:
        expected("λ", skip(state)[0])
    state, nam = name1(state)
    state, body = parse_term(state)
    return state, Lam(nam, body)

# ======================================
# Parenthesized forms
# ======================================

def ctr_head(state: State) -> Tuple[State, bool]:
    state, _ = text("(", state)
    return char_test(is_upper)(state)

def ctr_body(state: State) -> Tuple[State, Term]:
    state, opened = text("(", state)
    state, nam = name1(state)
    args: List[Term] = []
    if opened:
        state, args = until(literal(")"), parse_term, state)
    return state, Ctr(nam, args)

def op2_head(state: State) -> Tuple[State, bool]:
    state, opened = text("(", state)
    state, ch = get_char(state)
    return state, opened and ch in OP_CHARS

def operator(symbol: str) -> Parser[Optional[Oper]]:
    oper = Oper.from_symbol(symbol)
    def parser(state: State) -> Tuple[State, Optional[Oper]]:
        state, matched = text(symbol, state)
        return state, oper if matched else None
    return parser

# Longer symbols come before their prefixes
OPERATORS = [operator(sym) for sym in (
    "+", "-", "*", "/", "%", "&", "|", "^", "<<", ">>", "<=", "<", "==", ">=", ">", "!=",
)]

def parse_oper(state: State) -> Tuple[State, Oper]:
    return grammar("Oper", OPERATORS, state)

def op2_body(state: State) -> Tuple[State, Term]:
    state, _ = consume("(", state)
    state, oper = parse_oper(state)
    state, val0 = parse_term(state)
    state, val1 = parse_term(state)
    state, _ = consume(")", state)
    return state, Op2(oper, val0, val1)

def app_body(state: State) -> Tuple[State, Term]:
    state, terms = sequence("(", ")", parse_term, state)
    if not terms:
        # `()` reads as zero
        return state, Num(0)
    res = terms[0]
    for argm in terms[1:]:
        res = App(res, argm)
    return state, res

# ======================================
# Literals
# ======================================

def num_body(state: State) -> Tuple[State, Term]:
    start, _ = skip(state)
    state, digits = name1(state)
    if not (digits.isascii() and digits.isdigit()) or int(digits) > U64_MAX:
        expected("number", start)
    return state, Num(int(digits))

def chr_body(state: State) -> Tuple[State, Term]:
    state, _ = consume("'", state)
    ch = head(state)
    if ch is None:
        expected("character", state)
    state, closed = text_here("'", tail(state))
    if not closed:
        expected("'", state)
    return state, Num(ord(ch))

def str_body(state: State) -> Tuple[State, Term]:
    state, _ = skip(state)
    delim = head(state)
    code = state.code
    start = state.index + 1
    end = code.find(delim, start)
    if end < 0:
        # Unterminated literals run to the end of input
        return State(code, len(code)), make_string(code[start:])
    return State(code, end + 1), make_string(code[start:end])

def lst_item(state: State) -> Tuple[State, Term]:
    state, term = parse_term(state)
    state, _ = maybe(text_parser(","), state)
    return state, term

def lst_body(state: State) -> Tuple[State, Term]:
    state, _ = consume("[", state)
    state, items = until(literal("]"), lst_item, state)
    return state, make_list(items)

def var_body(state: State) -> Tuple[State, Term]:
    state, nam = name1(state)
    return state, Var(nam)

def parse_nothing(state: State) -> Tuple[State, Optional[Term]]:
    return state, None

# ======================================
# Terms, Rules & Files
# ======================================

parse_let = guarded("let", text_parser("let "), let_body)
parse_dup = guarded("dup", text_parser("dup "), dup_body)
parse_lam = guarded("lam", lam_head, lam_body)
parse_ctr = guarded("ctr", ctr_head, ctr_body)
parse_op2 = guarded("op2", op2_head, op2_body)
parse_app = guarded("app", text_parser("("), app_body)
parse_num = guarded("num", char_test(is_digit), num_body)
parse_chr_sugar = guarded("chr", char_test(lambda ch: ch == "'"), chr_body)
parse_str_sugar = guarded("str", char_test(lambda ch: ch in "\"`"), str_body)
parse_lst_sugar = guarded("lst", char_test(lambda ch: ch == "["), lst_body)
parse_var = guarded("var", char_test(lambda ch: is_lower(ch) or ch in "_$"), var_body)

# Order matters: ctr and op2 must be tried before the generic app
TERM_GRAMMAR: List[Parser[Optional[Term]]] = [
    parse_let,
    parse_dup,
    parse_lam,
    parse_ctr,
    parse_op2,
    parse_app,
    parse_num,
    parse_chr_sugar,
    parse_str_sugar,
    parse_lst_sugar,
    parse_var,
    parse_nothing,
]

def parse_term(state: State) -> Tuple[State, Term]:
    return grammar("Term", TERM_GRAMMAR, state)

def parse_rule(state: State) -> Tuple[State, Optional[Rule]]:
    # No term, or a term without `=`, means there is no rule here
    new_state, lhs = choice(TERM_GRAMMAR, state)
    if lhs is None:
        return state, None
    new_state, matched = text("=", new_state)
    if not matched:
        return state, None
    new_state, rhs = parse_term(new_state)
    return new_state, Rule(lhs, rhs)

def parse_file(state: State) -> Tuple[State, File]:
    rules: List[Rule] = []
    while True:
        state, finished = done(state)
        if finished:
            break
        new_state, rule = parse_rule(state)
        if rule is None:
            expected("definition", state)
        log(f"Read rule {len(rules)} @ {state.index}: {rule}")
        rules.append(rule)
        state = new_state
    return state, File(rules)

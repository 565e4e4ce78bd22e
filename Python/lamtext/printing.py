from typing import List, Optional, Set, Union
from .syntax.ast import (
    Term, Var, Dup, Let, Lam, App, Ctr, Num, Op2, Rule, File,
    CONS, NIL, STR_CONS, STR_NIL,
)

# ======================================
# Sugar recognition
# ======================================

# ids of chain nodes already known not to sugar, so a failed chain is
# scanned once rather than again from every inner node
Rejected = Set[int]

def str_sugar(term: Term, rejected: Optional[Rejected] = None) -> Optional[str]:
    """Renders a StrCons/StrNil chain as a string literal, or None when the
    chain deviates anywhere (names, arities, non-numeric or invalid code
    points, or text that contains both delimiters)."""
    rejected = set() if rejected is None else rejected
    nodes: List[Term] = []
    chars: List[str] = []
    while isinstance(term, Ctr) and id(term) not in rejected:
        if term.name == STR_CONS and len(term.args) == 2:
            code = term.args[0]
            if not isinstance(code, Num) or not is_code_point(code.value):
                break
            nodes.append(term)
            chars.append(chr(code.value))
            term = term.args[1]
        elif term.name == STR_NIL and not term.args:
            content = "".join(chars)
            for delim in "\"`":
                if delim not in content:
                    return delim + content + delim
            # Suffixes starting past the last occurrence of either delimiter still sugar
            last = min(content.rfind("\""), content.rfind("`"))
            rejected.update(id(n) for n in nodes[:last + 1])
            return None
        else:
            break
    rejected.update(id(n) for n in nodes)
    return None

def lst_sugar(term: Term, rejected: Optional[Rejected] = None) -> Optional[List[Term]]:
    rejected = set() if rejected is None else rejected
    nodes: List[Term] = []
    items: List[Term] = []
    while isinstance(term, Ctr) and id(term) not in rejected:
        if term.name == CONS and len(term.args) == 2:
            nodes.append(term)
            items.append(term.args[0])
            term = term.args[1]
        elif term.name == NIL and not term.args:
            return items
        else:
            break
    rejected.update(id(n) for n in nodes)
    return None

def is_code_point(value: int) -> bool:
    return value <= 0x10FFFF and not 0xD800 <= value <= 0xDFFF

# ======================================
# Terms
# ======================================

Piece = Union[str, Term]

def spine(term: App) -> List[Term]:
    args: List[Term] = []
    curr: Term = term
    while isinstance(curr, App):
        args.append(curr.argm)
        curr = curr.func
    args.append(curr)
    args.reverse()
    return args

def separated(open_: str, terms: List[Term], sep: str, close: str) -> List[Piece]:
    pieces: List[Piece] = [open_]
    for i, t in enumerate(terms):
        if i > 0: pieces.append(sep)
        pieces.append(t)
    pieces.append(close)
    return pieces

def pieces_of(term: Term, rejected: Rejected) -> List[Piece]:
    if isinstance(term, Var): return [term.name]
    if isinstance(term, Num): return [str(term.value)]
    if isinstance(term, Dup):
        return ["dup ", term.nam0, " ", term.nam1, " = ", term.expr, "; ", term.body]
    if isinstance(term, Let):
        return ["let ", term.name, " = ", term.expr, "; ", term.body]
    if isinstance(term, Lam):
        return ["λ", term.name, " ", term.body]
    if isinstance(term, App):
        return separated("(", spine(term), " ", ")")
    if isinstance(term, Op2):
        return ["(", term.oper.symbol, " ", term.val0, " ", term.val1, ")"]
    if isinstance(term, Ctr):
        text = str_sugar(term, rejected)
        if text is not None:
            return [text]
        items = lst_sugar(term, rejected)
        if items is not None:
            return separated("[", items, ", ", "]")
        pieces: List[Piece] = ["(", term.name]
        for arg in term.args:
            pieces.extend((" ", arg))
        pieces.append(")")
        return pieces
    raise TypeError(f"Cannot show {term!r}")

def show_term(term: Term) -> str:
    out: List[str] = []
    rejected: Rejected = set()
    stack: List[Piece] = [term]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
        else:
            stack.extend(reversed(pieces_of(item, rejected)))
    return "".join(out)

# ======================================
# Rules & Files
# ======================================

def show_rule(rule: Rule) -> str:
    return f"{show_term(rule.lhs)} = {show_term(rule.rhs)}"

def show_file(file: File) -> str:
    return "\n".join(show_rule(r) for r in file.rules)

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Iterable

U64_MAX = 2 ** 64 - 1

# Constructor names produced by list and string sugar
CONS = "Cons"
NIL = "Nil"
STR_CONS = "StrCons"
STR_NIL = "StrNil"

# ======================================
# Operators
# ======================================

class Oper(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    AND = "&"
    OR = "|"
    XOR = "^"
    SHL = "<<"
    SHR = ">>"
    LTE = "<="
    LTN = "<"
    EQL = "=="
    GTE = ">="
    GTN = ">"
    NEQ = "!="

    @property
    def symbol(self) -> str:
        return self.value

    @staticmethod
    def from_symbol(symbol: str) -> 'Oper':
        return Oper(symbol)

    def __str__(self): return self.value

# ======================================
# Terms
# ======================================

class Term:
    def __str__(self):
        from ..printing import show_term
        return show_term(self)

@dataclass(eq=True)
class Var(Term):
    name: str
    def __repr__(self): return f"Var({self.name})"

@dataclass(eq=True)
class Dup(Term):
    nam0: str
    nam1: str
    expr: Term
    body: Term
    def __repr__(self): return f"Dup({self.nam0}, {self.nam1}, {self.expr!r}, {self.body!r})"

@dataclass(eq=True)
class Let(Term):
    name: str
    expr: Term
    body: Term
    def __repr__(self): return f"Let({self.name}, {self.expr!r}, {self.body!r})"

@dataclass(eq=True)
class Lam(Term):
    name: str
    body: Term
    def __repr__(self): return f"Lam({self.name}, {self.body!r})"

@dataclass(eq=True)
class App(Term):
    func: Term
    argm: Term
    def __repr__(self): return f"App({self.func!r}, {self.argm!r})"

@dataclass(eq=True)
class Ctr(Term):
    name: str
    args: List[Term] = field(default_factory=list)
    def __repr__(self): return f"Ctr({self.name}, {self.args!r})"

@dataclass(eq=True)
class Num(Term):
    value: int
    def __post_init__(self):
        if not 0 <= self.value <= U64_MAX:
            raise ValueError(f"Num out of 64-bit range: {self.value}")
    def __repr__(self): return f"Num({self.value})"

@dataclass(eq=True)
class Op2(Term):
    oper: Oper
    val0: Term
    val1: Term
    def __repr__(self): return f"Op2({self.oper.name}, {self.val0!r}, {self.val1!r})"

# ======================================
# Rules & Files
# ======================================

@dataclass
class Rule:
    lhs: Term
    rhs: Term
    def __str__(self):
        from ..printing import show_rule
        return show_rule(self)

@dataclass
class File:
    rules: List[Rule] = field(default_factory=list)
    def __str__(self):
        from ..printing import show_file
        return show_file(self)

# ======================================
# Sugar builders
# ======================================

def make_list(items: Iterable[Term]) -> Term:
    res: Term = Ctr(NIL, [])
    for item in reversed(list(items)):
        res = Ctr(CONS, [item, res])
    return res

def make_string(text: str) -> Term:
    res: Term = Ctr(STR_NIL, [])
    for ch in reversed(text):
        res = Ctr(STR_CONS, [Num(ord(ch)), res])
    return res

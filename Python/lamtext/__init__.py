from .syntax.ast import Term, Var, Dup, Let, Lam, App, Ctr, Num, Op2, Oper, Rule, File
from .parser import ParseError, read_term, read_rule, read_file
from .printing import show_term, show_rule, show_file

__all__ = [
    "Term", "Var", "Dup", "Let", "Lam", "App", "Ctr", "Num", "Op2", "Oper",
    "Rule", "File",
    "ParseError", "read_term", "read_rule", "read_file",
    "show_term", "show_rule", "show_file",
]

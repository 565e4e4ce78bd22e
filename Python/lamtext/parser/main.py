from typing import Optional
from ..syntax.ast import Term, Rule, File
from .engine import read
from .grammar import parse_term, parse_rule, parse_file

def read_term(code: str) -> Term:
    return read(parse_term, code)

def read_rule(code: str) -> Optional[Rule]:
    return read(parse_rule, code)

def read_file(code: str) -> File:
    return read(parse_file, code)

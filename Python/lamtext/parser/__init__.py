from .engine import State, ParseError
from .main import read_term, read_rule, read_file
from . import grammar

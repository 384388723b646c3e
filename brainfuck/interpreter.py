"""Brainfuck interpreter.

Basic program flow:
    1. Tokenizer: every byte of the source becomes a Token (see brainfuck/pure/lexical.py)
    2. Parser: tokens are parsed into a SyntaxTree, checking that brackets match (see brainfuck/pure/syntax.py)
        - This is the only place a brainfuck program can fail
    3. Execution: the SyntaxTree is walked against a MemoryTape (see brainfuck/pure/execution.py)

An Interpreter owns one MemoryTape and one SyntaxTree. Code can be fed to it in several fragments: each fragment is
parsed on its own and appended to the program, and execute runs the whole program from the start.
"""

from brainfuck.pure.execution import DEFAULT_CAPACITY, Evaluator, MemoryTape
from brainfuck.pure.syntax import SyntaxTree, parse_source


class Interpreter:
    """A brainfuck interpreter, with its own memory. stdin/stdout default to the process' binary standard streams."""

    def __init__(self, capacity=None, stdin=None, stdout=None, strict_input=False):
        self.memory = MemoryTape(DEFAULT_CAPACITY if capacity is None else capacity)
        self.evaluator = Evaluator(self.memory, stdin, stdout, strict_input)
        self.instructions = SyntaxTree()

    @property
    def syntax_tree(self):
        return self.instructions

    def feed(self, source):
        """Parses source (bytes or str) and appends it to the program. If source is not valid brainfuck, a
        BadExpressionError is raised and the program is left untouched.
        """
        self.instructions += parse_source(source)

    def clear(self):
        """Forgets the program. Memory is kept."""
        self.instructions = SyntaxTree()

    def execute(self):
        """Runs the whole program once."""
        self.evaluator.run(self.instructions)


def evaluate(source, stdin=None, stdout=None):
    """Runs source on a fresh Interpreter with default memory."""
    interpreter = Interpreter(stdin=stdin, stdout=stdout)
    interpreter.feed(source)
    interpreter.execute()

"""Brainfuck syntax tree generator and parser.

Formally, a brainfuck program (after tokenization and once comments are dropped) can be defined as

```
<program>    ::= <expression>*
<expression> ::= ">" | "<" | "+" | "-" | "," | "."   ; leaf expressions
               | "[" <expression>* "]"             ; "loop", the only nonterminal
```

Brackets must match: a "[" that is never closed and a "]" that was never opened are the only two syntax errors. All
other runtime errors are impossible once a SyntaxTree has been built.

Parsing is a single left-to-right pass over the tokens. Instead of recursing into every loop body, the parser keeps
an explicit stack of the loop bodies that are currently open, so nesting depth is only bounded by memory.
"""

from brainfuck.lang.error import GenericException
from brainfuck.pure import lexical


class Expression:
    """Superclass of every node in a SyntaxTree. Leaf expressions have no nodes; Loops own their nodes. Expressions are
    immutable, so their hash is computed once on construction from the (already cached) hashes of their nodes.
    """
    SYMBOL = ""

    def __init__(self):
        self._cls = type(self).__name__
        self.nodes = ()
        self._hash = hash((self._cls, ()))

    def display(self, indents=0):
        """Displays Expression tree with readable format.

        Format:
        <Expression>(nodes=[
            <Expression>(nodes=[
                ...
                <Expression>()  # <-- if nodes is empty
            ])
        ])
        """
        return _display((self,), indents)

    def __repr__(self):
        return _repr((self,))

    def __str__(self):
        return _source((self,))

    def __eq__(self, other):
        return type(other) is type(self) and other._hash == self._hash and _nodes_equal(self.nodes, other.nodes)

    def __hash__(self):
        return self._hash


class Forward(Expression):
    SYMBOL = ">"


class Backward(Expression):
    SYMBOL = "<"


class Increment(Expression):
    SYMBOL = "+"


class Decrement(Expression):
    SYMBOL = "-"


class Input(Expression):
    SYMBOL = ","


class Output(Expression):
    SYMBOL = "."


class Loop(Expression):
    """Repeats its nodes while the current cell is not zero."""

    def __init__(self, nodes=()):
        super().__init__()
        self.nodes = tuple(nodes)
        self._hash = hash((self._cls, tuple(hash(node) for node in self.nodes)))


def walk(nodes):
    """Iterates depth-first over nodes without recursing, yielding (event, node, depth) tuples. event is "leaf" for
    leaf expressions; every Loop yields an "open" before its nodes and a "close" after them. Top-level nodes have depth
    0.
    """
    stack = [(iter(nodes), None)]
    while stack:
        nodes_iter, loop = stack[-1]
        node = next(nodes_iter, None)
        if node is None:
            stack.pop()
            if loop is not None:
                yield "close", loop, len(stack) - 1
        elif isinstance(node, Loop):
            yield "open", node, len(stack) - 1
            stack.append((iter(node.nodes), node))
        else:
            yield "leaf", node, len(stack) - 1


def _nodes_equal(nodes, other_nodes):
    pairs = [(nodes, other_nodes)]
    while pairs:
        nodes, other_nodes = pairs.pop()
        if len(nodes) != len(other_nodes):
            return False
        for node, other in zip(nodes, other_nodes):
            if type(node) is not type(other) or node._hash != other._hash:
                return False
            if node.nodes is not other.nodes:
                pairs.append((node.nodes, other.nodes))
    return True


def _source(nodes):
    pieces = []
    for event, node, __ in walk(nodes):
        pieces.append("[" if event == "open" else "]" if event == "close" else node.SYMBOL)
    return "".join(pieces)


def _repr(nodes):
    pieces = []
    prev = None
    for event, node, __ in walk(nodes):
        if event != "close" and prev in ("leaf", "close"):
            pieces.append(", ")
        if event == "open":
            pieces.append(f"{node._cls}([")
        elif event == "close":
            pieces.append("])")
        else:
            pieces.append(f"{node._cls}()")
        prev = event
    return "".join(pieces)


def _display(nodes, indents=0):
    lines = []
    prev = None
    for event, node, depth in walk(nodes):
        pad = "    " * (indents + depth)
        if event != "close" and prev in ("leaf", "close") and depth > 0:
            lines[-1] += ","

        if event == "close":
            if node.nodes:
                lines.append(f"{pad}])")
        elif event == "open" and node.nodes:
            lines.append(f"{pad}{node._cls}(nodes=[")
        else:
            lines.append(f"{pad}{node._cls}()")
        prev = event
    return "\n".join(lines)


LEAVES = {
    lexical.MoveRight: Forward(),
    lexical.MoveLeft: Backward(),
    lexical.Increment: Increment(),
    lexical.Decrement: Decrement(),
    lexical.ReadByte: Input(),
    lexical.WriteByte: Output(),
}


class BadExpressionError(GenericException):
    """Syntactic error while parsing brainfuck code. position is the byte offset of the offending bracket in the
    parsed source; line_num and start locate it within its line for diagnosis.
    """
    MSG = ""

    def __init__(self, source, position):
        if isinstance(source, str):
            source = source.encode("utf-8")

        line_start = source.rfind(b"\n", 0, position) + 1
        line_end = source.find(b"\n", position)
        if line_end == -1:
            line_end = len(source)

        line = source[line_start:line_end].decode("utf-8", errors="replace").rstrip("\r")
        start = len(source[line_start:position].decode("utf-8", errors="replace"))
        line_num = source.count(b"\n", 0, position) + 1

        super().__init__(self.MSG, line, start=start, end=start + 1, line_num=line_num)
        self.position = position


class LoopNotClosed(BadExpressionError):
    MSG = "'[' was never closed"


class LoopNotOpened(BadExpressionError):
    MSG = "unmatched ']' symbol"


class SyntaxTree:
    """An ordered sequence of top-level Expressions, representing a fully parsed and valid brainfuck program. Trees are
    immutable: merging with + (or +=) builds a new tree, so a tree's hash never changes.
    """

    def __init__(self, nodes=()):
        self.nodes = tuple(nodes)
        self._hash = hash(self.nodes)

    @property
    def depth(self):
        """Deepest loop nesting in this tree (0 if there are no loops)."""
        return max((depth + 1 for event, __, depth in walk(self.nodes) if event == "open"), default=0)

    def display(self):
        """Displays every top-level Expression, see Expression.display."""
        return _display(self.nodes)

    def __add__(self, other):
        if not isinstance(other, SyntaxTree):
            return NotImplemented
        return SyntaxTree(self.nodes + other.nodes)

    def __len__(self):
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    def __getitem__(self, idx):
        return self.nodes[idx]

    def __repr__(self):
        return f"SyntaxTree([{_repr(self.nodes)}])"

    def __str__(self):
        return _source(self.nodes)

    def __eq__(self, other):
        return isinstance(other, SyntaxTree) and other._hash == self._hash and _nodes_equal(self.nodes, other.nodes)

    def __hash__(self):
        return self._hash


def parse(tokens):
    """Parses an iterable of Tokens into a SyntaxTree. Raises LoopNotOpened on a ']' without an open '[', and
    LoopNotClosed if the tokens run out while a '[' is still open. Comments produce no Expression.
    """
    tokens = list(tokens)

    bodies = [[]]  # bodies[0] is the top level, bodies[-1] is the innermost open loop
    opened = []    # position of the '[' of every open loop
    for position, token in enumerate(tokens):
        token_cls = type(token)

        if token_cls in LEAVES:
            bodies[-1].append(LEAVES[token_cls])
        elif token_cls is lexical.LoopStart:
            bodies.append([])
            opened.append(position)
        elif token_cls is lexical.LoopEnd:
            if not opened:
                raise LoopNotOpened(_token_bytes(tokens), position)
            opened.pop()
            body = bodies.pop()
            bodies[-1].append(Loop(body))
        # anything else is a Comment

    if opened:
        raise LoopNotClosed(_token_bytes(tokens), opened[-1])

    return SyntaxTree(bodies[0])


def parse_source(source):
    """Tokenizes and parses source (bytes or str)."""
    return parse(lexical.tokenize_source(source))


def _token_bytes(tokens):
    """Rebuilds the source bytes of a token stream, used for error diagnosis."""
    return bytes(token.byte for token in tokens)

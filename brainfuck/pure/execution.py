"""Brainfuck execution: the memory tape and the evaluator that walks a SyntaxTree against it.

The tape is a ring: moving right from the last cell lands on the first one and vice versa. Cells hold a single byte
and wrap on overflow/underflow. Reading past the end of the input leaves the current cell unchanged.
"""

import sys

from brainfuck.lang.error import GenericException
from brainfuck.pure.syntax import Backward, Decrement, Forward, Increment, Input, Loop, Output


DEFAULT_CAPACITY = 32_768  # cells


class InputExhausted(GenericException):
    """Raised by a strict Evaluator when ',' is executed and no input is left."""

    def __init__(self):
        super().__init__("',' executed with no input left", diagnosis=False)


class MemoryTape:
    """Fixed-size ring of byte cells plus a cursor, the only mutable state of a running brainfuck program."""

    def __init__(self, capacity=DEFAULT_CAPACITY):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise GenericException("memory capacity must be a positive integer, got '{}'", str(capacity),
                                   diagnosis=False)

        self.memory = bytearray(capacity)
        self.cursor = capacity // 2

    def move_forward(self):
        self.cursor = (self.cursor + 1) % len(self.memory)

    def move_backward(self):
        self.cursor = (self.cursor - 1 + len(self.memory)) % len(self.memory)

    def get(self):
        return self.memory[self.cursor]

    def set(self, value):
        self.memory[self.cursor] = value % 256

    def increment(self):
        self.set(self.get() + 1)

    def decrement(self):
        self.set(self.get() - 1)

    def reset(self):
        """Zeroes every cell and moves the cursor back to where it started."""
        self.memory = bytearray(len(self.memory))
        self.cursor = len(self.memory) // 2

    @property
    def cells(self):
        """Snapshot of the tape."""
        return bytes(self.memory)

    def __len__(self):
        return len(self.memory)

    def __repr__(self):
        return f"MemoryTape(capacity={len(self.memory)}, cursor={self.cursor})"


class Evaluator:
    """Walks SyntaxTrees depth-first against a MemoryTape. stdin must provide read(n) -> bytes and stdout must provide
    write(bytes) and flush(); both default to the process' binary standard streams. If strict_input, reading past the
    end of stdin raises InputExhausted instead of leaving the cell unchanged.
    """

    def __init__(self, memory, stdin=None, stdout=None, strict_input=False):
        self.memory = memory
        self.stdin = stdin
        self.stdout = stdout
        self.strict_input = strict_input

        self._leaves = {
            Forward: self.memory.move_forward,
            Backward: self.memory.move_backward,
            Increment: self.memory.increment,
            Decrement: self.memory.decrement,
            Input: self.read_byte,
            Output: self.write_byte,
        }

    def read_byte(self):
        """Reads exactly one byte into the current cell. A read error counts as end of input."""
        stdin = self.stdin if self.stdin is not None else sys.stdin.buffer
        try:
            byte = stdin.read(1)
        except OSError:
            byte = b""

        if byte:
            self.memory.set(byte[0])
        elif self.strict_input:
            raise InputExhausted()

    def write_byte(self):
        """Writes the current cell and flushes, so interactive programs see output before their next read."""
        stdout = self.stdout if self.stdout is not None else sys.stdout.buffer
        stdout.write(bytes([self.memory.get()]))
        stdout.flush()

    def run(self, nodes):
        """Executes nodes (a SyntaxTree or any sequence of Expressions) in order. Loop bodies are pushed on an explicit
        stack of [nodes, next index, is loop body] frames; a loop body frame restarts while the current cell is not
        zero.
        """
        memory = self.memory
        leaves = self._leaves

        stack = [[nodes, 0, False]]
        while stack:
            frame = stack[-1]
            frame_nodes, idx, is_loop = frame

            if idx == len(frame_nodes):
                if is_loop and memory.get() != 0:
                    frame[1] = 0
                else:
                    stack.pop()
                continue

            frame[1] = idx + 1
            expr = frame_nodes[idx]
            if isinstance(expr, Loop):
                if memory.get() != 0:
                    stack.append([expr.nodes, 0, True])
            else:
                leaves[type(expr)]()


def execute(tree, memory, stdin=None, stdout=None, strict_input=False):
    """Executes tree against memory. See Evaluator."""
    Evaluator(memory, stdin, stdout, strict_input).run(tree)

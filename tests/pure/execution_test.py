import io
import unittest

from brainfuck.lang.error import GenericException
from brainfuck.pure.execution import DEFAULT_CAPACITY, Evaluator, InputExhausted, MemoryTape, execute
from brainfuck.pure.syntax import parse_source


HELLO_WORLD = ("++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+."
               ">++.")


class FlushCountingStream(io.BytesIO):

    def __init__(self):
        super().__init__()
        self.flushes = 0

    def flush(self):
        self.flushes += 1
        super().flush()


class BrokenStream:

    def read(self, size=-1):
        raise OSError("stream is broken")


def tiny_memory():
    return MemoryTape(6)


def run(source, memory=None, stdin=b"", strict_input=False):
    """Runs source and returns (memory, output)."""
    if memory is None:
        memory = MemoryTape()
    stdout = io.BytesIO()
    execute(parse_source(source), memory, io.BytesIO(stdin), stdout, strict_input)
    return memory, stdout.getvalue()


class MemoryTapeTestCase(unittest.TestCase):

    def test_capacity(self):
        self.assertEqual(DEFAULT_CAPACITY, len(MemoryTape()))
        self.assertEqual(32_768, DEFAULT_CAPACITY)
        self.assertEqual(bytes(DEFAULT_CAPACITY), MemoryTape().cells)

        should_raise = [0, -1, 2.5, "10", None, False]
        for case in should_raise:
            self.assertRaises(GenericException, MemoryTape, case)

        m = MemoryTape(1)
        m.move_forward()
        m.move_backward()
        self.assertEqual(0, m.cursor)

    def test_pointer_movement(self):
        m = tiny_memory()
        self.assertEqual(3, m.cursor)

        m.move_backward()
        self.assertEqual(2, m.cursor)

        m.move_forward()
        m.move_forward()
        m.move_forward()
        self.assertEqual(5, m.cursor)

        m.move_forward()
        self.assertEqual(0, m.cursor)

        m.move_backward()
        self.assertEqual(5, m.cursor)

    def test_ring(self):
        for capacity in [1, 2, 6, 17]:
            m = MemoryTape(capacity)
            for start in range(capacity):
                m.cursor = start
                for __ in range(capacity):
                    m.move_forward()
                self.assertEqual(start, m.cursor, (capacity, start))

                for __ in range(capacity):
                    m.move_backward()
                self.assertEqual(start, m.cursor, (capacity, start))

    def test_wraps_on_increment_or_decrement(self):
        m = tiny_memory()

        m.set(255)
        self.assertEqual(255, m.get())

        m.increment()
        self.assertEqual(0, m.get())

        m.decrement()
        self.assertEqual(255, m.get())

        m.set(256 + 7)
        self.assertEqual(7, m.get())

    def test_reset(self):
        m = tiny_memory()
        m.increment()
        m.move_forward()
        m.reset()

        self.assertEqual(3, m.cursor)
        self.assertEqual(bytes(6), m.cells)


class ExecuteTestCase(unittest.TestCase):

    def test_execute_expression(self):
        m, __ = run("++>--<<<++[>+++<-]+++<+<---", tiny_memory())
        self.assertEqual(bytes([1, 3, 6, 2, 255 - 1, 255 - 2]), m.cells)

    def test_tape_wraps_during_execution(self):
        m, __ = run(">>>+<<<<-", tiny_memory())
        self.assertEqual(bytes([1, 0, 255, 0, 0, 0]), m.cells)
        self.assertEqual(2, m.cursor)

    def test_hello_world(self):
        __, output = run(HELLO_WORLD)
        self.assertEqual(b"Hello World!\n", output)

    def test_loop_on_zero_never_runs(self):
        cases = ["[.]", "[-][.+.]", "+++[-][>+++++.<]", "[[[.]]]"]
        for case in cases:
            m, output = run(case, tiny_memory())
            self.assertEqual(b"", output, case)
            self.assertEqual(bytes(6), m.cells, case)

    def test_loop_checks_before_each_iteration(self):
        __, output = run("+++[.-]")
        self.assertEqual(bytes([3, 2, 1]), output)

    def test_output_flushes_every_byte(self):
        stdout = FlushCountingStream()
        execute(parse_source("+.+.+."), MemoryTape(), io.BytesIO(), stdout)
        self.assertEqual(bytes([1, 2, 3]), stdout.getvalue())
        self.assertEqual(3, stdout.flushes)

    def test_input(self):
        cases = {
            b"ab": b"ab",
            b"a": b"aa",   # second ',' has no input left, so the cell keeps 'a'
            b"": b"\x00\x00",
        }
        for stdin, expected in cases.items():
            __, output = run(",.,.", stdin=stdin)
            self.assertEqual(expected, output, stdin)

    def test_input_error_is_end_of_input(self):
        m = MemoryTape()
        m.set(42)
        stdout = io.BytesIO()
        execute(parse_source(",."), m, BrokenStream(), stdout)
        self.assertEqual(bytes([42]), stdout.getvalue())

    def test_strict_input(self):
        __, output = run(",.", stdin=b"x", strict_input=True)
        self.assertEqual(b"x", output)

        self.assertRaises(InputExhausted, run, ",.,.", stdin=b"x", strict_input=True)
        self.assertRaises(GenericException, run, ",", strict_input=True)

    def test_rerun_keeps_memory(self):
        m = tiny_memory()
        evaluator = Evaluator(m, io.BytesIO(), io.BytesIO())
        tree = parse_source("+>")
        evaluator.run(tree)
        evaluator.run(tree)
        self.assertEqual(bytes([0, 0, 0, 1, 1, 0]), m.cells)
        self.assertEqual(5, m.cursor)

    def test_deep_nesting(self):
        depth = 5000
        m, output = run("+" + "[" * depth + "." + "-" + "]" * depth)
        self.assertEqual(b"\x01", output)
        self.assertEqual(0, m.get())


if __name__ == '__main__':
    unittest.main()

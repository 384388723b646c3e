"""Handles interactive/command-line mode for the brainfuck interpreter. Uses cmd as backend."""

import cmd

from termcolor import colored

from brainfuck.pure.lexical import SYMBOLS


class Shell(cmd.Cmd):
    """Brainfuck interpreter shell."""
    intro = "Brainfuck interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continutations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations
    memory_window = 8        # cells shown on each side of the cursor by 'memory'
    instructions = {chr(byte) for byte in SYMBOLS}

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self._start_line = 0  # line num where the pending line started
        self.line_num = 0

    def parseline(self, line):
        """A line is only a shell command if it has no brainfuck instructions and no loop is waiting to be closed.
        Otherwise words like 'reset' or 'exit' are just comments in the code.
        """
        command, arg, line = super().parseline(line)
        if line == "EOF":
            return command, arg, line
        if self._tmp_line or any(char in self.instructions for char in line):
            return None, None, line
        return command, arg, line

    def default(self, line):
        """Executes arbitrary brainfuck code."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self._start_line = self.line_num

            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                self.sess.add(line, self._start_line)
                self.sess.run()

    def do_memory(self, arg):
        """Shows the cursor and the cells around it."""
        memory = self.sess.interpreter.memory
        first = max(memory.cursor - self.memory_window, 0)
        last = min(memory.cursor + self.memory_window + 1, len(memory))

        cells = []
        for idx in range(first, last):
            cell = f"{memory.memory[idx]:3d}"
            if idx == memory.cursor:
                cell = colored(cell, attrs=["bold", "reverse"])
            cells.append(cell)

        self.stdout.write(f"cursor: {memory.cursor}\n")
        self.stdout.write(f"[{first}..{last - 1}] " + " ".join(cells) + "\n")

    def do_reset(self, arg):
        """Zeroes memory and moves the cursor back to the middle of the tape."""
        self.sess.interpreter.memory.reset()

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        self.stdout.write("Welcome to the brainfuck interpreter!\n\n"
                          "Brainfuck has eight instructions: '>' and '<' move the cursor, '+' and '-' \n"
                          "change the current cell, ',' reads a byte into it, '.' writes it out, and \n"
                          "'[' ... ']' loops while the current cell is not zero. Everything else is a \n"
                          "comment.\n\n"
                          "Every line runs as soon as its loops are closed, and memory is kept between \n"
                          "lines. Try '++++++++[>++++++++<-]>+.' to print 'A'. Type 'memory' to look \n"
                          "at the tape, 'reset' to clear it and 'exit' to quit.\n")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True

"""Session control for the brainfuck interpreter. Feeds source files, or lines typed in command-line mode, to an
Interpreter while keeping the error handler's traceback up to date.
"""

from brainfuck.interpreter import Interpreter
from brainfuck.lang.error import GenericException


class Session:
    """Governs a brainfuck session: one Interpreter (so one memory tape) for the whole file or shell."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, capacity=None, cmd_line=False, stdin=None, stdout=None,
                 strict_input=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.interpreter = Interpreter(capacity, stdin, stdout, strict_input)

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "rb") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            self.add(source, 1)
            if not self.interpreter.syntax_tree:
                self.error_handler.warn("'{}' contains no instructions", path, diagnosis=False)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, prev=""):
        """Preprocesses a line from the command-line. prev is the pending line, if the previous line(s) opened a loop
        that wasn't closed yet. Returns the updated line and whether or not a line continuation is necessary.
        """
        if prev:
            line = prev + "\n" + line
        return line, line.count("[") > line.count("]")

    def add(self, source, line_num):
        """Adds source to the current session. Nothing runs until run is called."""
        self.error_handler.register_line(self.path, source, line_num)  # in case error is raised
        self.interpreter.feed(source)
        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Runs this session's program. In command-line mode the program is forgotten afterwards, so every line only
        runs once, but memory carries over to the next line.
        """
        try:
            self.interpreter.execute()
        finally:
            if self.cmd_line:
                self.interpreter.clear()

# ==========================================
# CONSOLE
# ==========================================

class _ConsoleWriter:
    """Writes to a sys stream, looked up on every call."""

    def __init__(self, stream_name):
        self._stream_name = stream_name

    def _stream(self):
        return getattr(sys, self._stream_name)

    def Write(self, value="", *args):
        text = _cs_format(value, args) if args else _cs_str(value)
        self._stream().write(text)

    def WriteLine(self, value="", *args):
        self.Write(value, *args)
        self._stream().write("\n")

    def Flush(self):
        self._stream().flush()


class Console:
    """Standard input/output for scripts."""
    Out = _ConsoleWriter("stdout")
    Error = _ConsoleWriter("stderr")

    @staticmethod
    def Write(value="", *args):
        Console.Out.Write(value, *args)

    @staticmethod
    def WriteLine(value="", *args):
        Console.Out.WriteLine(value, *args)

    @staticmethod
    def ReadLine():
        """Next line of standard input without its newline, or None at end of input."""
        line = sys.stdin.readline()
        if line == "":
            return None
        return line.rstrip("\n")

# ==========================================
# RESULT VALUES: Ok / Err
# ==========================================
"""
Result values passed from each stage up to the top-level dispatcher.

An ``Err`` carries the lines to print on stderr; the dispatcher decides the
exit status, so no component touches the process state directly.
"""


class Result:
    """Base class for Ok and Err."""

    def is_ok(self) -> bool:
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        return isinstance(self, Err)

    def unwrap(self):
        """Get value or raise error."""
        if isinstance(self, Ok):
            return self.value
        raise RuntimeError("Called unwrap() on Err: " + "; ".join(self.messages))


class Ok(Result):
    """Success case."""

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"Ok({self.value!r})"


class Err(Result):
    """Failure case with one or more messages for the error stream."""

    def __init__(self, messages):
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)

    def __repr__(self):
        return f"Err({self.messages!r})"

    def __str__(self):
        return "\n".join(self.messages)

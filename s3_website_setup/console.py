import os
import sys

RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
NC = "\033[0m"


def _is_terminal(stream) -> bool:
    return hasattr(stream, "isatty") and stream.isatty()


class Console:
    """
    Colour-coded status lines for the operator.

    Colours are only emitted when enabled, NO_COLOR is unset and the
    stream being written to is a terminal. stdout and stderr are judged
    separately.
    """

    def __init__(self, out=None, err=None, color: bool = True, input_func=input):
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        enabled = color and "NO_COLOR" not in os.environ
        self.out_color = enabled and _is_terminal(self.out)
        self.err_color = enabled and _is_terminal(self.err)
        self.input_func = input_func

    def _paint(self, code: str, text: str, color: bool) -> str:
        if not color:
            return text
        return f"{code}{text}{NC}"

    def info(self, text: str = ""):
        print(text, file=self.out)

    def success(self, text: str):
        print(self._paint(GREEN, f"✓ {text}", self.out_color), file=self.out)

    def warning(self, text: str):
        print(self._paint(YELLOW, f"⚠ {text}", self.out_color), file=self.out)

    def error(self, text: str):
        print(self._paint(RED, f"ERROR: {text}", self.err_color), file=self.err)

    def heading(self, text: str, code: str = GREEN):
        print(self._paint(code, text, self.out_color), file=self.out)

    def banner(self, title: str):
        rule = "=" * 40
        self.heading(rule)
        self.heading(title)
        self.heading(rule)
        self.info()

    def confirm(self, question: str) -> bool:
        try:
            reply = self.input_func(f"{question} (y/n) ")
        except EOFError:
            return False
        return reply.strip()[:1].lower() == "y"

"""
Argshape diagnostics sinks.

A sink is any callable taking a stop signal. The parsing engine calls the sink
of the top-level command exactly once per stopped parse, before returning the
signal to the caller.

- ConsoleSink: prints help to standard output and faults to standard error
  through rich consoles, honoring the colorful/fancy switches.
- silent: discards every signal (handy for tests and embedding).
"""
from rich.console import Console

from .faults import HelpRequested
from .helps import render
from .utils import Unset


class ConsoleSink:
    """
    Render stop signals on rich consoles.

    Parameters
    - colorful: style the output with the help/fault palettes. Plain help is
      written verbatim, tabs included; styled help is never wrapped.
    - fancy: wrap faults in a rich Panel.
    - stdout, stderr: consoles to print to; fresh rich consoles bound to the
      process streams when omitted.
    """

    def __init__(self, colorful=False, fancy=False, *, stdout=Unset, stderr=Unset):
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)
        self.stdout = Console() if stdout is Unset else stdout
        self.stderr = Console(stderr=True) if stderr is Unset else stderr

    def __call__(self, signal, /):
        signal = signal.__replace__(colorful=self.colorful, fancy=self.fancy)
        if isinstance(signal, HelpRequested):
            if self.colorful:
                # help text already ends with a newline
                self.stdout.print(signal, highlight=False, end="", soft_wrap=True)
            else:
                # written verbatim: rich would expand the tabs
                self.stdout.file.write(render(signal.command))
                self.stdout.file.flush()
        else:
            self.stderr.print(signal, highlight=False)

    def __repr__(self):
        return f"ConsoleSink(colorful={self.colorful!r}, fancy={self.fancy!r})"


def silent(signal, /):
    """
    Sink that discards the signal.
    """


__all__ = (
    "ConsoleSink",
    "silent",
)

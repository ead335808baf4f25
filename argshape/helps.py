"""
Argshape help renderer.

- render(command): plain help text with a fixed, line-oriented layout

      <command name>
      <about text>
      USAGE:
        --<parameter name>\t<parameter help>

  Every line ends with a newline; a missing about or help renders empty. No
  wrapping and no localization.

- format(command, colorful=False): the same lines as a rich Text, styled when
  colorful. Palette entries can be overridden with a __styles__ mapping in
  __main__ (keys: program-name, description-section, usage-label,
  option-name, argument-description).
"""
from collections import defaultdict

from rich.text import Text


def _lines(command):
    yield "program-name", command.name
    yield "description-section", command.about or ""
    yield "usage-label", "USAGE:"
    for parameter in command.parameters:
        yield "option-name", parameter


def render(command, /):
    """
    Render the help text of a command schema as a plain string.
    """
    rendered = []
    for kind, line in _lines(command):
        if kind == "option-name":
            line = f"  --{line.name}\t{line.help or ''}"
        rendered.append(f"{line}\n")
    return "".join(rendered)


def format(command, /, colorful=False):
    """
    Render the help text of a command schema as a rich Text.

    With colorful=False the result holds no styles, so str(format(command))
    equals render(command).
    """
    styles = defaultdict(str, {
        "program-name": "bold #FF4D94",  # magenta-pink brand
        "description-section": "italic #A3A3A3",  # neutral gray
        "usage-label": "bold #00E6FF",  # cyan
        "option-name": "bold #22C55E",  # green switches
        "argument-description": "#9CA3AF",  # muted gray
    } | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style):
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), styles[style] if colorful else "")

    output = Text()
    for kind, line in _lines(command):
        if kind == "option-name":
            output.append_text(Text.assemble(
                "  ",
                text(f"--{line.name}", "option-name"),
                "\t",
                text(line.help or "", "argument-description"),
            ))
        else:
            output.append_text(text(line, kind))
        output.append("\n")
    return output


__all__ = (
    "render",
    "format",
)

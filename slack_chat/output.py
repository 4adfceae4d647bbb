"""Output formatting for slack-chat commands.

An Output value is built once by the root command and handed to each
command through typer's context object.
"""

import json
import sys
from dataclasses import dataclass, field
from typing import Any, List, Sequence, TextIO, Tuple

import yaml

FORMATS = ("text", "json", "yaml", "table")


@dataclass
class Output:
    format: str = "text"
    stream: TextIO = field(default=None)

    def __post_init__(self):
        if self.format not in FORMATS:
            raise ValueError(f"unknown output format '{self.format}' (expected one of {', '.join(FORMATS)})")

    @property
    def out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stdout

    @property
    def structured(self) -> bool:
        return self.format in ("json", "yaml")

    def emit(self, data: Any, text: str = None):
        """Print data as JSON/YAML, or text (falling back to key/values)."""
        if self.format == "json":
            print(json.dumps(data, indent=2, ensure_ascii=False), file=self.out)
        elif self.format == "yaml":
            print(yaml.dump(data, indent=2, sort_keys=False, allow_unicode=True), end="", file=self.out)
        elif text is not None:
            print(text, file=self.out)
        elif isinstance(data, dict):
            self.key_values(data.items())
        else:
            print(data, file=self.out)

    def message(self, text: str):
        """Human-readable status line; suppressed for JSON/YAML output."""
        if not self.structured:
            print(text, file=self.out)

    def key_values(self, pairs: Sequence[Tuple[str, Any]]):
        for key, value in pairs:
            print(f"{key + ':':<12}  {value}", file=self.out)

    def table(self, headers: List[str], rows: List[List[str]]):
        """Print rows in aligned columns under a header and separator."""
        if not headers:
            return
        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row[:len(widths)]):
                widths[i] = max(widths[i], len(str(cell)))

        def line(cells):
            padded = [str(cells[i]) if i < len(cells) else "" for i in range(len(headers))]
            return "  ".join(c.ljust(w) for c, w in zip(padded, widths)).rstrip()

        print(line(headers), file=self.out)
        print("-" * (sum(widths) + 2 * (len(widths) - 1)), file=self.out)
        for row in rows:
            print(line(row), file=self.out)


def get_output(ctx) -> Output:
    """The Output attached to a typer context, or plain text to stdout."""
    obj = getattr(ctx, "obj", None)
    return obj if isinstance(obj, Output) else Output()

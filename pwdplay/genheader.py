"""Prepend a DO NOT EDIT marker comment to a generated file."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence


def add_generated_header(path: str | Path, label: str) -> None:
    """Rewrite ``path`` with a ``// <label> DO NOT EDIT`` line on top."""
    target = Path(path)
    content = target.read_bytes()
    header = f"// {label.strip()} DO NOT EDIT\n\n".encode()
    target.write_bytes(header + content)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: ``genheader FILE LABEL``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print("usage: genheader FILE LABEL", file=sys.stderr)
        return 2
    try:
        add_generated_header(args[0], args[1])
    except OSError as exc:
        print(f"genheader: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
# instance.py
# Read and write exact cover instances in the plain 0/1 text format

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from matrix import MalformedInput

logger = logging.getLogger(__name__)


@dataclass
class Instance:
    num_columns: int
    rows: list[list[bool]] = field(default_factory=list)


def _parse_bits(tokens: list[str], lineno: int) -> list[bool]:
    # A single unseparated token such as "0110" is one bit per character.
    if len(tokens) == 1 and len(tokens[0]) > 1:
        tokens = list(tokens[0])
    bits: list[bool] = []
    for tok in tokens:
        if tok not in ("0", "1"):
            raise MalformedInput(f"line {lineno}: expected 0 or 1, got {tok!r}")
        bits.append(tok == "1")
    return bits


def parse_instance(text: str) -> Instance:
    """
    First non-blank line is the column count, every following non-blank
    line is one row. Lines starting with '#' are ignored.
    """
    instance: Instance | None = None

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        if instance is None:
            try:
                num_columns = int(line)
            except ValueError:
                raise MalformedInput(f"line {lineno}: expected a column count, got {line!r}") from None
            if num_columns < 0:
                raise MalformedInput(f"line {lineno}: negative column count {num_columns}")
            instance = Instance(num_columns)
            continue

        bits = _parse_bits(line.split(), lineno)
        if len(bits) != instance.num_columns:
            raise MalformedInput(
                f"line {lineno}: {len(bits)} values, expected {instance.num_columns}"
            )
        instance.rows.append(bits)

    if instance is None:
        raise MalformedInput("missing column count")
    return instance


def read_instance(path: str) -> Instance:
    with open(path, "r", encoding="utf-8") as f:
        instance = parse_instance(f.read())
    logger.info("read %s: %d columns, %d rows", path, instance.num_columns, len(instance.rows))
    return instance


def write_instance(path: str, num_columns: int, rows: Iterable[Sequence[bool]]) -> str:
    """Write an instance in the format read_instance expects and return the path."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(f"{num_columns}\n")
        for bits in rows:
            f.write(" ".join("1" if b else "0" for b in bits))
            f.write("\n")
    return path


__all__ = ["Instance", "parse_instance", "read_instance", "write_instance"]

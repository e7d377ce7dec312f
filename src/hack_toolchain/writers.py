from __future__ import annotations
from typing import Iterable, List
from .encoding import Encoded

def to_bin_lines(words: Iterable[Encoded]) -> List[str]:
    return [w.bits for w in words]

def _write_lines(lines: Iterable[str], path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")

def write_hack(words: Iterable[Encoded], path: str) -> None:
    _write_lines(to_bin_lines(words), path)

def write_asm(lines: Iterable[str], path: str) -> None:
    _write_lines(lines, path)

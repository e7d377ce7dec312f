from __future__ import annotations
import re
from typing import Iterator, List, Tuple

COMMENT_SPLIT_RE = re.compile(r"//")

def strip_comment(line: str) -> str:
    """Remove comments starting with '//' (full line or trailing)"""
    return COMMENT_SPLIT_RE.split(line, maxsplit=1)[0].strip()

def clean_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield (lineno, core) for every line that still has content after
    stripping comments. Line numbers are 1-based and refer to the raw text."""
    for lineno, raw in enumerate(text.splitlines(), start=1):
        core = strip_comment(raw)
        if core:
            yield lineno, core

def split_words(line: str) -> List[str]:
    """Split a VM command into whitespace separated words."""
    return line.split()

LABEL_DECL_RE = re.compile(r"^\((?P<name>[^()]*)\)$")

def label_name(line: str) -> str:
    """Return the text between the parentheses of '(NAME)'.

    A line that opens with '(' but has no closing ')' keeps everything
    after the '('; the bad name surfaces later as a symbol problem."""
    m = LABEL_DECL_RE.match(line)
    if m:
        return m.group("name").strip()
    return line[1:].rstrip(")").strip()

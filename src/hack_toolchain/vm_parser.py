# src/hack_toolchain/vm_parser.py
from __future__ import annotations
from typing import Callable, Dict, List, Optional, Tuple

from .lexer import clean_lines, split_words
from .ast import (
    Arithmetic, Push, Pop, Label, Goto, IfGoto, Function, Call, Return, VMCommand,
)
from .diagnostics import Diagnostic, TranslationError

ARITHMETIC_OPS = frozenset({"add", "sub", "neg", "eq", "gt", "lt", "and", "or", "not"})

def _arg(words: List[str], pos: int, what: str) -> str:
    if len(words) <= pos:
        raise TranslationError("MissingOperand", f"'{words[0]}' requiere {what}")
    return words[pos]

def _int_arg(words: List[str], pos: int, what: str) -> int:
    tok = _arg(words, pos, what)
    if not tok.isdecimal():
        raise TranslationError("InvalidOperand",
                               f"'{words[0]}': {what} debe ser un entero no negativo, no '{tok}'")
    return int(tok)

def _push(w: List[str], line: int) -> VMCommand:
    return Push(_arg(w, 1, "un segmento"), _int_arg(w, 2, "un índice"), line)

def _pop(w: List[str], line: int) -> VMCommand:
    return Pop(_arg(w, 1, "un segmento"), _int_arg(w, 2, "un índice"), line)

def _label(w: List[str], line: int) -> VMCommand:
    return Label(_arg(w, 1, "un nombre de etiqueta"), line)

def _goto(w: List[str], line: int) -> VMCommand:
    return Goto(_arg(w, 1, "un nombre de etiqueta"), line)

def _if_goto(w: List[str], line: int) -> VMCommand:
    return IfGoto(_arg(w, 1, "un nombre de etiqueta"), line)

def _function(w: List[str], line: int) -> VMCommand:
    return Function(_arg(w, 1, "un nombre de función"), _int_arg(w, 2, "el número de locales"), line)

def _call(w: List[str], line: int) -> VMCommand:
    return Call(_arg(w, 1, "un nombre de función"), _int_arg(w, 2, "el número de argumentos"), line)

def _return(w: List[str], line: int) -> VMCommand:
    return Return(line)

_BUILDERS: Dict[str, Callable[[List[str], int], VMCommand]] = {
    "push": _push,
    "pop": _pop,
    "label": _label,
    "goto": _goto,
    "if-goto": _if_goto,
    "function": _function,
    "call": _call,
    "return": _return,
}

def parse_command(core: str, lineno: int) -> VMCommand:
    """Clasifica una línea limpia en uno de los nueve tipos de comando.

    La palabra clave debe coincidir exactamente con la primera palabra; los
    operandos se toman por posición. Lanza TranslationError si falta un
    operando o la palabra clave no existe."""
    words = split_words(core)
    keyword = words[0]
    if keyword in ARITHMETIC_OPS:
        return Arithmetic(keyword, lineno)
    builder = _BUILDERS.get(keyword)
    if builder is None:
        raise TranslationError("UnknownMnemonic", f"Comando VM desconocido: '{keyword}'")
    return builder(words, lineno)

def parse_vm(text: str, *, filename: Optional[str] = None) -> Tuple[List[VMCommand], List[Diagnostic]]:
    """
    Devuelve (commands, diagnostics) en orden de fuente.

    Reglas:
      - Comentarios: '//' hasta fin de línea; líneas vacías se ignoran.
      - Una línea que no empieza por una palabra reservada es un error
        (UnknownMnemonic); no se descarta en silencio.
    """
    commands: List[VMCommand] = []
    diags: List[Diagnostic] = []
    for lineno, core in clean_lines(text):
        try:
            commands.append(parse_command(core, lineno))
        except TranslationError as ex:
            diags.append(ex.to_diagnostic(line=lineno, file=filename, source=core))
    return commands, diags

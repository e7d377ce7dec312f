# src/hack_toolchain/parser.py
from __future__ import annotations
from typing import Iterable, List, Tuple

from .lexer import clean_lines, label_name
from .ast import AInstruction, LabelDecl, CInstruction, AsmNode

def classify(core: str, lineno: int) -> AsmNode:
    """Clasifica una línea limpia (sin comentarios y recortada).

    - '@xxx'    -> AInstruction(operand='xxx')
    - '(NOMBRE)' -> LabelDecl(name='NOMBRE')
    - resto     -> CInstruction(text) sin validar; los errores salen al codificar
    """
    if core.startswith("@"):
        return AInstruction(operand=core[1:].strip(), line=lineno)
    if core.startswith("("):
        return LabelDecl(name=label_name(core), line=lineno)
    return CInstruction(text=core, line=lineno)

def parse_lines(lines: Iterable[Tuple[int, str]]) -> List[AsmNode]:
    """Clasifica pares (línea, texto) ya limpios, preservando el orden."""
    return [classify(core, lineno) for lineno, core in lines]

def parse(text: str) -> List[AsmNode]:
    """
    Devuelve la lista de nodos del programa en orden de fuente.

    Reglas:
      - Comentarios: '//' hasta fin de línea; líneas vacías se ignoran.
      - Cada línea restante es exactamente una instrucción o una etiqueta.

    La clasificación nunca falla: el texto mal formado se detecta en la
    pasada 2 (tablas comp/dest/jump o rango de direcciones).
    """
    return parse_lines(clean_lines(text))

'''
dataclases de AST: instrucciones Hack (A, C, etiquetas) y comandos de la VM
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Union

# ---- Nodos de ensamblador Hack ----

@dataclass(frozen=True)
class AInstruction:
    """Instrucción de dirección '@valor' (decimal o símbolo)."""
    operand: str
    line: int

    @property
    def is_numeric(self) -> bool:
        return self.operand.isdecimal()

@dataclass(frozen=True)
class LabelDecl:
    """Pseudo-instrucción '(NOMBRE)'; marca el PC y no genera palabra."""
    name: str
    line: int

@dataclass(frozen=True)
class CInstruction:
    """Instrucción de cómputo cruda: 'dest=comp', 'comp;jump' o 'dest=comp;jump'."""
    text: str
    line: int

AsmNode = Union[AInstruction, LabelDecl, CInstruction]

# ---- Comandos de la VM ----

@dataclass(frozen=True)
class Arithmetic:
    op: str       # add, sub, neg, eq, gt, lt, and, or, not
    line: int

@dataclass(frozen=True)
class Push:
    segment: str
    index: int
    line: int

@dataclass(frozen=True)
class Pop:
    segment: str
    index: int
    line: int

@dataclass(frozen=True)
class Label:
    name: str
    line: int

@dataclass(frozen=True)
class Goto:
    name: str
    line: int

@dataclass(frozen=True)
class IfGoto:
    name: str
    line: int

@dataclass(frozen=True)
class Function:
    name: str
    num_locals: int
    line: int

@dataclass(frozen=True)
class Call:
    name: str
    num_args: int
    line: int

@dataclass(frozen=True)
class Return:
    line: int

VMCommand = Union[Arithmetic, Push, Pop, Label, Goto, IfGoto, Function, Call, Return]

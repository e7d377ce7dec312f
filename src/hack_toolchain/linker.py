# src/hack_toolchain/linker.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from .ast import AsmNode, LabelDecl
from .diagnostics import Diagnostic, error
from .isa import PREDEFINED, VAR_BASE, MAX_ADDRESS

# ---------- Tabla de símbolos ----------

class SymbolTable:
    """Tabla de símbolos de una ejecución del ensamblador.

    Ciclo de vida:
      1. Se construye con los símbolos predefinidos ya cargados.
      2. Pasada 1: `bind_label(nombre, pc)` por cada declaración '(NOMBRE)'.
      3. Pasada 2: `resolve(nombre)` por cada '@símbolo'; un símbolo desconocido
         se asigna como variable en la siguiente dirección libre desde `var_base`.
      4. `freeze()`: a partir de aquí la tabla es de sólo lectura y un símbolo
         desconocido es un error.

    Cada ensamblado usa su propia instancia; no hay estado global.
    """

    def __init__(self, *, var_base: int = VAR_BASE):
        self._table: Dict[str, int] = dict(PREDEFINED)
        self._labels: Dict[str, int] = {}
        self._variables: Dict[str, int] = {}
        self._next_var = var_base
        self._frozen = False

    def __contains__(self, name: str) -> bool:
        return name in self._table

    def __len__(self) -> int:
        return len(self._table)

    def get(self, name: str) -> Optional[int]:
        return self._table.get(name)

    @property
    def labels(self) -> Mapping[str, int]:
        return dict(self._labels)

    @property
    def variables(self) -> Mapping[str, int]:
        return dict(self._variables)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def bind_label(self, name: str, pc: int) -> None:
        """Registra una etiqueta. Nunca sobrescribe un predefinido ni otra etiqueta."""
        if self._frozen:
            raise RuntimeError("La tabla de símbolos está congelada")
        if name in PREDEFINED:
            raise ValueError(f"La etiqueta redefine un símbolo predefinido: {name}")
        if name in self._labels:
            raise ValueError(f"Etiqueta redefinida: {name}")
        self._labels[name] = pc
        self._table[name] = pc

    def resolve(self, name: str) -> int:
        """Devuelve la dirección del símbolo, asignando una variable si hace falta."""
        addr = self._table.get(name)
        if addr is not None:
            return addr
        if self._frozen:
            raise KeyError(f"Símbolo no definido: {name}")
        if self._next_var > MAX_ADDRESS:
            raise ValueError(f"Sin direcciones libres para la variable: {name}")
        addr = self._next_var
        self._variables[name] = addr
        self._table[name] = addr
        self._next_var += 1
        return addr

    def freeze(self) -> None:
        self._frozen = True

    def as_dict(self) -> Dict[str, int]:
        return dict(self._table)

# ---------- Resultados de la pasada 1 ----------

@dataclass(frozen=True)
class LinkResult:
    symtab: SymbolTable
    size: int                 # número de palabras que generará el programa
    diagnostics: List[Diagnostic]

# ---------- Pasada 1 (etiquetas) ----------

def first_pass(
    nodes: List[AsmNode],
    *,
    symtab: Optional[SymbolTable] = None,
    var_base: int = VAR_BASE,
    filename: Optional[str] = None,
) -> LinkResult:
    """Recorre el programa contando instrucciones y liga cada etiqueta al PC.

    Las etiquetas no avanzan el PC: '(LOOP)' seguida de '@LOOP' liga LOOP
    a la dirección de la instrucción '@LOOP'."""
    if symtab is None:
        symtab = SymbolTable(var_base=var_base)
    diags: List[Diagnostic] = []
    pc = 0

    for n in nodes:
        if isinstance(n, LabelDecl):
            if not n.name:
                diags.append(error("Declaración de etiqueta sin nombre", kind="MissingOperand",
                                   line=n.line, file=filename, source=f"({n.name})"))
                continue
            try:
                symtab.bind_label(n.name, pc)
            except ValueError as ex:
                diags.append(error(str(ex), kind="DuplicateLabel", line=n.line,
                                   file=filename, source=f"({n.name})"))
            continue
        # instrucciones A y C ocupan una palabra de ROM
        pc += 1

    return LinkResult(symtab=symtab, size=pc, diagnostics=diags)

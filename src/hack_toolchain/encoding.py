# src/hack_toolchain/encoding.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .ast import AInstruction, CInstruction, LabelDecl, AsmNode
from .isa import C_PREFIX, ADDRESS_BITS, comp_bits, dest_bits, jump_bits
from .linker import SymbolTable
from .utils import is_unsigned_nbit, to_bin16
from .diagnostics import Diagnostic, error

# ---------------- Resultados de codificación ----------------

@dataclass(frozen=True)
class Encoded:
    word: int     # u16
    pc: int       # dirección ROM de esta instrucción
    line: int
    text: str     # instrucción fuente tal cual

    @property
    def bits(self) -> str:
        return to_bin16(self.word)

@dataclass(frozen=True)
class EncodeResult:
    words: List[Encoded]
    diagnostics: List[Diagnostic]

# ---------------- Helpers de campos ----------------

def split_compute(text: str) -> Tuple[Optional[str], str, Optional[str]]:
    """Separa 'dest=comp;jump' en (dest, comp, jump).

    dest y jump son None cuando no aparecen; los espacios internos se ignoran."""
    rest = "".join(text.split())
    dest: Optional[str] = None
    jump: Optional[str] = None
    if "=" in rest:
        dest, rest = rest.split("=", 1)
    if ";" in rest:
        rest, jump = rest.split(";", 1)
    return dest, rest, jump

def encode_compute(text: str) -> int:
    """Codifica una instrucción C; lanza KeyError si algún campo no existe."""
    dest, comp, jump = split_compute(text)
    bits = C_PREFIX + comp_bits(comp) + dest_bits(dest) + jump_bits(jump)
    return int(bits, 2)

def encode_address(value: int) -> int:
    """Codifica '@valor'; lanza ValueError si no cabe en 15 bits."""
    if not is_unsigned_nbit(value, ADDRESS_BITS):
        raise ValueError(f"Dirección fuera de rango (0..32767): {value}")
    return value

# ---------------- Codificador principal (pasada 2) ----------------

def encode(
    nodes: List[AsmNode],
    symtab: SymbolTable,
    *,
    filename: Optional[str] = None,
) -> EncodeResult:
    diags: List[Diagnostic] = []
    words: List[Encoded] = []
    pc = 0

    for n in nodes:
        if isinstance(n, LabelDecl):
            # no genera palabra; ya fue ligada en first_pass
            continue

        word: Optional[int] = None

        if isinstance(n, AInstruction):
            text = f"@{n.operand}"
            op = n.operand
            if not op:
                diags.append(error("Instrucción A sin operando", kind="MissingOperand",
                                   line=n.line, file=filename, source=text))
            elif n.is_numeric:
                try:
                    word = encode_address(int(op))
                except ValueError as ex:
                    diags.append(error(str(ex), kind="AddressOutOfRange",
                                       line=n.line, file=filename, source=text))
            elif op[0].isdigit():
                diags.append(error(f"Operando inválido: un símbolo no puede empezar por dígito: {op}",
                                   kind="InvalidOperand", line=n.line, file=filename, source=text))
            else:
                try:
                    word = encode_address(symtab.resolve(op))
                except KeyError as ex:
                    diags.append(error(ex.args[0], kind="UndefinedSymbolReference",
                                       line=n.line, file=filename, source=text))
                except ValueError as ex:
                    diags.append(error(str(ex), kind="AddressOutOfRange",
                                       line=n.line, file=filename, source=text))

        elif isinstance(n, CInstruction):
            text = n.text
            try:
                word = encode_compute(n.text)
            except KeyError as ex:
                diags.append(error(ex.args[0], kind="MalformedComputeInstruction",
                                   line=n.line, file=filename, source=n.text,
                                   hint="forma esperada: dest=comp, comp;jump o dest=comp;jump"))

        # El PC avanza aunque la instrucción falle, para no desplazar las líneas siguientes
        if word is not None:
            words.append(Encoded(word=word, pc=pc, line=n.line,
                                 text=text))
        pc += 1

    return EncodeResult(words=words, diagnostics=diags)

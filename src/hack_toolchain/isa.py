'''
tablas formales Hack (comp/dest/jump) y símbolos predefinidos
'''

from __future__ import annotations
from types import MappingProxyType
from typing import Mapping

# Prefijo de toda instrucción C (bits 15..13)
C_PREFIX = "111"

# Direcciones de 15 bits: 0..32767
ADDRESS_BITS = 15
MAX_ADDRESS = (1 << ADDRESS_BITS) - 1

# Primera dirección de RAM para variables
VAR_BASE = 16

# Campo comp: a + c1..c6 (7 bits). a=1 selecciona M en lugar de A.
COMP: Mapping[str, str] = MappingProxyType({
    "0":   "0101010",
    "1":   "0111111",
    "-1":  "0111010",
    "D":   "0001100",
    "A":   "0110000",
    "!D":  "0001101",
    "!A":  "0110001",
    "-D":  "0001111",
    "-A":  "0110011",
    "D+1": "0011111",
    "A+1": "0110111",
    "D-1": "0001110",
    "A-1": "0110010",
    "D+A": "0000010",
    "D-A": "0010011",
    "A-D": "0000111",
    "D&A": "0000000",
    "D|A": "0010101",
    "M":   "1110000",
    "!M":  "1110001",
    "-M":  "1110011",
    "M+1": "1110111",
    "M-1": "1110010",
    "D+M": "1000010",
    "D-M": "1010011",
    "M-D": "1000111",
    "D&M": "1000000",
    "D|M": "1010101",
})

DEST: Mapping[str, str] = MappingProxyType({
    "null": "000",
    "M":    "001",
    "D":    "010",
    "MD":   "011",
    "A":    "100",
    "AM":   "101",
    "AD":   "110",
    "AMD":  "111",
})

JUMP: Mapping[str, str] = MappingProxyType({
    "null": "000",
    "JGT":  "001",
    "JEQ":  "010",
    "JGE":  "011",
    "JLT":  "100",
    "JNE":  "101",
    "JLE":  "110",
    "JMP":  "111",
})

def _predefined() -> dict:
    table = {"SP": 0, "LCL": 1, "ARG": 2, "THIS": 3, "THAT": 4,
             "SCREEN": 16384, "KBD": 24576}
    for n in range(16):
        table[f"R{n}"] = n
    return table

PREDEFINED: Mapping[str, int] = MappingProxyType(_predefined())

def comp_bits(mnemonic: str) -> str:
    """Devuelve los 7 bits del campo comp."""
    if mnemonic not in COMP:
        raise KeyError(f"Expresión comp desconocida: '{mnemonic}'")
    return COMP[mnemonic]

def dest_bits(mnemonic: str | None) -> str:
    """Devuelve los 3 bits del campo dest; None equivale a 'null'."""
    key = "null" if mnemonic is None else mnemonic
    if key not in DEST:
        raise KeyError(f"Destino desconocido: '{mnemonic}'")
    return DEST[key]

def jump_bits(mnemonic: str | None) -> str:
    """Devuelve los 3 bits del campo jump; None equivale a 'null'."""
    key = "null" if mnemonic is None else mnemonic
    if key not in JUMP:
        raise KeyError(f"Salto desconocido: '{mnemonic}'")
    return JUMP[key]

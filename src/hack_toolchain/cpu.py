'''
simulador de referencia de la CPU Hack (ROM de 32K palabras, RAM de 32K palabras)
'''

from __future__ import annotations
from typing import Callable, Iterable, List, Optional, Sequence

from .utils import u16, sign_extend

ROM_SIZE = 32768
RAM_SIZE = 32768

def load_hack_lines(lines: Iterable[str]) -> List[int]:
    """Convierte las líneas '0101...' de un .hack en palabras enteras."""
    words: List[int] = []
    for lineno, raw in enumerate(lines, start=1):
        s = raw.strip()
        if not s:
            continue
        if len(s) != 16 or set(s) - {"0", "1"}:
            raise ValueError(f"Línea {lineno}: palabra binaria inválida: '{s}'")
        words.append(int(s, 2))
    return words

def alu(x: int, y: int, c: int) -> int:
    """ALU Hack: c son los 6 bits zx nx zy ny f no (de mayor a menor)."""
    zx, nx, zy, ny, f, no = ((c >> (5 - i)) & 1 for i in range(6))
    if zx:
        x = 0
    if nx:
        x = ~x
    if zy:
        y = 0
    if ny:
        y = ~y
    out = (x + y) if f else (x & y)
    if no:
        out = ~out
    return u16(out)

class HackCPU:
    """Ejecuta palabras Hack instrucción a instrucción.

    El programa se detiene cuando el PC sale de la ROM cargada; los
    programas Hack suelen terminar en un bucle infinito, así que `run`
    acepta una condición `until` para cortar antes."""

    def __init__(self, rom: Sequence[int]):
        if len(rom) > ROM_SIZE:
            raise ValueError("El programa no cabe en la ROM")
        self.rom: List[int] = list(rom)
        self.ram: List[int] = [0] * RAM_SIZE
        self.a = 0
        self.d = 0
        self.pc = 0
        self.steps = 0

    @property
    def halted(self) -> bool:
        return not (0 <= self.pc < len(self.rom))

    def peek_signed(self, addr: int) -> int:
        return sign_extend(self.ram[addr], 16)

    def poke(self, addr: int, value: int) -> None:
        self.ram[addr] = u16(value)

    def step(self) -> None:
        if self.halted:
            raise RuntimeError(f"PC fuera de la ROM: {self.pc}")
        word = self.rom[self.pc]
        self.steps += 1

        if not word & 0x8000:
            # instrucción A
            self.a = word & 0x7FFF
            self.pc += 1
            return

        a_bit = (word >> 12) & 1
        comp = (word >> 6) & 0x3F
        dest = (word >> 3) & 0x7
        jump = word & 0x7

        y = self.ram[self.a & 0x7FFF] if a_bit else self.a
        out = alu(self.d, y, comp)

        # M se escribe con el valor de A anterior a esta instrucción
        if dest & 0b001:
            self.ram[self.a & 0x7FFF] = out
        target = self.a
        if dest & 0b100:
            self.a = out
        if dest & 0b010:
            self.d = out

        value = sign_extend(out, 16)
        taken = ((jump & 0b100 and value < 0) or
                 (jump & 0b010 and value == 0) or
                 (jump & 0b001 and value > 0))
        self.pc = (target & 0x7FFF) if taken else self.pc + 1

    def run(self, max_steps: int = 1_000_000, *,
            until: Optional[Callable[["HackCPU"], bool]] = None) -> int:
        """Ejecuta hasta detenerse o hasta que `until(cpu)` sea verdadero.
        Devuelve el número de pasos; lanza RuntimeError si agota max_steps."""
        start = self.steps
        while not self.halted:
            if until is not None and until(self):
                return self.steps - start
            if self.steps - start >= max_steps:
                raise RuntimeError(f"Límite de {max_steps} pasos alcanzado en PC={self.pc}")
            self.step()
        return self.steps - start

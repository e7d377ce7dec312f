'''
emisor de ensamblador Hack para los comandos de la VM (pila, segmentos, llamadas)
'''

from __future__ import annotations
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping

from .ast import (
    Arithmetic, Push, Pop, Label, Goto, IfGoto, Function, Call, Return, VMCommand,
)
from .diagnostics import TranslationError

# Segmentos direccionados como base + índice
SEGMENT_BASES: Mapping[str, str] = MappingProxyType({
    "local": "LCL",
    "argument": "ARG",
    "this": "THIS",
    "that": "THAT",
})

# Segmentos en registros fijos: R3.. (pointer) y R5.. (temp)
FIXED_SEGMENTS: Mapping[str, int] = MappingProxyType({
    "pointer": 3,
    "temp": 5,
})

# Operaciones sobre el tope: D = operando derecho, M = segundo desde el tope
BINARY_OPS: Mapping[str, str] = MappingProxyType({
    "add": "M=D+M",
    "sub": "M=M-D",
    "and": "M=D&M",
    "or":  "M=D|M",
})

UNARY_OPS: Mapping[str, str] = MappingProxyType({
    "neg": "M=-M",
    "not": "M=!M",
})

COMPARE_JUMPS: Mapping[str, str] = MappingProxyType({
    "eq": "JEQ",
    "gt": "JGT",
    "lt": "JLT",
})

# Registros de trabajo
FRAME_REG = "R13"     # copia de LCL durante return
RET_REG = "R14"       # dirección de retorno durante return
ADDR_REG = "R15"      # dirección destino de pop

# Palabras guardadas por cada llamada: retorno, LCL, ARG, THIS, THAT
FRAME_SIZE = 5

STACK_BASE = 256

def _reg(n: int) -> str:
    return f"R{n}" if n < 16 else str(n)

def describe(cmd: VMCommand) -> str:
    """Texto VM canónico de un comando (se usa en los comentarios emitidos)."""
    if isinstance(cmd, Arithmetic):
        return cmd.op
    if isinstance(cmd, Push):
        return f"push {cmd.segment} {cmd.index}"
    if isinstance(cmd, Pop):
        return f"pop {cmd.segment} {cmd.index}"
    if isinstance(cmd, Label):
        return f"label {cmd.name}"
    if isinstance(cmd, Goto):
        return f"goto {cmd.name}"
    if isinstance(cmd, IfGoto):
        return f"if-goto {cmd.name}"
    if isinstance(cmd, Function):
        return f"function {cmd.name} {cmd.num_locals}"
    if isinstance(cmd, Call):
        return f"call {cmd.name} {cmd.num_args}"
    if isinstance(cmd, Return):
        return "return"
    raise TypeError(f"Comando VM no soportado: {cmd!r}")

class CodeWriter:
    """Acumula el ensamblador de un programa VM completo.

    El contador de etiquetas únicas vive en la instancia y sólo avanza
    (una vez por comparación y una vez por llamada), así que ninguna
    etiqueta generada se repite en el programa. `set_file` cambia el
    espacio de nombres de `static` al pasar a otro archivo .vm."""

    def __init__(self, file_stem: str = "Main", *, stack_base: int = STACK_BASE):
        self.lines: List[str] = []
        self.file_stem = file_stem
        self.stack_base = stack_base
        self._label_count = 0

    @property
    def label_count(self) -> int:
        return self._label_count

    def set_file(self, filename: str) -> None:
        self.file_stem = Path(filename).stem

    # ---------------- Helpers ----------------

    def _emit(self, *code: str) -> None:
        self.lines.extend(code)

    def _next_label(self) -> int:
        n = self._label_count
        self._label_count += 1
        return n

    def _push_d(self) -> None:
        self._emit("@SP", "A=M", "M=D", "@SP", "M=M+1")

    def _pop_d(self) -> None:
        self._emit("@SP", "AM=M-1", "D=M")

    def _static(self, index: int) -> str:
        return f"{self.file_stem}.{index}"

    # ---------------- Comandos ----------------

    def write(self, cmd: VMCommand) -> None:
        """Emite un comando precedido de su comentario. Si el comando falla
        no queda ninguna línea suya en la salida."""
        mark = len(self.lines)
        self._emit(f"// {describe(cmd)}")
        try:
            if isinstance(cmd, Arithmetic):
                self.write_arithmetic(cmd.op)
            elif isinstance(cmd, Push):
                self.write_push(cmd.segment, cmd.index)
            elif isinstance(cmd, Pop):
                self.write_pop(cmd.segment, cmd.index)
            elif isinstance(cmd, Label):
                self.write_label(cmd.name)
            elif isinstance(cmd, Goto):
                self.write_goto(cmd.name)
            elif isinstance(cmd, IfGoto):
                self.write_if_goto(cmd.name)
            elif isinstance(cmd, Function):
                self.write_function(cmd.name, cmd.num_locals)
            elif isinstance(cmd, Call):
                self.write_call(cmd.name, cmd.num_args)
            else:
                self.write_return()
        except TranslationError:
            del self.lines[mark:]
            raise

    def write_bootstrap(self) -> None:
        self._emit("// bootstrap", f"@{self.stack_base}", "D=A", "@SP", "M=D")
        self.write_call("Sys.init", 0)

    def write_arithmetic(self, op: str) -> None:
        if op in BINARY_OPS:
            self._pop_d()
            self._emit("@SP", "AM=M-1", BINARY_OPS[op], "@SP", "M=M+1")
        elif op in UNARY_OPS:
            self._emit("@SP", "A=M-1", UNARY_OPS[op])
        elif op in COMPARE_JUMPS:
            self._write_compare(COMPARE_JUMPS[op])
        else:
            raise TranslationError("UnsupportedOperation", f"Operación aritmética no soportada: '{op}'")

    def _write_compare(self, jump: str) -> None:
        n = self._next_label()
        true_label, end_label = f"$TRUE.{n}", f"$END.{n}"
        self._pop_d()
        self._emit(
            "@SP", "AM=M-1", "D=M-D",
            f"@{true_label}", f"D;{jump}",
            "@SP", "A=M", "M=0",
            f"@{end_label}", "0;JMP",
            f"({true_label})",
            "@SP", "A=M", "M=-1",
            f"({end_label})",
            "@SP", "M=M+1",
        )

    def write_push(self, segment: str, index: int) -> None:
        if segment == "constant":
            self._emit(f"@{index}", "D=A")
        elif segment in SEGMENT_BASES:
            self._emit(f"@{SEGMENT_BASES[segment]}", "D=M", f"@{index}", "A=D+A", "D=M")
        elif segment in FIXED_SEGMENTS:
            self._emit(f"@{_reg(FIXED_SEGMENTS[segment] + index)}", "D=M")
        elif segment == "static":
            self._emit(f"@{self._static(index)}", "D=M")
        else:
            raise TranslationError("UnknownSegment", f"Segmento desconocido: '{segment}'")
        self._push_d()

    def write_pop(self, segment: str, index: int) -> None:
        if segment == "constant":
            raise TranslationError("UnsupportedOperation", "No se puede hacer pop sobre 'constant'")
        if segment in SEGMENT_BASES:
            # la dirección destino se calcula antes de tocar la pila
            self._emit(f"@{SEGMENT_BASES[segment]}", "D=M", f"@{index}", "D=D+A",
                       f"@{ADDR_REG}", "M=D")
            self._pop_d()
            self._emit(f"@{ADDR_REG}", "A=M", "M=D")
        elif segment in FIXED_SEGMENTS:
            self._pop_d()
            self._emit(f"@{_reg(FIXED_SEGMENTS[segment] + index)}", "M=D")
        elif segment == "static":
            self._pop_d()
            self._emit(f"@{self._static(index)}", "M=D")
        else:
            raise TranslationError("UnknownSegment", f"Segmento desconocido: '{segment}'")

    def write_label(self, label: str) -> None:
        self._emit(f"({label})")

    def write_goto(self, label: str) -> None:
        self._emit(f"@{label}", "0;JMP")

    def write_if_goto(self, label: str) -> None:
        self._pop_d()
        self._emit(f"@{label}", "D;JNE")

    def write_function(self, name: str, num_locals: int) -> None:
        self._emit(f"({name})")
        for _ in range(num_locals):
            self.write_push("constant", 0)

    def write_call(self, name: str, num_args: int) -> None:
        ret_label = f"$RET.{self._next_label()}"
        self._emit(f"@{ret_label}", "D=A")
        self._push_d()
        for pointer in ("LCL", "ARG", "THIS", "THAT"):
            self._emit(f"@{pointer}", "D=M")
            self._push_d()
        # ARG = SP - 5 - num_args ; LCL = SP
        self._emit(
            "@SP", "D=M", f"@{FRAME_SIZE}", "D=D-A", f"@{num_args}", "D=D-A", "@ARG", "M=D",
            "@SP", "D=M", "@LCL", "M=D",
            f"@{name}", "0;JMP",
            f"({ret_label})",
        )

    def write_return(self) -> None:
        self._emit(
            "@LCL", "D=M", f"@{FRAME_REG}", "M=D",
            f"@{FRAME_SIZE}", "A=D-A", "D=M", f"@{RET_REG}", "M=D",
        )
        # el valor de retorno queda en ARG[0], que pasa a ser el tope
        self._pop_d()
        self._emit("@ARG", "A=M", "M=D", "@ARG", "D=M+1", "@SP", "M=D")
        for pointer in ("THAT", "THIS", "ARG", "LCL"):
            self._emit(f"@{FRAME_REG}", "AM=M-1", "D=M", f"@{pointer}", "M=D")
        self._emit(f"@{RET_REG}", "A=M", "0;JMP")

'''
clase Diagnostic, tipos de error (kinds) y helpers de construcción
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Literal, Optional

# Severidad de los diagnósticos (en español)
Severity = Literal["error", "advertencia", "nota"]

# Tipos de error; todos son fatales y abortan la ejecución
ErrorKind = Literal[
    "MissingOperand",
    "InvalidOperand",
    "UnknownMnemonic",
    "UnknownSegment",
    "UnsupportedOperation",
    "AddressOutOfRange",
    "MalformedComputeInstruction",
    "UndefinedSymbolReference",
    "DuplicateLabel",
]

_SEV_TO_LABEL = {
    "error": "ERROR",
    "advertencia": "ADVERTENCIA",
    "nota": "NOTA",
}

@dataclass(frozen=True)
class Diagnostic:
    """Estructura de un diagnóstico para reportar problemas.

    Además de la ubicación (archivo, línea y columna) y la pista, guarda el
    tipo de error (`kind`) y el texto crudo de la línea fuente (`source`),
    para que el reporte identifique exactamente qué se rechazó.
    """
    severity: Severity
    message: str
    line: Optional[int] = None
    col: Optional[int] = None
    hint: Optional[str] = None
    file: Optional[str] = None
    kind: Optional[ErrorKind] = None
    source: Optional[str] = None

    def __str__(self) -> str:
        loc = ""
        if self.file is not None:
            loc += f"{self.file}:"
        if self.line is not None:
            loc += f"{self.line}"
            if self.col is not None:
                loc += f":{self.col}"
        if loc:
            loc += ": "
        sev = _SEV_TO_LABEL.get(self.severity, str(self.severity).upper())
        if self.kind:
            sev += f"[{self.kind}]"
        core = f"{sev}: {self.message}"
        if self.hint:
            core += f"  (pista: {self.hint})"
        if self.source is not None:
            core += f" -> '{self.source}'"
        return loc + core

def error(message: str, *, kind: ErrorKind | None = None, line: int | None = None,
          col: int | None = None, file: str | None = None, hint: str | None = None,
          source: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", message, line, col, hint, file, kind, source)

def warning(message: str, *, line: int | None = None, col: int | None = None,
            file: str | None = None, hint: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo advertencia."""
    return Diagnostic("advertencia", message, line, col, hint, file)

def has_errors(diags: Iterable[Diagnostic]) -> bool:
    return any(d.severity == "error" for d in diags)

class TranslationError(ValueError):
    """Error de un comando concreto; quien conoce la línea lo convierte en Diagnostic."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_diagnostic(self, *, line: int | None = None, file: str | None = None,
                      source: str | None = None) -> Diagnostic:
        return error(self.message, kind=self.kind, line=line, file=file, source=source)

from __future__ import annotations
import argparse, sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple

from .ast import Function, VMCommand
from .codegen import CodeWriter, STACK_BASE, describe
from .diagnostics import Diagnostic, TranslationError, has_errors, warning
from .vm_parser import parse_vm
from .writers import write_asm

@dataclass(frozen=True)
class TranslateResult:
    lines: List[str]              # vacío si hubo algún error
    diagnostics: List[Diagnostic]

def translate_sources(
    sources: Iterable[Tuple[str, str]],
    *,
    bootstrap: bool = True,
    stack_base: int = STACK_BASE,
) -> TranslateResult:
    """Traduce varios archivos VM (nombre, texto) a un único programa.

    Todos comparten el contador de etiquetas; cada archivo conserva su propio
    espacio de nombres `static` (<stem>.<índice>)."""
    diags: List[Diagnostic] = []
    parsed: List[Tuple[str, List[VMCommand]]] = []
    for filename, text in sources:
        commands, d = parse_vm(text, filename=filename)
        diags.extend(d)
        parsed.append((filename, commands))

    writer = CodeWriter(stack_base=stack_base)
    if bootstrap:
        has_init = any(isinstance(c, Function) and c.name == "Sys.init"
                       for _, commands in parsed for c in commands)
        if not has_init:
            diags.append(warning("El bootstrap llama a Sys.init pero ningún archivo la define",
                                 hint="use --no-bootstrap para programas sin Sys.init"))
        writer.write_bootstrap()

    for filename, commands in parsed:
        writer.set_file(filename)
        for cmd in commands:
            try:
                writer.write(cmd)
            except TranslationError as ex:
                diags.append(ex.to_diagnostic(line=cmd.line, file=filename, source=describe(cmd)))

    lines = [] if has_errors(diags) else list(writer.lines)
    return TranslateResult(lines=lines, diagnostics=diags)

def translate_text(text: str, *, filename: str = "Main.vm", bootstrap: bool = True,
                   stack_base: int = STACK_BASE) -> TranslateResult:
    return translate_sources([(filename, text)], bootstrap=bootstrap, stack_base=stack_base)

def collect_sources(path: Path) -> Tuple[List[Path], str]:
    """Devuelve (archivos .vm, nombre del programa) para un archivo o un directorio."""
    if path.is_dir():
        return sorted(path.glob("*.vm")), path.resolve().name
    return [path], path.stem

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Hack VM translator")
    ap.add_argument("source", help="archivo .vm o directorio con archivos .vm")
    ap.add_argument("-o", "--output", help="archivo .asm de salida (por defecto, <nombre>.asm en el directorio actual)")
    ap.add_argument("--no-bootstrap", action="store_true", help="no emitir SP=256 ni la llamada a Sys.init")
    args = ap.parse_args(argv)

    files, program = collect_sources(Path(args.source))
    if not files:
        print(f"ERROR: no hay archivos .vm en {args.source}", file=sys.stderr)
        return 2

    sources: List[Tuple[str, str]] = []
    for f in files:
        try:
            sources.append((str(f), f.read_text(encoding="utf-8")))
        except OSError as ex:
            print(f"ERROR: no pude leer {f}: {ex}", file=sys.stderr)
            return 2

    res = translate_sources(sources, bootstrap=not args.no_bootstrap)

    for d in res.diagnostics:
        print(d, file=sys.stderr)
    if has_errors(res.diagnostics):
        return 1

    out_path = args.output or f"{program}.asm"
    try:
        write_asm(res.lines, out_path)
    except OSError as ex:
        print(f"ERROR al escribir salida: {ex}", file=sys.stderr)
        return 3

    print(f"OK: {len(files)} archivo(s) VM → {out_path}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())

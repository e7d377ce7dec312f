from __future__ import annotations
import argparse, sys
from pathlib import Path
from typing import Tuple

from .parser import parse
from .linker import first_pass, LinkResult
from .encoding import encode, EncodeResult
from .isa import VAR_BASE
from .writers import write_hack

def assemble_text(text: str, *, filename: str | None = None,
                  var_base: int = VAR_BASE) -> Tuple[list, list, LinkResult, EncodeResult]:
    """Parsea, hace PASADA 1 (etiquetas) y PASADA 2 (variables + codificación).
    Devuelve (nodes, diagnostics_totales, link_result, enc_result).

    Cada llamada usa una tabla de símbolos nueva; dos llamadas con el mismo
    texto producen exactamente las mismas palabras."""
    nodes = parse(text)
    link = first_pass(nodes, var_base=var_base, filename=filename)
    enc = encode(nodes, link.symtab, filename=filename)
    link.symtab.freeze()
    diags = list(link.diagnostics) + list(enc.diagnostics)
    return nodes, diags, link, enc

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Hack two-pass assembler")
    ap.add_argument("source", help="archivo .asm de entrada")
    ap.add_argument("-o", "--output", help="archivo .hack de salida (por defecto, junto al .asm)")
    args = ap.parse_args(argv)

    try:
        with open(args.source, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as ex:
        print(f"ERROR: no pude leer {args.source}: {ex}", file=sys.stderr)
        return 2

    nodes, diags, link, enc = assemble_text(text, filename=args.source)

    had_error = False
    for d in diags:
        # imprimimos todo; si hay error, no se escribe el .hack
        print(d, file=sys.stderr)
        if d.severity == "error":
            had_error = True

    if had_error:
        return 1

    out_path = args.output or str(Path(args.source).with_suffix(".hack"))
    try:
        write_hack(enc.words, out_path)
    except OSError as ex:
        print(f"ERROR al escribir salida: {ex}", file=sys.stderr)
        return 3

    print(f"OK: {len(enc.words)} instrucciones → {out_path}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())

from src.hack_toolchain.diagnostics import error, warning, has_errors, TranslationError

def test_error_str():
    d = error("expresión comp desconocida", kind="MalformedComputeInstruction", line=12,
              file="prog.asm", hint="revise la tabla comp", source="D=D*A")
    s = str(d)
    assert "prog.asm:12:" in s
    assert "ERROR[MalformedComputeInstruction]: expresión comp desconocida" in s
    assert "(pista: revise la tabla comp)" in s
    assert s.endswith("-> 'D=D*A'")

def test_warning_is_not_error():
    assert not has_errors([warning("aviso")])
    assert has_errors([warning("aviso"), error("fallo")])

def test_translation_error_to_diagnostic():
    ex = TranslationError("UnknownSegment", "Segmento desconocido: 'heap'")
    d = ex.to_diagnostic(line=3, file="Main.vm", source="push heap 0")
    assert d.kind == "UnknownSegment"
    assert d.line == 3 and d.file == "Main.vm"
    assert d.severity == "error"

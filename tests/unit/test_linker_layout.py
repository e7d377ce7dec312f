import pytest
from src.hack_toolchain.parser import parse
from src.hack_toolchain.linker import first_pass, SymbolTable

def test_labels_do_not_advance_pc():
    src = """
    (LOOP)
    @LOOP
    0;JMP
    (END)
    @END
    0;JMP
    """
    r = first_pass(parse(src))
    assert not r.diagnostics
    assert r.symtab.get("LOOP") == 0
    assert r.symtab.get("END") == 2
    assert r.size == 4
    assert r.symtab.labels == {"LOOP": 0, "END": 2}

def test_duplicate_and_predefined_labels():
    src = "(L)\n@1\n(L)\n@2\n(SP)\n"
    r = first_pass(parse(src), filename="dup.asm")
    kinds = [d.kind for d in r.diagnostics]
    assert kinds == ["DuplicateLabel", "DuplicateLabel"]
    assert r.diagnostics[0].line == 3
    # el primero gana y el predefinido nunca se sobrescribe
    assert r.symtab.get("L") == 0
    assert r.symtab.get("SP") == 0

def test_variables_allocated_in_first_appearance_order():
    t = SymbolTable()
    assert t.resolve("foo") == 16
    assert t.resolve("bar") == 17
    assert t.resolve("foo") == 16
    assert t.resolve("SCREEN") == 16384
    assert t.variables == {"foo": 16, "bar": 17}

def test_custom_variable_base():
    t = SymbolTable(var_base=1024)
    assert t.resolve("x") == 1024

def test_frozen_table_rejects_unknown_symbols():
    t = SymbolTable()
    t.resolve("known")
    t.freeze()
    assert t.resolve("known") == 16
    with pytest.raises(KeyError):
        t.resolve("nuevo")
    with pytest.raises(RuntimeError):
        t.bind_label("TARDE", 3)

def test_fresh_tables_are_independent():
    a, b = SymbolTable(), SymbolTable()
    a.resolve("x")
    assert "x" in a and "x" not in b
    assert b.resolve("y") == 16

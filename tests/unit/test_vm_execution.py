from src.hack_toolchain.translator import translate_sources, translate_text
from src.hack_toolchain.assembler import assemble_text
from src.hack_toolchain.cpu import HackCPU

def _build(sources, *, bootstrap):
    res = translate_sources(sources, bootstrap=bootstrap)
    assert not [d for d in res.diagnostics if d.severity == "error"]
    nodes, diags, link, enc = assemble_text("\n".join(res.lines))
    assert not diags
    return HackCPU([w.word for w in enc.words]), link.symtab

def _run_bare(src: str, **ram):
    cpu, symtab = _build([("Test.vm", src)], bootstrap=False)
    cpu.poke(0, 256)
    for name, value in ram.items():
        cpu.poke(symtab.get(name), value)
    cpu.run()
    return cpu, symtab

def _top(cpu, depth=1):
    return cpu.peek_signed(cpu.ram[0] - depth)

def test_push_push_add():
    cpu, _ = _run_bare("push constant 7\npush constant 8\nadd\n")
    assert cpu.ram[0] == 257
    assert _top(cpu) == 15

def test_arithmetic_and_logic():
    src = """
    push constant 10
    push constant 3
    sub
    neg
    push constant 12
    push constant 10
    and
    push constant 5
    or
    not
    """
    cpu, _ = _run_bare(src)
    assert _top(cpu, 2) == -7
    assert _top(cpu, 1) == ~(12 & 10 | 5)

def test_comparisons():
    src = """
    push constant 4
    push constant 4
    eq
    push constant 4
    push constant 5
    eq
    push constant 9
    push constant 2
    gt
    push constant 2
    push constant 9
    gt
    push constant 2
    push constant 9
    lt
    """
    cpu, _ = _run_bare(src)
    assert [cpu.peek_signed(a) for a in range(256, 261)] == [-1, 0, -1, 0, -1]

def test_segments():
    src = """
    push constant 21
    pop local 2
    push constant 22
    pop argument 1
    push constant 3030
    pop pointer 0
    push constant 4040
    pop pointer 1
    push constant 36
    pop this 6
    push constant 45
    pop that 5
    push constant 510
    pop temp 6
    push local 2
    push that 5
    add
    push argument 1
    sub
    push this 6
    push this 6
    add
    sub
    push temp 6
    add
    """
    cpu, symtab = _run_bare(src, LCL=300, ARG=400)
    assert cpu.ram[302] == 21
    assert cpu.ram[401] == 22
    assert cpu.ram[3] == 3030 and cpu.ram[4] == 4040
    assert cpu.ram[3036] == 36 and cpu.ram[4045] == 45
    assert cpu.ram[11] == 510
    assert cpu.ram[0] == 257
    assert _top(cpu) == 482

def test_if_goto_loop():
    # suma 1..5 en local 0
    src = """
    push constant 0
    pop local 0
    push constant 5
    pop local 1
    label LOOP
    push local 0
    push local 1
    add
    pop local 0
    push local 1
    push constant 1
    sub
    pop local 1
    push local 1
    if-goto LOOP
    push local 0
    """
    cpu, _ = _run_bare(src, LCL=300)
    assert _top(cpu) == 15
    assert cpu.ram[0] == 257

def test_call_return_balance():
    src = """
    function Sys.init 0
    push constant 3000
    pop pointer 0
    push constant 4000
    pop pointer 1
    push constant 10
    push constant 20
    push constant 30
    call Main.add 2
    label END
    goto END
    function Main.add 1
    push argument 0
    push argument 1
    add
    pop local 0
    push local 0
    push constant 99
    pop pointer 0
    return
    """
    cpu, symtab = _build([("Main.vm", src)], bootstrap=True)
    call_pc = symtab.get("Main.add")
    end_pc = symtab.get("END")

    # estado justo al entrar en Sys.init
    cpu.run(until=lambda c: c.pc == symtab.get("Sys.init"))
    assert cpu.ram[0] == 261 and cpu.ram[1] == 261 and cpu.ram[2] == 256

    cpu.run(until=lambda c: c.pc == call_pc)
    # dentro del llamado: ARG apunta al primer argumento y LCL tras el marco
    assert cpu.ram[2] == 262
    assert cpu.ram[1] == 269

    cpu.run(until=lambda c: c.pc == end_pc)
    # SP previo = 264 ; 264 - 2 + 1 = 263
    assert cpu.ram[0] == 263
    assert cpu.ram[262] == 50
    assert cpu.ram[261] == 10
    assert (cpu.ram[1], cpu.ram[2], cpu.ram[3], cpu.ram[4]) == (261, 256, 3000, 4000)

def test_recursive_fibonacci():
    src = """
    function Sys.init 0
    push constant 6
    call Main.fib 1
    label HALT
    goto HALT
    function Main.fib 0
    push argument 0
    push constant 2
    lt
    if-goto BASE
    push argument 0
    push constant 1
    sub
    call Main.fib 1
    push argument 0
    push constant 2
    sub
    call Main.fib 1
    add
    return
    label BASE
    push argument 0
    return
    """
    cpu, symtab = _build([("Main.vm", src)], bootstrap=True)
    cpu.run(until=lambda c: c.pc == symtab.get("HALT"))
    assert cpu.ram[0] == 262
    assert cpu.ram[261] == 8

def test_function_zeroes_locals():
    src = """
    function Sys.init 0
    call Main.f 0
    label HALT
    goto HALT
    function Main.f 3
    push local 0
    push local 1
    add
    push local 2
    add
    return
    """
    cpu, symtab = _build([("Main.vm", src)], bootstrap=True)
    # basura previa en la zona de la pila donde vivirán los locales
    for addr in range(266, 270):
        cpu.poke(addr, 7)
    cpu.run(until=lambda c: c.pc == symtab.get("HALT"))
    assert cpu.ram[261] == 0

def test_static_isolation_between_files():
    cpu, symtab = _build([("A.vm", "push constant 11\npop static 0\n"),
                          ("B.vm", "push constant 22\npop static 0\npush static 0\n")],
                         bootstrap=False)
    cpu.poke(0, 256)
    cpu.run()
    assert symtab.get("A.0") != symtab.get("B.0")
    assert cpu.ram[symtab.get("A.0")] == 11
    assert cpu.ram[symtab.get("B.0")] == 22
    assert _top(cpu) == 22

def test_full_pipeline_is_byte_identical():
    src = "function Sys.init 0\npush constant 1\npush constant 2\nlt\npush constant 3\neq\nlabel L\ngoto L\n"
    first = translate_text(src)
    second = translate_text(src)
    a = assemble_text("\n".join(first.lines))[3]
    b = assemble_text("\n".join(second.lines))[3]
    assert [w.word for w in a.words] == [w.word for w in b.words]

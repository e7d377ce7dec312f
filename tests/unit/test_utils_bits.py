from src.hack_toolchain.utils import u16, sign_extend, is_unsigned_nbit, to_bin16

def test_u16_and_formats():
    assert u16(-1) == 0xFFFF
    assert to_bin16(1) == "0" * 15 + "1"
    assert to_bin16(-1) == "1" * 16

def test_sign_extend():
    assert sign_extend(0xFFFF) == -1
    assert sign_extend(0x7FFF) == 32767
    assert sign_extend(0x80, 8) == -128

def test_nbit_checks():
    assert is_unsigned_nbit(32767, 15)
    assert not is_unsigned_nbit(32768, 15)
    assert not is_unsigned_nbit(-1, 15)

from v8sym.messages import *

def test_split_record_keeps_quoted_name():
    fields = split_record('code-creation,LazyCompile,0x3e8,50,"compute app.js:10"')
    assert fields == ["code-creation", "LazyCompile", "0x3e8", "50", "compute app.js:10"]

def test_split_record_with_comma_in_name():
    fields = split_record('code-creation,Function,0x10,4,"a, b"')
    assert fields[-1] == "a, b"

def test_parse_address():
    assert parse_address("0x1a") == AddressField(0x1a, False)
    assert parse_address("1a") == AddressField(0x1a, False)
    assert parse_address("+1a") == AddressField(0x1a, True)
    assert parse_address("-20") == AddressField(-0x20, True)

def test_code_creation():
    rec = decompose_code_creation(["code-creation", "Builtin", "+100", "16", "ArrayPush"])
    assert rec == CodeCreation("Builtin", AddressField(0x100, True), 16, "ArrayPush")

def test_code_creation_rejects_bad_fields(capsys):
    assert decompose_code_creation(["code-creation", "Builtin", "0x10"]) is None
    assert decompose_code_creation(["code-creation", "Builtin", "zz", "4", "f"]) is None
    assert decompose_code_creation(["code-creation", "Builtin", "0x10", "-4", "f"]) is None
    assert decompose_code_creation(["code-creation", "", "0x10", "4", "f"]) is None
    assert capsys.readouterr().out.count("[-]") == 4

def test_code_move_and_delete():
    assert decompose_code_move(["code-move", "0x10", "+20"]) == CodeMove(AddressField(0x10, False), AddressField(0x20, True))
    assert decompose_code_delete(["code-delete", "-8"]) == CodeDelete(AddressField(-8, True))
    assert decompose_code_move(["code-move", "0x10"]) is None
    assert decompose_code_delete(["code-delete"]) is None

def test_shared_library():
    rec = decompose_shared_library(["shared-library", "/lib/libc.so.6", "0x7f00", "0x7fff"])
    assert rec == SharedLibrary("/lib/libc.so.6", AddressField(0x7f00, False), AddressField(0x7fff, False))
    assert decompose_shared_library(["shared-library", "", "0x1", "0x2"]) is None

def test_tick():
    rec = decompose_tick(["tick", "0x401", "0x7ff0", "0", "0x4e8", "+8", ""])
    assert rec.pc == AddressField(0x401, False)
    assert rec.sp == AddressField(0x7ff0, False)
    assert rec.vm_state == 0
    assert rec.stack == [AddressField(0x4e8, False), AddressField(8, True)]

def test_tick_without_stack():
    assert decompose_tick(["tick", "0x401", "0x7ff0", "2"]).stack == []

def test_tick_rejects_bad_frames():
    assert decompose_tick(["tick", "0x401", "0x7ff0", "0", "nope"]) is None
    assert decompose_tick(["tick", "0x401", "0x7ff0", "js"]) is None
    assert decompose_tick(["tick", "0x401"]) is None

import pytest
from v8sym.aliases import AliasEntry, AliasTable

def test_resolve_then_lookup_by_value():
    table = AliasTable("symbol-type")
    entry = table.resolve("LazyCompile")
    assert table.lookup_by_value(entry.value).name == "LazyCompile"

def test_resolve_is_idempotent():
    table = AliasTable("symbol-type")
    first = table.resolve("LazyCompile")
    table.resolve("Builtin")
    assert table.resolve("LazyCompile") == first
    assert len(table) == 2

def test_codes_follow_first_sight():
    table = AliasTable("action")
    codes = [table.resolve(n).value for n in ("code-creation", "tick", "code-creation", "code-move")]
    assert codes == [0, 1, 0, 2]
    assert [e.name for e in table] == ["code-creation", "tick", "code-move"]

def test_unknown_code_not_found():
    table = AliasTable("symbol-type")
    table.resolve("Stub")
    assert table.lookup_by_value(1) is None
    assert table.lookup_by_value(-1) is None
    assert table.lookup("Builtin") is None

def test_categories_are_isolated():
    types = AliasTable("symbol-type")
    actions = AliasTable("action")
    types.resolve("Builtin")
    assert actions.resolve("tick").value == 0
    assert actions.lookup("Builtin") is None

def test_entry_str():
    assert str(AliasEntry("Builtin", 3)) == "Builtin:3"

def test_empty_category_rejected():
    with pytest.raises(ValueError):
        AliasTable("")

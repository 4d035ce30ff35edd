import pytest
from v8sym.common import AddressSpan, report, reporting_to

def test_disjoint_spans_are_ordered():
    a = AddressSpan(100, 10)
    b = AddressSpan(200, 10)
    assert b.compare(a) == -1
    assert a.compare(b) == 1

def test_overlapping_spans_compare_equal_both_ways():
    a = AddressSpan(100, 50)
    b = AddressSpan(120, 100)
    assert a.compare(b) == 0
    assert b.compare(a) == 0

def test_touching_spans_compare_equal():
    a = AddressSpan(100, 50)
    b = AddressSpan(150, 10)
    assert a.compare(b) == 0
    assert b.compare(a) == 0

def test_zero_length_probe_matches_containing_span():
    span = AddressSpan(0x1000, 0x40)
    assert span.compare(AddressSpan(0x1020, 0)) == 0
    assert span.compare(AddressSpan(0xfff, 0)) == -1
    assert span.compare(AddressSpan(0x1041, 0)) == 1

def test_comparison_is_not_transitive():
    a = AddressSpan(0, 10)
    b = AddressSpan(10, 10)
    c = AddressSpan(20, 10)
    assert a.compare(b) == 0
    assert b.compare(c) == 0
    assert a.compare(c) != 0

def test_contains_is_half_open():
    span = AddressSpan(100, 50)
    assert span.contains(100)
    assert span.contains(149)
    assert not span.contains(99)
    assert not span.contains(150)

def test_overlaps_needs_a_shared_byte():
    assert AddressSpan(100, 50).overlaps(AddressSpan(149, 2))
    assert not AddressSpan(100, 50).overlaps(AddressSpan(150, 2))
    assert AddressSpan(100, 50).overlaps(AddressSpan(120, 0))
    assert AddressSpan(120, 0).overlaps(AddressSpan(100, 50))
    assert not AddressSpan(150, 0).overlaps(AddressSpan(100, 50))

def test_large_addresses():
    span = AddressSpan(0x7f3a_0000_1000, 0x20)
    assert span.end == 0x7f3a_0000_1020
    assert span.contains(0x7f3a_0000_101f)

def test_negative_length_rejected():
    with pytest.raises(ValueError):
        AddressSpan(100, -1)

def test_str():
    assert str(AddressSpan(0x10, 0x20)) == "0x10-0x30"

def test_reporting_to_redirects_diagnostics(capsys):
    lines = []
    with reporting_to(lines.append):
        report("[-] bad record")
    report("[+] back to stdout")
    assert lines == ["[-] bad record"]
    assert capsys.readouterr().out == "[+] back to stdout\n"

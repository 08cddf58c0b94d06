from jagacuan.currency import format_rupiah, format_rupiah_short


def test_format_rupiah_uses_dot_grouping():
    assert format_rupiah(1250000) == "Rp 1.250.000"
    assert format_rupiah(0) == "Rp 0"
    assert format_rupiah(-5000) == "-Rp 5.000"
    assert format_rupiah("bukan angka") == "Rp 0"


def test_format_rupiah_short():
    assert format_rupiah_short(1_500_000_000) == "Rp 1.5B"
    assert format_rupiah_short(2_300_000) == "Rp 2.3M"
    assert format_rupiah_short(12_000) == "Rp 12.0K"
    assert format_rupiah_short(500) == "Rp 500"

import pytest

from vectorpaint.font import FontFamily, FontStyle, FontWeight


@pytest.mark.parametrize(
    "family, name",
    [
        (FontFamily.SERIF, "serif"),
        (FontFamily.SANS_SERIF, "sans-serif"),
        (FontFamily.SYSTEM_UI, "system-ui"),
        (FontFamily.MONOSPACE, "monospace"),
    ],
)
def test_generic_names(family, name):
    assert family.name() == name
    assert family.is_generic()


def test_named_family():
    fam = FontFamily.new_unchecked("Fira Sans")
    assert fam.name() == "Fira Sans"
    assert not fam.is_generic()


def test_named_family_distinct_from_generic_with_same_name():
    named = FontFamily.new_unchecked("serif")
    assert named.name() == FontFamily.SERIF.name()
    assert named.is_generic() is False
    assert (named == FontFamily.SERIF) is False
    other = FontFamily.new_unchecked("Fira Sans")
    assert (other == FontFamily.new_unchecked("Fira Sans")) is True


def test_families_hashable():
    families = {FontFamily.SERIF, FontFamily.SERIF, FontFamily.new_unchecked("A")}
    assert len(families) == 2


def test_weight_clamping():
    assert FontWeight.new(0).to_raw() == 1
    assert FontWeight.new(5000).to_raw() == 1000
    assert FontWeight.new(321).to_raw() == 321


def test_weight_constants():
    assert FontWeight.REGULAR.to_raw() == 400
    assert FontWeight.NORMAL == FontWeight.REGULAR
    assert FontWeight.BOLD.to_raw() == 700
    assert FontWeight.HAIRLINE == FontWeight.THIN
    assert FontWeight.HEAVY == FontWeight.BLACK


def test_weight_ordering():
    weights = [FontWeight.new(700), FontWeight.new(300), FontWeight.new(400)]
    ordered = sorted(weights, key=lambda w: w.to_raw())
    assert [w.to_raw() for w in ordered] == [300, 400, 700]
    assert ordered == [FontWeight.LIGHT, FontWeight.REGULAR, FontWeight.BOLD]


def test_direct_weight_out_of_range_rejected():
    with pytest.raises(ValueError):
        FontWeight(0)


def test_font_style_members():
    assert FontStyle("italic") is FontStyle.ITALIC
    assert FontStyle.REGULAR != FontStyle.ITALIC
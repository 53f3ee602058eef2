# tests/core/test_score_decoder.py
import pytest
from bs4 import BeautifulSoup

from report_parser.errors import NumericFormatError, StructureError
from report_parser.services.score_decode_service import ScoreDecoder
from report_builder import score, split_score


def cell(inner: str):
    """Wraps rendered fragments in a <td> and returns the parsed tag."""
    return BeautifulSoup(f"<table><tr><td>{inner}</td></tr></table>", "html.parser").td


@pytest.fixture
def decoder():
    return ScoreDecoder()


@pytest.mark.parametrize("value", [0.0, 1.2, 3.4, 12.34, 99.99, -0.57])
def test_decode_reverses_rendering(decoder, value):
    """Rendering a value into int/frac fragments and decoding it gives the value back."""
    int_text, frac_text = split_score(value)
    assert decoder.decode(cell(score(int_text, frac_text))) == float(f"{int_text}{frac_text}")
    assert decoder.decode(cell(score(int_text, frac_text))) == pytest.approx(value)


def test_decode_keeps_separator_and_fragments_verbatim(decoder):
    assert decoder.decode(cell(score("12.", "34"))) == 12.34
    assert decoder.decode(cell(score("7.", "050"))) == 7.05


def test_comment_fragment_is_not_text(decoder):
    td = cell('<span class="int">5.</span><span class="frac"><!-- none --></span>')
    with pytest.raises(StructureError, match="child is not text"):
        decoder.decode(td)


def test_integer_part_without_separator_is_rejected(decoder):
    with pytest.raises(StructureError, match="doesn't end with"):
        decoder.decode(cell(score("12", "34")))


@pytest.mark.parametrize("inner, message", [
    ('<span class="int">1.</span>', "expected 2 score fragments"),
    (score("1.", "2") + '<span class="frac">3</span>', "expected 2 score fragments"),
    ('<div class="int">1.</div><span class="frac">2</span>', "expected <span>"),
    ('<span class="frac">1.</span><span class="frac">2</span>', "missing expected class 'int'"),
    ('<span class="int">1.</span><span class="int">2</span>', "missing expected class 'frac'"),
    ('<span class="int">1.<b>0</b></span><span class="frac">2</span>', "expected a single child"),
    ('<span class="int"><b>1.</b></span><span class="frac">2</span>', "child is not text"),
])
def test_malformed_fragments_raise_structure_error(decoder, inner, message):
    with pytest.raises(StructureError, match=message):
        decoder.decode(cell(inner))


def test_fragment_errors_carry_their_context(decoder):
    with pytest.raises(StructureError) as exc_info:
        decoder.decode(cell('<span class="int">1.</span><span class="bad">2</span>'))
    assert exc_info.value.context == ["parse action score frac"]
    assert str(exc_info.value).startswith("parse action score frac: ")


@pytest.mark.parametrize("int_text, frac_text", [
    ("1.", "2x"),
    ("1.", "2.5"),
    ("a.", "5"),
    ("1.", "2_0"),
    ("1.", " 5"),
    ("١.", "٥"),
    ("1.", "５"),
])
def test_invalid_number_raises_numeric_format_error(decoder, int_text, frac_text):
    with pytest.raises(NumericFormatError):
        decoder.decode(cell(score(int_text, frac_text)))

import pytest

from app.errors import EmptyInputError, InputTooLargeError, MissingSeparatorError
from app.normalize import (
    decode_body,
    denormalize_tsv,
    expand_line,
    group_values,
    iter_combinations,
    normalize_tsv,
    split_fields,
    split_lines,
    transform,
)
from app.rules import INVALID_MODE_MESSAGE
from app.validate import check_size, require_separator, require_text, validate_text


def test_split_fields_keeps_trailing_empties():
    assert split_fields("a\tb\t") == ["a", "b", ""]
    assert split_fields("plain") == ["plain"]
    assert split_fields("a::b", ":") == ["a", "", "b"]


def test_split_lines_any_newline():
    assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]
    assert split_lines("a\n\nb\n") == ["a", "", "b"]
    assert split_lines("") == []
    assert split_lines("\n\n") == []


def test_iter_combinations_last_field_fastest():
    cells = [["a", "b"], ["x", "y", "z"]]
    assert list(iter_combinations(cells)) == [
        ("a", "x"), ("a", "y"), ("a", "z"),
        ("b", "x"), ("b", "y"), ("b", "z"),
    ]


def test_expand_depth_first_order():
    assert normalize_tsv("a:b\tx:y") == "a\tx\na\ty\nb\tx\nb\ty\n"


def test_expand_cardinality_and_field_order():
    out = normalize_tsv("a:b:c\tx:y\tz").splitlines()
    assert len(out) == 3 * 2 * 1
    assert all(len(line.split("\t")) == 3 for line in out)
    assert all(line.endswith("\tz") for line in out)


def test_expand_empty_field_is_one_alternative():
    assert expand_line("a\t\tb:c") == ["a\t\tb", "a\t\tc"]
    assert expand_line("a:\tx") == ["a\tx", "\tx"]


def test_expand_preserves_line_order_and_blank_lines():
    assert normalize_tsv("k1\ta:b\n\nk2\tc\n") == "k1\ta\nk1\tb\n\nk2\tc\n"


def test_expand_line_without_tab_is_single_field():
    assert normalize_tsv("a:b\n") == "a\nb\n"


def test_aggregate_groups_in_first_seen_order():
    assert denormalize_tsv("k1\tv1\nk2\tv2\nk1\tv3\n") == "k1\tv1:v3\nk2\tv2\n"


def test_aggregate_drops_short_lines():
    assert denormalize_tsv("onlykey\n") == ""
    assert denormalize_tsv("k\tv\n\nonlykey\n") == "k\tv\n"


def test_aggregate_ignores_extra_fields():
    assert group_values(["k\tv\textra", "k\tw"]) == {"k": ["v", "w"]}


def test_aggregate_mixed_newlines():
    assert denormalize_tsv("k1\tv1\r\nk2\tv2\rk1\tv3") == "k1\tv1:v3\nk2\tv2\n"


def test_empty_input():
    assert normalize_tsv("") == ""
    assert denormalize_tsv("") == ""


def test_round_trip_single_valued():
    doc = "k1\tv1\nk2\tv2\nk3\t\n"
    assert denormalize_tsv(normalize_tsv(doc)) == doc


def test_round_trip_multi_valued():
    aggregated = "k1\ta:b\nk2\tc\n"
    assert denormalize_tsv(normalize_tsv(aggregated)) == aggregated


def test_reaggregation_is_noop():
    once = denormalize_tsv("k1\tv1\nk2\tv2\nk1\tv3\nk2\tv4\n")
    assert denormalize_tsv(once) == once


def test_transform_dispatch():
    assert transform("k\ta:b", "normalize") == "k\ta\nk\tb\n"
    assert transform("k\ta\nk\tb", "denormalize") == "k\ta:b\n"
    assert transform("k\ta:b", None) == "k\ta\nk\tb\n"
    assert transform("k\ta", "sideways") == INVALID_MODE_MESSAGE
    assert transform("k\ta", "") == INVALID_MODE_MESSAGE


def test_decode_body():
    assert decode_body(b"") == ""
    assert decode_body(b"\xef\xbb\xbfk\tv\n") == "k\tv\n"
    assert decode_body("キー\t値\n".encode("utf-8")) == "キー\t値\n"


def test_decode_body_latin1():
    raw = "name\tcity\nPaul\tMontréal\nZoé\tQuébec\n".encode("latin-1")
    assert "Montréal" in decode_body(raw)


def test_require_text():
    with pytest.raises(EmptyInputError):
        require_text("")
    with pytest.raises(EmptyInputError):
        require_text(None)
    assert require_text("k\tv") == "k\tv"


def test_require_separator_reports_line():
    with pytest.raises(MissingSeparatorError) as exc:
        require_separator("a\tb\nnope\n")
    assert exc.value.line_number == 2
    assert "line 2" in exc.value.message


def test_require_separator_allows_blank_lines():
    require_separator("a\tb\n\n   \nc\td\n")
    assert validate_text("a\tb\n") == "a\tb\n"


def test_check_size():
    check_size(b"1234", 4)
    with pytest.raises(InputTooLargeError) as exc:
        check_size(b"12345", 4)
    assert exc.value.status_code == 413

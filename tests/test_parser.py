"""Test the parameter file grammar."""

from __future__ import annotations

import pytest
from parfile.core.errors import (
    DepthExceededError,
    DuplicateFieldError,
    ParameterSyntaxError,
    RaggedArrayError,
)
from parfile.core.scalar import ValueKind
from parfile.core.scanner import parse_text


def only(text: str):
    fields = parse_text(text)
    assert len(fields) == 1
    return fields[0]


def test_single_integer():
    field = only("size 128")
    assert field.name == "size"
    assert field.is_single_field()
    assert field.get_variable().as_int() == 128


def test_quoted_string_keeps_spaces():
    field = only('name "hello world"')
    value = field.get_variable()
    assert value.kind is ValueKind.STRING
    assert value.as_str() == "hello world"


def test_quoted_escapes():
    field = only(r'msg "say \"hi\" to C:\\tmp"')
    assert field.get_variable().as_str() == 'say "hi" to C:\\tmp'


def test_one_dimensional_array():
    field = only("box { 1 2 3 }")
    assert field.num_dim == 1
    assert field.dim_sizes == (3,)
    assert field.get_variable(1).as_int() == 2


def test_two_dimensional_array():
    field = only("mat { {1 2} {3 4} }")
    assert field.num_dim == 2
    assert field.dim_sizes == (2, 2)
    assert field.get_variable(1, 0).as_int() == 3


def test_braces_need_no_spaces():
    field = only("mat {{1 2}{3 4}{5 6}}")
    assert field.dim_sizes == (3, 2)
    assert [v.as_int() for v in field.values] == [1, 2, 3, 4, 5, 6]


def test_mixed_kinds_and_quotes_in_array():
    field = only('files { "a b" plain 3 0.5 }')
    kinds = [v.kind for v in field.values]
    assert kinds == [ValueKind.STRING, ValueKind.STRING, ValueKind.INTEGER, ValueKind.FLOAT]
    assert field.get_variable(0).as_str() == "a b"


def test_empty_group():
    field = only("nothing { }")
    assert field.dim_sizes == (0,)
    assert field.values == ()


def test_comments_and_blank_lines_skipped():
    fields = parse_text(
        """
# header comment
   # indented comment

a 1
\t
b 2.5
"""
    )
    assert [f.name for f in fields] == ["a", "b"]


def test_preserves_file_order():
    fields = parse_text("zeta 1\nalpha 2\nmid 3\n")
    assert [f.name for f in fields] == ["zeta", "alpha", "mid"]


def test_ragged_array_fails():
    with pytest.raises(RaggedArrayError, match="not constant"):
        parse_text("mat { {1 2} {3} }")


def test_ragged_inner_depth_fails():
    with pytest.raises(RaggedArrayError):
        parse_text("t { { {1 2} {3 4} } { {5 6} {7} } }")


def test_ragged_with_empty_sibling_fails():
    with pytest.raises(RaggedArrayError):
        parse_text("mat { {1 2} { } }")


def test_values_mixed_with_groups_fail():
    with pytest.raises(RaggedArrayError, match="mixes"):
        parse_text("m { {1 2} 3 }")
    with pytest.raises(RaggedArrayError, match="mixes"):
        parse_text("m { 3 {1 2} }")


def test_group_deeper_than_first_leaf_fails():
    with pytest.raises(DepthExceededError):
        parse_text("m { {1 2} {{3 4}} }")


def test_sixteen_levels_succeed():
    field = only("deep " + "{" * 16 + " 1 " + "}" * 16)
    assert field.num_dim == 16
    assert field.dim_sizes == (1,) * 16
    assert field.get_variable(*([0] * 16)).as_int() == 1


def test_seventeen_levels_fail():
    with pytest.raises(DepthExceededError, match="maximum depth"):
        parse_text("deep " + "{" * 17 + " 1 " + "}" * 17)


def test_duplicate_name_fails_at_second_definition():
    with pytest.raises(DuplicateFieldError, match='"x" already defined') as info:
        parse_text("x 1\ny 2\nx 1\n", filename="run.par")
    assert info.value.line == 3
    assert info.value.filename == "run.par"
    assert str(info.value).startswith("run.par:3:")


def test_duplicate_with_different_shape_fails():
    with pytest.raises(DuplicateFieldError):
        parse_text("x 1\nx { 1 2 }\n")


def test_duplicates_are_case_sensitive():
    fields = parse_text("x 1\nX 2\n")
    assert [f.name for f in fields] == ["x", "X"]


def test_unterminated_quote_fails():
    with pytest.raises(ParameterSyntaxError, match="quotation mark"):
        parse_text('name "hello\nother 1\n')


def test_missing_closing_brace_fails():
    with pytest.raises(ParameterSyntaxError, match="Missing closing"):
        parse_text("box { 1 2 3\n")


def test_group_may_not_span_lines():
    with pytest.raises(ParameterSyntaxError, match="Missing closing"):
        parse_text("box { 1 2\n 3 }\n")


def test_trailing_data_fails():
    with pytest.raises(ParameterSyntaxError, match="Unexpected data"):
        parse_text("size 128 256")
    with pytest.raises(ParameterSyntaxError, match="Unexpected data"):
        parse_text("box { 1 2 } 3")
    with pytest.raises(ParameterSyntaxError, match="Unexpected data"):
        parse_text("size 12}")


def test_trailing_comment_is_data():
    with pytest.raises(ParameterSyntaxError):
        parse_text("size 128 # comment")


def test_missing_value_fails():
    with pytest.raises(ParameterSyntaxError, match="Unexpected end of line"):
        parse_text("size\n")


def test_stray_closing_brace_fails():
    with pytest.raises(ParameterSyntaxError):
        parse_text("size }")
    with pytest.raises(ParameterSyntaxError, match="variable name"):
        parse_text("} 1")


def test_text_after_quote_fails():
    with pytest.raises(ParameterSyntaxError, match="after quoted"):
        parse_text('name "a"b')


def test_trailing_blanks_and_crlf_allowed():
    fields = parse_text("a 1  \t\r\nb { 1 2 }\r\n")
    assert [f.name for f in fields] == ["a", "b"]

"""Tests for ``${{ }}`` expression recognition."""

from __future__ import annotations

import pytest

from gha_models.expressions import (
    ExpressionKind,
    classify,
    contains_expression,
    extract_all,
    is_explicit,
    strip_fence,
)


class TestContainsExpression:
    """Test suite for contains_expression()."""

    def test_fenced_expression(self) -> None:
        assert contains_expression("${{ github.sha }}") is True

    def test_embedded_expression(self) -> None:
        assert contains_expression("dist/${{ env.name }}.tar.gz") is True

    def test_unterminated_fence_is_not_an_expression(self) -> None:
        assert contains_expression("echo ${{ oops") is False

    def test_plain_text(self) -> None:
        assert contains_expression("ubuntu-latest") is False

    def test_shell_variable_is_not_an_expression(self) -> None:
        assert contains_expression("echo ${HOME}") is False


class TestIsExplicit:
    """Test suite for is_explicit()."""

    def test_whole_value(self) -> None:
        assert is_explicit("${{ matrix.python }}") is True

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert is_explicit("  ${{ matrix.python }}\n") is True

    def test_no_inner_spaces(self) -> None:
        assert is_explicit("${{inputs.ref}}") is True

    def test_two_expressions_are_not_explicit(self) -> None:
        assert is_explicit("${{ a }}-${{ b }}") is False

    def test_prefix_text_is_not_explicit(self) -> None:
        assert is_explicit("v${{ a }}") is False


class TestStripFence:
    """Test suite for strip_fence()."""

    def test_returns_trimmed_body(self) -> None:
        assert strip_fence("${{  fromJSON(inputs.runner)  }}") == "fromJSON(inputs.runner)"

    def test_rejects_interpolated_text(self) -> None:
        with pytest.raises(ValueError, match="not a fenced expression"):
            strip_fence("a ${{ b }}")


class TestExtractAll:
    """Test suite for extract_all()."""

    def test_returns_bodies_in_order(self) -> None:
        text = "python -m tox -e ${{ matrix.toxenv }} --ref ${{ github.ref }}"
        assert extract_all(text) == ["matrix.toxenv", "github.ref"]

    def test_spans_lines(self) -> None:
        text = "${{\n    github.workflow\n}}-${{ github.ref_type }}"
        assert extract_all(text) == ["github.workflow", "github.ref_type"]

    def test_empty_string(self) -> None:
        assert extract_all("") == []


class TestClassify:
    """Test suite for classify()."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("${{ matrix.os }}", ExpressionKind.EXPLICIT),
            ("${{ a }} and ${{ b }}", ExpressionKind.INTERPOLATED),
            ("dist/${{ env.name }}", ExpressionKind.INTERPOLATED),
            ("ubuntu-latest", None),
            ("success()", None),
        ],
    )
    def test_value_fields(self, text: str, expected: ExpressionKind | None) -> None:
        assert classify(text) is expected

    def test_condition_makes_bare_strings_implicit(self) -> None:
        assert classify("success()", condition=True) is ExpressionKind.IMPLICIT
        assert (
            classify("github.event_name == 'push'", condition=True)
            is ExpressionKind.IMPLICIT
        )

    def test_condition_keeps_fenced_forms(self) -> None:
        assert classify("${{ always() }}", condition=True) is ExpressionKind.EXPLICIT

"""Tests for tagged-union resolution by key presence."""

from __future__ import annotations

import pytest

from gha_models.config import ParserSettings
from gha_models.exceptions import (
    AmbiguousShapeError,
    TypeMismatchError,
    UnrecognizedShapeError,
)
from gha_models.reader import Cursor, MappingReader, ParseState
from gha_models.tree import compose_document
from gha_models.unions import Variant, resolve_exclusive, resolve_variant


def make_cursor(text: str) -> Cursor:
    return Cursor(compose_document(text), ParseState(settings=ParserSettings()))


RUN = Variant(
    "Run",
    lambda reader: ("Run", reader.ordered_keys()),
    required=frozenset({"run"}),
    forbidden=frozenset({"with"}),
)
USES = Variant(
    "Uses",
    lambda reader: ("Uses", reader.ordered_keys()),
    required=frozenset({"uses"}),
    forbidden=frozenset({"shell"}),
)
VARIANTS = (RUN, USES)


class TestVariant:
    """Test suite for Variant.claims() and Variant.conflicts()."""

    def test_required_keys_claim(self) -> None:
        assert RUN.claims(frozenset({"run", "name"})) is True
        assert RUN.claims(frozenset({"name"})) is False

    def test_any_of_needs_one_key(self) -> None:
        job = Variant("Job", lambda reader: None, any_of=frozenset({"runs-on", "steps"}))
        assert job.claims(frozenset({"steps"})) is True
        assert job.claims(frozenset({"runs-on", "steps"})) is True
        assert job.claims(frozenset({"uses"})) is False

    def test_conflicts(self) -> None:
        assert RUN.conflicts(frozenset({"run", "with", "id"})) == frozenset({"with"})


class TestResolveVariant:
    """Test suite for resolve_variant()."""

    def test_selects_single_claimer(self) -> None:
        name, keys = resolve_variant(make_cursor("run: make\nname: build"), "step", VARIANTS)
        assert name == "Run"
        assert keys == ["run", "name"]

    def test_two_claimers_are_ambiguous(self) -> None:
        with pytest.raises(AmbiguousShapeError) as exc_info:
            resolve_variant(make_cursor("run: make\nuses: a/b@v1"), "step", VARIANTS)
        assert exc_info.value.candidates == ("Run", "Uses")
        assert exc_info.value.present_keys == frozenset({"run", "uses"})

    def test_null_valued_discriminator_counts(self) -> None:
        with pytest.raises(AmbiguousShapeError):
            resolve_variant(make_cursor("run: make\nuses:"), "step", VARIANTS)

    def test_no_claimer_is_unrecognized(self) -> None:
        with pytest.raises(UnrecognizedShapeError) as exc_info:
            resolve_variant(make_cursor("name: lonely"), "step", VARIANTS)
        assert exc_info.value.what == "step"
        assert "name" in str(exc_info.value)

    def test_forbidden_key_is_unrecognized(self) -> None:
        with pytest.raises(UnrecognizedShapeError) as exc_info:
            resolve_variant(make_cursor("run: make\nwith: {a: 1}"), "step", VARIANTS)
        assert "with not allowed in Run" in exc_info.value.detail

    def test_non_mapping_is_mismatch(self) -> None:
        with pytest.raises(TypeMismatchError):
            resolve_variant(make_cursor("[run]"), "step", VARIANTS)


class TestResolveExclusive:
    """Test suite for resolve_exclusive()."""

    def test_one_present(self) -> None:
        reader = MappingReader(make_cursor("branches-ignore: [dev]"))
        assert resolve_exclusive(reader, "filter", "branches", "branches-ignore") == (
            "branches-ignore"
        )

    def test_none_present(self) -> None:
        reader = MappingReader(make_cursor("tags: [v1]"))
        assert resolve_exclusive(reader, "filter", "branches", "branches-ignore") is None

    def test_both_present(self) -> None:
        reader = MappingReader(make_cursor("branches: [main]\nbranches-ignore: [dev]"))
        with pytest.raises(AmbiguousShapeError) as exc_info:
            resolve_exclusive(reader, "push branch filter", "branches", "branches-ignore")
        assert exc_info.value.candidates == ("branches", "branches-ignore")

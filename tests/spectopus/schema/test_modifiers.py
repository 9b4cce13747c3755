"""Tests for spectopus.schema.modifiers."""

from __future__ import annotations

from spectopus.schema.modifiers import (
    Modifiers,
    apply_modifiers,
    fold_null_allowance,
    make_nullable,
)
from spectopus.schema.options import ConversionOptions


class TestMakeNullable:
    """Widening nodes to accept null."""

    def test_scalar_type(self) -> None:
        """Scalar types become a two-element list."""
        assert make_nullable({"type": "integer", "minimum": 0}) == {
            "type": ["integer", "null"],
            "minimum": 0,
        }

    def test_type_list(self) -> None:
        """Type lists gain null once."""
        assert make_nullable({"type": ["string", "number"]}) == {
            "type": ["string", "number", "null"]
        }
        assert make_nullable({"type": ["string", "null"]}) == {"type": ["string", "null"]}

    def test_untyped(self) -> None:
        """Untyped nodes are wrapped."""
        node = {"allOf": [{"type": "object"}]}
        assert make_nullable(node) == {"anyOf": [node, {"type": "null"}]}

    def test_input_untouched(self) -> None:
        """The input node is not modified."""
        node = {"type": "string"}
        make_nullable(node)
        assert node == {"type": "string"}


class TestFoldNullAllowance:
    """Null folding for description objects."""

    def test_vacuous(self) -> None:
        """Nothing to widen and no metadata stays empty."""
        assert fold_null_allowance({}, {}) == {}

    def test_metadata_only(self) -> None:
        """Metadata alone is enough to wrap."""
        assert fold_null_allowance({}, {"default": None}) == {"anyOf": [{}, {"type": "null"}]}

    def test_typed(self) -> None:
        """Typed nodes are widened as usual."""
        assert fold_null_allowance({"type": "boolean"}, {}) == {"type": ["boolean", "null"]}


class TestModifiers:
    """Accumulation and application."""

    def test_outermost_default_wins(self) -> None:
        """Later defaults do not replace the first."""
        modifiers = Modifiers().with_default("outer").with_default("inner")
        assert modifiers.default == "outer"

    def test_no_default(self) -> None:
        """Fresh modifiers carry no default."""
        assert not Modifiers().has_default

    def test_none_default(self) -> None:
        """None counts as a default."""
        assert Modifiers().with_default(None).has_default

    def test_apply_all(self) -> None:
        """Nullable, default and read-only all land on the node."""
        modifiers = Modifiers().mark_nullable().mark_read_only().with_default("x")
        assert apply_modifiers({"type": "string"}, modifiers, ConversionOptions()) == {
            "type": ["string", "null"],
            "default": "x",
            "readOnly": True,
        }

    def test_optional_has_no_node_effect(self) -> None:
        """Optionality only matters to the enclosing object."""
        modifiers = Modifiers().mark_optional()
        assert apply_modifiers({"type": "number"}, modifiers, ConversionOptions()) == {
            "type": "number"
        }

    def test_defaults_disabled(self) -> None:
        """include_defaults=False drops the default."""
        modifiers = Modifiers().with_default(1)
        options = ConversionOptions(include_defaults=False)
        assert apply_modifiers({"type": "integer"}, modifiers, options) == {"type": "integer"}

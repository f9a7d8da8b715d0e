"""
Tests for the check registry.
"""

import pytest

from diligence.services.verification.models import CheckCategory
from diligence.services.verification.registry import CheckRegistry, default_registry


class TestDefaultRegistry:
    """Test the standard due-diligence catalog."""

    def test_default_order(self):
        """Checks are listed in execution order."""
        assert default_registry().ids() == [
            "legal-registration",
            "financial-health",
            "reputational-review",
            "operational-capacity",
            "compliance-record",
            "ownership-structure",
            "litigation-history",
            "supply-chain",
        ]

    def test_automated_and_manual_split(self):
        """Six checks are automated, two need manual review."""
        registry = default_registry()

        assert len(registry.automated()) == 6
        assert [d.id for d in registry.manual()] == ["operational-capacity", "supply-chain"]

    def test_by_category(self):
        """Category filter preserves registry order."""
        legal = default_registry().by_category(CheckCategory.LEGAL)

        assert [d.id for d in legal] == [
            "legal-registration",
            "ownership-structure",
            "litigation-history",
        ]

    def test_by_category_accepts_strings(self):
        registry = default_registry()

        assert len(registry.by_category("operational")) == 2
        assert len(registry.by_category("all")) == len(registry)

    def test_by_category_rejects_unknown(self):
        with pytest.raises(ValueError):
            default_registry().by_category("marketing")


class TestCheckRegistry:
    """Test registry construction and lookup."""

    def test_duplicate_ids_rejected(self, make_check):
        """Check ids must be unique."""
        with pytest.raises(ValueError, match="Duplicate check id"):
            CheckRegistry([make_check("a"), make_check("b"), make_check("a")])

    def test_get_and_contains(self, make_check):
        registry = CheckRegistry([make_check("a"), make_check("b", automated=False)])

        assert registry.get("b").automated is False
        assert registry.get("missing") is None
        assert "a" in registry
        assert "missing" not in registry

    def test_registry_is_a_snapshot(self, make_check):
        """Mutating the source list does not change the registry."""
        definitions = [make_check("a")]
        registry = CheckRegistry(definitions)
        definitions.append(make_check("b"))

        assert registry.ids() == ["a"]

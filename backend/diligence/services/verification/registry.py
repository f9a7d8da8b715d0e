"""
Check Registry - Ordered catalog of due-diligence checks.

Registry order is execution order for automated checks and the default
display order. The catalog does not depend on the subject being vetted.
"""
from typing import Iterator, List, Optional, Sequence, Union

from diligence.services.verification.models import CheckCategory, CheckDefinition


DEFAULT_CHECKS: tuple = (
    CheckDefinition(
        id="legal-registration",
        category=CheckCategory.LEGAL,
        title="Legal Registration & Incorporation",
        description="Verify official registration, incorporation documents, and legal status",
        automated=True,
    ),
    CheckDefinition(
        id="financial-health",
        category=CheckCategory.FINANCIAL,
        title="Financial Health Assessment",
        description="Review financial statements, credit ratings, and fiscal stability",
        automated=True,
    ),
    CheckDefinition(
        id="reputational-review",
        category=CheckCategory.REPUTATIONAL,
        title="Reputational Analysis",
        description="Check news, social media, and industry reputation",
        automated=True,
    ),
    CheckDefinition(
        id="operational-capacity",
        category=CheckCategory.OPERATIONAL,
        title="Operational Capacity",
        description="Assess infrastructure, staffing, and operational capabilities",
        automated=False,
    ),
    CheckDefinition(
        id="compliance-record",
        category=CheckCategory.COMPLIANCE,
        title="Regulatory Compliance",
        description="Verify licenses, certifications, and compliance history",
        automated=True,
    ),
    CheckDefinition(
        id="ownership-structure",
        category=CheckCategory.LEGAL,
        title="Ownership & Control Structure",
        description="Map ownership hierarchy and control relationships",
        automated=True,
    ),
    CheckDefinition(
        id="litigation-history",
        category=CheckCategory.LEGAL,
        title="Litigation & Legal Disputes",
        description="Review past and ongoing legal proceedings",
        automated=True,
    ),
    CheckDefinition(
        id="supply-chain",
        category=CheckCategory.OPERATIONAL,
        title="Supply Chain Integrity",
        description="Assess supplier relationships and dependencies",
        automated=False,
    ),
)


class CheckRegistry:
    """Immutable, ordered sequence of check definitions with unique ids."""

    def __init__(self, definitions: Sequence[CheckDefinition]):
        seen = set()
        for definition in definitions:
            if definition.id in seen:
                raise ValueError(f"Duplicate check id in registry: {definition.id}")
            seen.add(definition.id)
        self._definitions = tuple(definitions)

    def __iter__(self) -> Iterator[CheckDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, check_id: object) -> bool:
        return any(d.id == check_id for d in self._definitions)

    def get(self, check_id: str) -> Optional[CheckDefinition]:
        return next((d for d in self._definitions if d.id == check_id), None)

    def ids(self) -> List[str]:
        return [d.id for d in self._definitions]

    def by_category(self, category: Union[CheckCategory, str]) -> List[CheckDefinition]:
        """Definitions in one category, in registry order. ``"all"`` disables the filter."""
        if category == "all":
            return list(self._definitions)
        category = CheckCategory(category)
        return [d for d in self._definitions if d.category == category]

    def automated(self) -> List[CheckDefinition]:
        return [d for d in self._definitions if d.automated]

    def manual(self) -> List[CheckDefinition]:
        return [d for d in self._definitions if not d.automated]


def default_registry() -> CheckRegistry:
    """The standard partner due-diligence catalog."""
    return CheckRegistry(DEFAULT_CHECKS)

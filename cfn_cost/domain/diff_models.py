"""
Domain models for cost comparison between two stack estimates.
"""
from typing import List, Dict, Any, Literal
from dataclasses import dataclass, field

from cfn_cost.domain.cost_models import StackCostEstimate


ChangeType = Literal["added", "removed", "modified", "unchanged"]


@dataclass(frozen=True)
class ResourceChange:
    """Cost change of a single resource, matched by logical id."""
    resource_id: str
    resource_type: str
    change_type: ChangeType
    before_cost: float
    after_cost: float
    cost_difference: float  # after_cost - before_cost, forced to 0 for "unchanged"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "resourceId": self.resource_id,
            "resourceType": self.resource_type,
            "changeType": self.change_type,
            "beforeCost": self.before_cost,
            "afterCost": self.after_cost,
            "costDifference": self.cost_difference,
        }


@dataclass(frozen=True)
class CostComparison:
    """Result of comparing a before estimate with an after estimate."""
    stack_name: str
    before: StackCostEstimate
    after: StackCostEstimate
    cost_difference: float
    percentage_change: float
    resource_changes: List[ResourceChange] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        # resource_changes are already ordered by absolute cost difference
        return {
            "stackName": self.stack_name,
            "before": self.before.to_dict(),
            "after": self.after.to_dict(),
            "costDifference": self.cost_difference,
            "percentageChange": self.percentage_change,
            "resourceChanges": [change.to_dict() for change in self.resource_changes],
        }


@dataclass(frozen=True)
class ComparisonSummary:
    """Counts and aggregate costs per change type."""
    total_added: int = 0
    total_removed: int = 0
    total_modified: int = 0
    total_unchanged: int = 0
    added_cost: float = 0.0
    removed_cost: float = 0.0  # positive magnitude
    modified_cost_change: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "totalAdded": self.total_added,
            "totalRemoved": self.total_removed,
            "totalModified": self.total_modified,
            "totalUnchanged": self.total_unchanged,
            "addedCost": self.added_cost,
            "removedCost": self.removed_cost,
            "modifiedCostChange": self.modified_cost_change,
        }

"""
Cost diff engine.
Compares two stack estimates resource by resource and summarizes the change.
"""
from typing import Dict, Any, List, Optional, Iterable
from datetime import datetime, timezone
import logging

from cfn_cost.core.config import config
from cfn_cost.domain.cost_models import StackCostEstimate, ResourceCost, TemplateSource
from cfn_cost.domain.diff_models import ChangeType, ResourceChange, CostComparison, ComparisonSummary
from cfn_cost.services.cost_calculator import CostCalculator


logger = logging.getLogger(__name__)

SIGNIFICANT_CHANGE_THRESHOLD = config.SIGNIFICANT_CHANGE_THRESHOLD


def percentage_change(before_total: float, after_total: float) -> float:
    """
    Relative change of a stack total, in percent.

    A stack that goes from nothing to something is reported as +100%.
    """
    difference = after_total - before_total
    if before_total > 0:
        return difference / before_total * 100
    if difference > 0:
        return 100.0
    return 0.0


def _empty_estimate(stack_name: str, source: TemplateSource) -> StackCostEstimate:
    return StackCostEstimate(
        stack_name=stack_name,
        template_source=source,
        total_monthly_cost=0.0,
        total_hourly_cost=0.0,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


class DiffCalculator:
    """Service for comparing the cost of two versions of a stack."""

    def __init__(self, region: Optional[str] = None, parameters: Optional[Dict[str, Any]] = None):
        """
        Initialize the diff engine.

        Args:
            region: AWS region used when templates have to be priced first
            parameters: Optional template parameter overrides
        """
        self.cost_calculator = CostCalculator(region, parameters)

    def compare_estimates(self, before: StackCostEstimate, after: StackCostEstimate) -> CostComparison:
        """
        Compare two estimates of the same stack.

        Resources are matched by logical id only. Matched resources whose cost
        moved by no more than one cent are reported unchanged with a zero
        difference.

        Args:
            before: Earlier estimate (e.g. deployed)
            after: Later estimate (e.g. synthesized)

        Returns:
            CostComparison with changes ordered by descending absolute difference
        """
        before_costs: Dict[str, ResourceCost] = {cost.resource_id: cost for cost in before.resources}
        after_costs: Dict[str, ResourceCost] = {cost.resource_id: cost for cost in after.resources}
        changes: List[ResourceChange] = []

        for resource_id, after_cost in after_costs.items():
            before_cost = before_costs.get(resource_id)
            if before_cost is None:
                changes.append(ResourceChange(
                    resource_id=resource_id,
                    resource_type=after_cost.resource_type,
                    change_type="added",
                    before_cost=0.0,
                    after_cost=after_cost.monthly_cost,
                    cost_difference=after_cost.monthly_cost,
                ))
                continue

            difference = after_cost.monthly_cost - before_cost.monthly_cost
            significant = abs(difference) > SIGNIFICANT_CHANGE_THRESHOLD
            changes.append(ResourceChange(
                resource_id=resource_id,
                resource_type=after_cost.resource_type,
                change_type="modified" if significant else "unchanged",
                before_cost=before_cost.monthly_cost,
                after_cost=after_cost.monthly_cost,
                cost_difference=difference if significant else 0.0,
            ))

        for resource_id, before_cost in before_costs.items():
            if resource_id not in after_costs:
                changes.append(ResourceChange(
                    resource_id=resource_id,
                    resource_type=before_cost.resource_type,
                    change_type="removed",
                    before_cost=before_cost.monthly_cost,
                    after_cost=0.0,
                    cost_difference=-before_cost.monthly_cost,
                ))

        changes.sort(key=lambda change: abs(change.cost_difference), reverse=True)

        cost_difference = after.total_monthly_cost - before.total_monthly_cost
        comparison = CostComparison(
            stack_name=after.stack_name,
            before=before,
            after=after,
            cost_difference=cost_difference,
            percentage_change=percentage_change(before.total_monthly_cost, after.total_monthly_cost),
            resource_changes=changes,
        )
        logger.info(
            "Compared stack %s: %+.2f USD/month (%+.1f%%) across %d resources",
            comparison.stack_name, cost_difference, comparison.percentage_change, len(changes),
        )
        return comparison

    def compare_templates(
        self,
        stack_name: str,
        before_template: Optional[Dict[str, Any]],
        after_template: Dict[str, Any],
        before_source: TemplateSource = "deployed",
        after_source: TemplateSource = "synthesized",
    ) -> CostComparison:
        """
        Price two templates and compare them.

        Args:
            stack_name: Stack name to report
            before_template: Earlier template, or None for a stack not yet deployed
            after_template: Later template
            before_source: Source label of the earlier template
            after_source: Source label of the later template

        Returns:
            CostComparison
        """
        if before_template is None:
            before = _empty_estimate(stack_name, before_source)
        else:
            before = self.cost_calculator.calculate_stack_cost(stack_name, before_template, before_source)
        after = self.cost_calculator.calculate_stack_cost(stack_name, after_template, after_source)
        return self.compare_estimates(before, after)

    @staticmethod
    def filter_changes(comparison: CostComparison, change_types: Iterable[ChangeType]) -> List[ResourceChange]:
        wanted = set(change_types)
        return [change for change in comparison.resource_changes if change.change_type in wanted]

    @staticmethod
    def get_significant_changes(comparison: CostComparison) -> List[ResourceChange]:
        """Changes worth reporting: not unchanged, and moving more than one cent."""
        return [
            change for change in comparison.resource_changes
            if change.change_type != "unchanged"
            and abs(change.cost_difference) > SIGNIFICANT_CHANGE_THRESHOLD
        ]

    @staticmethod
    def get_summary_stats(comparison: CostComparison) -> ComparisonSummary:
        """
        Count changes per type and total their cost.

        Returns:
            ComparisonSummary; removed_cost is a positive magnitude while
            added_cost and modified_cost_change keep their sign
        """
        totals = {"added": 0, "removed": 0, "modified": 0, "unchanged": 0}
        added_cost = 0.0
        removed_cost = 0.0
        modified_cost_change = 0.0

        for change in comparison.resource_changes:
            totals[change.change_type] += 1
            if change.change_type == "added":
                added_cost += change.cost_difference
            elif change.change_type == "removed":
                removed_cost += abs(change.cost_difference)
            elif change.change_type == "modified":
                modified_cost_change += change.cost_difference

        return ComparisonSummary(
            total_added=totals["added"],
            total_removed=totals["removed"],
            total_modified=totals["modified"],
            total_unchanged=totals["unchanged"],
            added_cost=added_cost,
            removed_cost=removed_cost,
            modified_cost_change=modified_cost_change,
        )

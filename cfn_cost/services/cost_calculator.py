"""
Stack cost aggregator.
Prices every resource of a CloudFormation template and sums the stack totals.
"""
from typing import Dict, Any, List, Optional
from datetime import datetime, timezone
import logging

from cfn_cost.calculators.base import ResourceProperties
from cfn_cost.calculators.registry import get_calculator, get_usage_estimator, is_free_resource
from cfn_cost.core.config import config
from cfn_cost.domain.cost_models import ResourceCost, StackCostEstimate, UnsupportedResource, TemplateSource
from cfn_cost.pricing.catalog import PricingTable, lookup
from cfn_cost.services.template_parser import extract_resources


logger = logging.getLogger(__name__)

NO_CALCULATOR_REASON = "No pricing calculator available for this resource type"


class CostCalculator:
    """Service for estimating the monthly cost of a CloudFormation stack."""

    def __init__(self, region: Optional[str] = None, parameters: Optional[Dict[str, Any]] = None):
        """
        Initialize the calculator for one pricing region.

        Args:
            region: AWS region whose prices to use (defaults to config.DEFAULT_REGION)
            parameters: Optional template parameter overrides used when resolving Ref
        """
        self.region = region or config.DEFAULT_REGION
        self.parameters = parameters
        self.pricing: PricingTable = lookup(self.region)

    def calculate_stack_cost(
        self,
        stack_name: str,
        template: Dict[str, Any],
        source: TemplateSource = "local",
    ) -> StackCostEstimate:
        """
        Estimate the cost of every resource in a template.

        Free resources are skipped silently. A resource with no calculator, or
        whose calculator raises, is reported as unsupported and contributes
        nothing to the totals; a failing resource never aborts the stack.

        Args:
            stack_name: Stack name to report
            template: Parsed template dictionary
            source: Where the template came from

        Returns:
            StackCostEstimate with resources in template order
        """
        resources: List[ResourceCost] = []
        unsupported: List[UnsupportedResource] = []

        for resource_id, resource in extract_resources(template).items():
            resource_type = resource["Type"]

            if is_free_resource(resource_type):
                continue

            calculator = get_calculator(resource_type) or get_usage_estimator(resource_type)
            if calculator is None:
                unsupported.append(UnsupportedResource(resource_id, resource_type, NO_CALCULATOR_REASON))
                continue

            props = ResourceProperties(template, resource, self.parameters)
            try:
                cost = calculator(resource_id, props, self.pricing)
            except Exception as error:
                logger.warning(
                    "Failed to price %s (%s): %s", resource_id, resource_type, error
                )
                unsupported.append(
                    UnsupportedResource(resource_id, resource_type, f"Calculation error: {error}")
                )
                continue

            logger.debug(
                "Priced %s (%s): $%.4f/month, confidence=%s",
                resource_id, resource_type, cost.monthly_cost, cost.confidence,
            )
            resources.append(cost)

        total_monthly = sum(cost.monthly_cost for cost in resources)
        total_hourly = sum(cost.hourly_cost for cost in resources)

        logger.info(
            "Estimated stack %s (%s, %s): %d priced, %d unsupported, $%.2f/month",
            stack_name, source, self.region, len(resources), len(unsupported), total_monthly,
        )

        return StackCostEstimate(
            stack_name=stack_name,
            template_source=source,
            total_monthly_cost=total_monthly,
            total_hourly_cost=total_hourly,
            resources=resources,
            unsupported_resources=unsupported,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

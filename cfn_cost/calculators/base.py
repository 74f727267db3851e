"""
Shared building blocks for resource cost calculators.

A calculator is a plain function
    (resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost
registered by exact CloudFormation type in calculators.registry.
"""
from typing import Dict, Any, List, Optional, Callable, Tuple
import logging

from cfn_cost.core.config import config
from cfn_cost.domain.cost_models import CostDetail, ResourceCost, Confidence
from cfn_cost.pricing.catalog import PricingTable
from cfn_cost.pricing.assumptions import usage_assumption
from cfn_cost.services.intrinsics import get_property_value, is_unresolved


logger = logging.getLogger(__name__)

HOURS_PER_MONTH = config.HOURS_PER_MONTH


def to_number(value: Any, default: Optional[float] = None) -> Optional[float]:
    """
    Coerce a property value to a number.

    Numeric strings ("20", "0.5") are converted; booleans, placeholders and
    anything else non-numeric return `default`.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and not is_unresolved(value):
        try:
            number = float(value.strip())
        except ValueError:
            return default
        return int(number) if number.is_integer() else number
    return default


def to_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return default


class ResourceProperties:
    """
    Typed, resolved access to one resource's Properties.

    Every read goes through intrinsic resolution, so calculators only ever
    see scalars, lists and mappings.
    """

    def __init__(
        self,
        template: Dict[str, Any],
        resource: Dict[str, Any],
        parameters: Optional[Dict[str, Any]] = None,
    ):
        self.template = template
        self.resource = resource
        self.parameters = parameters
        self.resource_type: str = resource.get("Type", "")

    def get(self, path: str, default: Any = None) -> Any:
        return get_property_value(self.template, self.resource, path, default, self.parameters)

    def has(self, path: str) -> bool:
        """True when the property is declared (even as an unresolvable intrinsic)."""
        return self.get(path) is not None

    def number(self, path: str, default: float) -> float:
        return to_number(self.get(path), default)

    def integer(self, path: str, default: int) -> int:
        return int(to_number(self.get(path), default))

    def flag(self, path: str, default: bool = False) -> bool:
        return to_bool(self.get(path), default)

    def string(self, path: str, default: str) -> str:
        value = self.get(path)
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            return default
        return str(value)

    def items(self, path: str) -> List[Any]:
        value = self.get(path)
        return value if isinstance(value, list) else []

    def assumption(self, name: str) -> float:
        """Documented default usage for this resource type."""
        return usage_assumption(self.resource_type, name)


ResourceCostCalculator = Callable[[str, ResourceProperties, PricingTable], ResourceCost]


def detail(component: str, quantity: float, unit_price: float, unit: str) -> CostDetail:
    return CostDetail(
        component=component,
        quantity=quantity,
        unit_price=unit_price,
        monthly_cost=quantity * unit_price,
        unit=unit,
    )


def hourly_detail(component: str, hourly_price: float, count: float = 1, unit: str = "hours") -> CostDetail:
    """Line item for something billed per hour, running all month."""
    return detail(component, HOURS_PER_MONTH * count, hourly_price, unit)


def monthly_detail(component: str, count: float, hourly_price: float, unit: str) -> CostDetail:
    """Line item of `count` units whose unit price is an hourly rate over a full month."""
    return detail(component, count, hourly_price * HOURS_PER_MONTH, unit)


def free_detail(component: str, quantity: float = 1, unit: str = "resource") -> CostDetail:
    """Zero-cost line explaining why a visible resource shows $0."""
    return detail(component, quantity, 0.0, unit)


def build_resource_cost(
    resource_id: str,
    resource_type: str,
    details: List[CostDetail],
    confidence: Confidence,
    unit: str,
) -> ResourceCost:
    """
    Assemble a ResourceCost from its line items.

    monthly_cost is always the sum of the details and hourly_cost is derived
    from it, so the two can never disagree.

    Args:
        resource_id: Logical id
        resource_type: CloudFormation type
        details: Priced components, in display order
        confidence: Confidence grade
        unit: Billing noun for the resource (e.g. 'instance', 'cluster')

    Returns:
        ResourceCost
    """
    monthly_cost = sum(item.monthly_cost for item in details)
    return ResourceCost(
        resource_id=resource_id,
        resource_type=resource_type,
        monthly_cost=monthly_cost,
        hourly_cost=monthly_cost / HOURS_PER_MONTH,
        unit=unit,
        details=list(details),
        confidence=confidence,
    )


def fixed_hourly(component: str, price_path: Tuple[str, ...], fallback: float,
                 confidence: Confidence, unit: str) -> ResourceCostCalculator:
    """Calculator for a resource billed at one flat hourly rate, whatever its properties."""
    def calculate(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
        return build_resource_cost(
            resource_id, props.resource_type,
            [hourly_detail(component, pricing.get(*price_path, default=fallback))],
            confidence=confidence,
            unit=unit,
        )
    return calculate


def fixed_monthly(component: str, price_path: Tuple[str, ...], fallback: float,
                  confidence: Confidence, unit: str, detail_unit: str) -> ResourceCostCalculator:
    """Calculator for a resource billed at one flat monthly fee, whatever its properties."""
    def calculate(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
        return build_resource_cost(
            resource_id, props.resource_type,
            [detail(component, 1, pricing.get(*price_path, default=fallback), detail_unit)],
            confidence=confidence,
            unit=unit,
        )
    return calculate

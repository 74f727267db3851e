"""
Domain models for cost estimation.
Defines the structure of priced line items, per-resource costs and stack estimates.
"""
from typing import List, Dict, Any, Literal
from dataclasses import dataclass, field


Confidence = Literal["high", "medium", "low", "unknown"]
TemplateSource = Literal["deployed", "synthesized", "local"]


@dataclass(frozen=True)
class CostDetail:
    """One priced component of a resource (e.g. base storage, extra IOPS)."""
    component: str
    quantity: float
    unit_price: float
    monthly_cost: float
    unit: str  # e.g., "hours", "GB/month", "requests"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "component": self.component,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "monthlyCost": self.monthly_cost,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class ResourceCost:
    """
    Monthly and hourly cost of a single template resource.

    monthly_cost is the sum of the detail lines and hourly_cost is
    monthly_cost / HOURS_PER_MONTH. Use build_resource_cost() in the
    calculators package rather than filling these in by hand.
    """
    resource_id: str
    resource_type: str
    monthly_cost: float
    hourly_cost: float
    unit: str
    details: List[CostDetail]
    confidence: Confidence  # "high" | "medium" | "low" | "unknown"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "resourceId": self.resource_id,
            "resourceType": self.resource_type,
            "monthlyCost": self.monthly_cost,
            "hourlyCost": self.hourly_cost,
            "unit": self.unit,
            "details": [detail.to_dict() for detail in self.details],
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class UnsupportedResource:
    """A resource that could not be priced."""
    resource_id: str
    resource_type: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "resourceId": self.resource_id,
            "resourceType": self.resource_type,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class StackCostEstimate:
    """Cost estimate for every resource of one stack template."""
    stack_name: str
    template_source: TemplateSource
    total_monthly_cost: float
    total_hourly_cost: float
    resources: List[ResourceCost] = field(default_factory=list)
    unsupported_resources: List[UnsupportedResource] = field(default_factory=list)
    timestamp: str = ""  # ISO-8601, UTC

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        # Resources keep template order; the formatting layer decides how to sort
        return {
            "stackName": self.stack_name,
            "templateSource": self.template_source,
            "totalMonthlyCost": self.total_monthly_cost,
            "totalHourlyCost": self.total_hourly_cost,
            "resources": [resource.to_dict() for resource in self.resources],
            "unsupportedResources": [
                resource.to_dict() for resource in self.unsupported_resources
            ],
            "timestamp": self.timestamp,
        }

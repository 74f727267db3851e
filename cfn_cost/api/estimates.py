"""
API routes for stack cost estimation and comparison.
"""
from typing import Dict, Any, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
import logging

from cfn_cost.core.config import config
from cfn_cost.domain.cost_models import TemplateSource
from cfn_cost.pricing.aws_region_map import (
    BASE_REGION,
    UNKNOWN_REGION_MULTIPLIER,
    get_known_regions,
    get_region_multiplier,
)
from cfn_cost.services.cost_calculator import CostCalculator
from cfn_cost.services.diff_calculator import DiffCalculator
from cfn_cost.services.template_fetcher import TemplateFetchError
from cfn_cost.services.template_parser import TemplateParseError, parse_content


logger = logging.getLogger(__name__)
router = APIRouter()


class EstimateRequest(BaseModel):
    """Request model for estimating one stack."""
    stack_name: str = Field(..., description="Stack name to report")
    template: Optional[Dict[str, Any]] = Field(None, description="Parsed template")
    template_body: Optional[str] = Field(None, description="Template as JSON or YAML text")
    region: Optional[str] = Field(None, description="AWS region for pricing (default: configured region)")
    parameters: Optional[Dict[str, Any]] = Field(None, description="Template parameter overrides")
    source: TemplateSource = Field(default="local", description="Where the template came from")


class CompareRequest(BaseModel):
    """Request model for comparing two versions of a stack."""
    stack_name: str = Field(..., description="Stack name to report")
    before_template: Optional[Dict[str, Any]] = Field(None, description="Earlier template; omit for a new stack")
    before_template_body: Optional[str] = Field(None, description="Earlier template as JSON or YAML text")
    after_template: Optional[Dict[str, Any]] = Field(None, description="Later template")
    after_template_body: Optional[str] = Field(None, description="Later template as JSON or YAML text")
    region: Optional[str] = Field(None, description="AWS region for pricing (default: configured region)")
    parameters: Optional[Dict[str, Any]] = Field(None, description="Template parameter overrides")
    before_source: TemplateSource = Field(default="deployed", description="Source of the earlier template")
    after_source: TemplateSource = Field(default="synthesized", description="Source of the later template")


def resolve_template(
    template: Optional[Dict[str, Any]],
    template_body: Optional[str],
    source_name: str,
) -> Optional[Dict[str, Any]]:
    """
    Pick the template given either as a mapping or as text.

    Args:
        template: Already-parsed template
        template_body: JSON or YAML text
        source_name: Name used in parse error messages

    Returns:
        Parsed template, or None when neither form was given

    Raises:
        TemplateParseError: If the text or mapping is not a valid template
    """
    if template is not None:
        # Mappings skip the parser but still need a Resources section
        if not isinstance(template.get("Resources"), dict):
            raise TemplateParseError(f"Template {source_name} has no Resources section")
        return template
    if template_body is not None:
        return parse_content(template_body, source_name)
    return None


@router.post("/api/estimate")
async def estimate_stack(estimate_request: EstimateRequest) -> Dict[str, Any]:
    """
    Estimate the monthly cost of a CloudFormation template.

    Args:
        estimate_request: Request body with the template and optional region

    Returns:
        JSON response with the serialized StackCostEstimate

    Raises:
        HTTPException: 400 for a missing or invalid template,
                       500 for unexpected errors
    """
    try:
        template = resolve_template(
            estimate_request.template,
            estimate_request.template_body,
            estimate_request.stack_name,
        )
        if template is None:
            raise HTTPException(
                status_code=400,
                detail="Either template or template_body is required"
            )

        calculator = CostCalculator(estimate_request.region, estimate_request.parameters)
        estimate = calculator.calculate_stack_cost(
            estimate_request.stack_name,
            template,
            estimate_request.source,
        )

        return {
            "status": "ok",
            "region": calculator.region,
            "estimate": estimate.to_dict()
        }

    except HTTPException:
        raise
    except TemplateParseError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error
    except TemplateFetchError as error:
        raise HTTPException(status_code=404, detail=str(error)) from error
    except Exception as error:
        logger.exception("Unexpected error estimating stack %s", estimate_request.stack_name)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while estimating costs"
        ) from error


@router.post("/api/compare")
async def compare_stack(compare_request: CompareRequest) -> Dict[str, Any]:
    """
    Compare the cost of two versions of a stack.

    A missing before template is treated as a stack that is not deployed yet.

    Args:
        compare_request: Request body with both templates

    Returns:
        JSON response with the comparison, its summary and the significant changes

    Raises:
        HTTPException: 400 for a missing or invalid template,
                       500 for unexpected errors
    """
    try:
        stack_name = compare_request.stack_name
        after_template = resolve_template(
            compare_request.after_template,
            compare_request.after_template_body,
            f"{stack_name} (after)",
        )
        if after_template is None:
            raise HTTPException(
                status_code=400,
                detail="Either after_template or after_template_body is required"
            )
        before_template = resolve_template(
            compare_request.before_template,
            compare_request.before_template_body,
            f"{stack_name} (before)",
        )

        diff_calculator = DiffCalculator(compare_request.region, compare_request.parameters)
        comparison = diff_calculator.compare_templates(
            stack_name,
            before_template,
            after_template,
            compare_request.before_source,
            compare_request.after_source,
        )

        return {
            "status": "ok",
            "comparison": comparison.to_dict(),
            "summary": DiffCalculator.get_summary_stats(comparison).to_dict(),
            "significant_changes": [
                change.to_dict() for change in DiffCalculator.get_significant_changes(comparison)
            ],
        }

    except HTTPException:
        raise
    except TemplateParseError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error
    except TemplateFetchError as error:
        raise HTTPException(status_code=404, detail=str(error)) from error
    except Exception as error:
        logger.exception("Unexpected error comparing stack %s", compare_request.stack_name)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while comparing costs"
        ) from error


@router.get("/api/regions")
async def list_regions() -> Dict[str, Any]:
    """
    List the regions with known price multipliers.

    Returns:
        Multipliers relative to the base region, plus the one used for unknown regions
    """
    return {
        "status": "ok",
        "baseRegion": BASE_REGION,
        "defaultRegion": config.DEFAULT_REGION,
        "unknownRegionMultiplier": UNKNOWN_REGION_MULTIPLIER,
        "regions": {region: get_region_multiplier(region) for region in get_known_regions()},
    }

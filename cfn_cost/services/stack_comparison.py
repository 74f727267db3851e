"""
Compare synthesized CDK stacks against their deployed versions.
"""
from pathlib import Path
from typing import List, Optional, Union
import logging

from cfn_cost.domain.diff_models import CostComparison
from cfn_cost.services.diff_calculator import DiffCalculator
from cfn_cost.services.template_fetcher import TemplateFetcher, TemplateFetchError
from cfn_cost.services.template_parser import TemplateParseError


logger = logging.getLogger(__name__)


def compare_cdk_stacks(
    cdk_out_dir: Union[str, Path],
    stack_names: Optional[List[str]] = None,
    region: Optional[str] = None,
    profile: Optional[str] = None,
    fetcher: Optional[TemplateFetcher] = None,
) -> List[CostComparison]:
    """
    Estimate the cost impact of deploying each synthesized stack.

    Stacks that are not deployed yet are compared against an empty estimate.
    A stack that cannot be loaded is skipped with a warning.

    Args:
        cdk_out_dir: cdk.out directory
        stack_names: Stacks to compare; all synthesized stacks when empty
        region: AWS region for deployed stacks and pricing
        profile: Optional AWS credential profile
        fetcher: Pre-built fetcher (defaults to one for region/profile)

    Returns:
        One CostComparison (deployed -> synthesized) per stack

    Raises:
        TemplateFetchError: If cdk_out_dir does not exist and no stack names are given
    """
    fetcher = fetcher or TemplateFetcher(region, profile)
    diff_calculator = DiffCalculator(fetcher.region)

    stacks = stack_names or TemplateFetcher.discover_cdk_stacks(cdk_out_dir)

    comparisons = []
    for stack_name in stacks:
        try:
            templates = fetcher.fetch_for_comparison(cdk_out_dir, stack_name)
        except (TemplateFetchError, TemplateParseError) as error:
            logger.warning("Failed to process stack %s: %s", stack_name, error)
            continue

        comparisons.append(diff_calculator.compare_templates(
            stack_name,
            templates.deployed.template if templates.deployed else None,
            templates.synthesized.template,
            "deployed",
            "synthesized",
        ))

    return comparisons

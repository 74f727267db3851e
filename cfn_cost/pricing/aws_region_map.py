"""
AWS region code to price multiplier mapping.
Prices in the catalog are for us-east-1; every other region is scaled by one
flat factor. This does not model real per-service regional variance.
"""
from typing import Dict, List


BASE_REGION = "us-east-1"

# Multiplier applied to every us-east-1 price for regions not listed here
UNKNOWN_REGION_MULTIPLIER = 1.1

# AWS region code to price multiplier (relative to us-east-1)
AWS_REGION_MULTIPLIERS: Dict[str, float] = {
    # US
    "us-east-1": 1.0,
    "us-east-2": 1.0,
    "us-west-1": 1.1,
    "us-west-2": 1.0,

    # Europe
    "eu-west-1": 1.05,
    "eu-west-2": 1.08,
    "eu-west-3": 1.1,
    "eu-central-1": 1.08,
    "eu-north-1": 1.05,

    # Asia Pacific
    "ap-southeast-1": 1.1,
    "ap-southeast-2": 1.15,
    "ap-northeast-1": 1.15,
    "ap-northeast-2": 1.12,
    "ap-south-1": 1.05,

    # Canada
    "ca-central-1": 1.05,

    # South America
    "sa-east-1": 1.5,
}


def get_region_multiplier(region_code: str) -> float:
    """
    Get the price multiplier for a region.

    Args:
        region_code: AWS region code (e.g., 'eu-west-1')

    Returns:
        Multiplier relative to us-east-1; UNKNOWN_REGION_MULTIPLIER for unlisted regions
    """
    return AWS_REGION_MULTIPLIERS.get(region_code, UNKNOWN_REGION_MULTIPLIER)


def get_known_regions() -> List[str]:
    """
    Get all region codes with an explicit multiplier.

    Returns:
        List of AWS region codes
    """
    return list(AWS_REGION_MULTIPLIERS.keys())

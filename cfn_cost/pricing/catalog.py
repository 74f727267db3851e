"""
Static AWS pricing catalog.

Unit prices are USD for us-east-1 (approximate list prices, late 2024).
Hourly prices are per hour, storage prices per GB-month and request prices
per million requests unless the key says otherwise. Other regions get a copy
of the table with every numeric price scaled by the region multiplier.
"""
from typing import Dict, Any, Union
import logging

from cfn_cost.core.config import config
from cfn_cost.pricing.aws_region_map import BASE_REGION, get_region_multiplier


logger = logging.getLogger(__name__)

HOURS_PER_MONTH = config.HOURS_PER_MONTH

Number = Union[int, float]


BASE_PRICING: Dict[str, Any] = {
    "currency": "USD",
    "as_of": "2024-11",
    "ec2": {
        "instances": {
            # General Purpose
            "t3.nano": 0.0052,
            "t3.micro": 0.0104,
            "t3.small": 0.0208,
            "t3.medium": 0.0416,
            "t3.large": 0.0832,
            "t3.xlarge": 0.1664,
            "t3.2xlarge": 0.3328,
            "t3a.nano": 0.0047,
            "t3a.micro": 0.0094,
            "t3a.small": 0.0188,
            "t3a.medium": 0.0376,
            "t3a.large": 0.0752,
            "t3a.xlarge": 0.1504,
            "t3a.2xlarge": 0.3008,
            "m5.large": 0.096,
            "m5.xlarge": 0.192,
            "m5.2xlarge": 0.384,
            "m5.4xlarge": 0.768,
            "m5.8xlarge": 1.536,
            "m5.12xlarge": 2.304,
            "m5.16xlarge": 3.072,
            "m5.24xlarge": 4.608,
            "m6i.large": 0.096,
            "m6i.xlarge": 0.192,
            "m6i.2xlarge": 0.384,
            "m6i.4xlarge": 0.768,
            "m6i.8xlarge": 1.536,
            "m7i.large": 0.1008,
            "m7i.xlarge": 0.2016,
            "m7i.2xlarge": 0.4032,
            # Compute Optimized
            "c5.large": 0.085,
            "c5.xlarge": 0.17,
            "c5.2xlarge": 0.34,
            "c5.4xlarge": 0.68,
            "c5.9xlarge": 1.53,
            "c6i.large": 0.085,
            "c6i.xlarge": 0.17,
            "c6i.2xlarge": 0.34,
            "c7i.large": 0.0893,
            "c7i.xlarge": 0.1785,
            # Memory Optimized
            "r5.large": 0.126,
            "r5.xlarge": 0.252,
            "r5.2xlarge": 0.504,
            "r5.4xlarge": 1.008,
            "r6i.large": 0.126,
            "r6i.xlarge": 0.252,
            "r7i.large": 0.1323,
            # Storage Optimized
            "i3.large": 0.156,
            "i3.xlarge": 0.312,
            "i3.2xlarge": 0.624,
            # ARM-based
            "t4g.nano": 0.0042,
            "t4g.micro": 0.0084,
            "t4g.small": 0.0168,
            "t4g.medium": 0.0336,
            "t4g.large": 0.0672,
            "t4g.xlarge": 0.1344,
            "m6g.large": 0.077,
            "m6g.xlarge": 0.154,
            "m6g.2xlarge": 0.308,
            "m7g.large": 0.0816,
            "m7g.xlarge": 0.1632,
            "c6g.large": 0.068,
            "c6g.xlarge": 0.136,
            "c7g.large": 0.0725,
            "r6g.large": 0.1008,
            "r6g.xlarge": 0.2016,
            "r7g.large": 0.107,
        },
        # Dedicated hosts, per host-hour
        "hosts": {
            "m5.large": 5.069,
            "c5.large": 4.491,
            "r5.large": 6.653,
        },
    },
    "ebs": {
        "volumes": {  # per GB-month
            "gp2": 0.10,
            "gp3": 0.08,
            "io1": 0.125,
            "io2": 0.125,
            "st1": 0.045,
            "sc1": 0.015,
            "standard": 0.05,
        },
        "iops": {  # per provisioned IOPS-month
            "io1": 0.065,
            "io2": 0.065,
            "gp3": 0.005,
        },
        "throughput": {  # per MBps-month
            "gp3": 0.04,
        },
        "snapshots": 0.05,  # per GB-month
    },
    "rds": {
        "instances": {  # per instance-hour, by engine
            "mysql": {
                "db.t3.micro": 0.017,
                "db.t3.small": 0.034,
                "db.t3.medium": 0.068,
                "db.t3.large": 0.136,
                "db.t3.xlarge": 0.272,
                "db.t3.2xlarge": 0.544,
                "db.t4g.micro": 0.016,
                "db.t4g.small": 0.032,
                "db.t4g.medium": 0.065,
                "db.t4g.large": 0.129,
                "db.m5.large": 0.171,
                "db.m5.xlarge": 0.342,
                "db.m5.2xlarge": 0.684,
                "db.m5.4xlarge": 1.368,
                "db.m6i.large": 0.171,
                "db.m6i.xlarge": 0.342,
                "db.m6g.large": 0.154,
                "db.m6g.xlarge": 0.308,
                "db.r5.large": 0.24,
                "db.r5.xlarge": 0.48,
                "db.r5.2xlarge": 0.96,
                "db.r6i.large": 0.24,
                "db.r6g.large": 0.216,
                "db.r6g.xlarge": 0.432,
            },
            "postgres": {
                "db.t3.micro": 0.018,
                "db.t3.small": 0.036,
                "db.t3.medium": 0.072,
                "db.t3.large": 0.145,
                "db.t4g.micro": 0.016,
                "db.t4g.small": 0.032,
                "db.t4g.medium": 0.065,
                "db.m5.large": 0.178,
                "db.m5.xlarge": 0.356,
                "db.m6g.large": 0.159,
                "db.r5.large": 0.25,
                "db.r6g.large": 0.225,
            },
            "mariadb": {
                "db.t3.micro": 0.017,
                "db.t3.small": 0.034,
                "db.t3.medium": 0.068,
                "db.m5.large": 0.171,
                "db.r5.large": 0.24,
            },
            "aurora-mysql": {
                "db.t3.medium": 0.082,
                "db.t4g.medium": 0.073,
                "db.r5.large": 0.29,
                "db.r6g.large": 0.26,
            },
            "aurora-postgresql": {
                "db.t3.medium": 0.082,
                "db.t4g.medium": 0.073,
                "db.r5.large": 0.29,
                "db.r6g.large": 0.26,
            },
        },
        "storage": {  # per GB-month
            "gp2": 0.115,
            "gp3": 0.115,
            "io1": 0.125,
            "standard": 0.10,
        },
    },
    "aurora": {
        "serverless_acu_hourly": 0.06,
    },
    "elasticache": {
        "nodes": {  # per node-hour
            "cache.t3.micro": 0.017,
            "cache.t3.small": 0.034,
            "cache.t3.medium": 0.068,
            "cache.t4g.micro": 0.016,
            "cache.t4g.small": 0.032,
            "cache.t4g.medium": 0.065,
            "cache.m5.large": 0.155,
            "cache.m5.xlarge": 0.31,
            "cache.m6g.large": 0.14,
            "cache.r5.large": 0.218,
            "cache.r6g.large": 0.196,
        },
    },
    "neptune": {
        "instances": {
            "db.t3.medium": 0.098,
            "db.r5.large": 0.348,
            "db.r5.xlarge": 0.696,
            "db.r6g.large": 0.313,
        },
        "storage": 0.10,
    },
    "documentdb": {
        "instances": {
            "db.t3.medium": 0.078,
            "db.t4g.medium": 0.073,
            "db.r5.large": 0.277,
            "db.r5.xlarge": 0.554,
            "db.r6g.large": 0.249,
        },
        "storage": 0.10,
    },
    "redshift": {
        "instances": {
            "dc2.large": 0.25,
            "dc2.8xlarge": 4.80,
            "ra3.xlplus": 1.086,
            "ra3.4xlarge": 3.26,
            "ra3.16xlarge": 13.04,
        },
    },
    "opensearch": {
        "instances": {
            "t3.small.search": 0.036,
            "t3.medium.search": 0.073,
            "m5.large.search": 0.142,
            "m6g.large.search": 0.128,
            "r5.large.search": 0.186,
            "r6g.large.search": 0.167,
        },
    },
    "elasticsearch": {
        "instances": {
            "t3.small.elasticsearch": 0.036,
            "t3.medium.elasticsearch": 0.073,
            "m5.large.elasticsearch": 0.142,
            "r5.large.elasticsearch": 0.186,
        },
    },
    "dms": {
        "instances": {
            "dms.t3.micro": 0.018,
            "dms.t3.small": 0.036,
            "dms.t3.medium": 0.073,
            "dms.c5.large": 0.154,
            "dms.r5.large": 0.21,
        },
    },
    "dynamodb": {
        "read_capacity": 0.00013,  # per RCU-hour
        "write_capacity": 0.00065,  # per WCU-hour
        "on_demand_read": 0.25,  # per million read request units
        "on_demand_write": 1.25,  # per million write request units
        "storage": 0.25,
    },
    "lambda": {
        "requests": 0.20,  # per million requests
        "duration": 0.0000166667,  # per GB-second
    },
    "s3": {
        "standard_storage": 0.023,
    },
    "sqs": {
        "standard": 0.40,
        "fifo": 0.50,
    },
    "api_gateway": {
        "rest": 3.50,
        "http": 1.00,
        "websocket": 1.00,
    },
    "step_functions": {
        "standard": 25.00,  # per million state transitions
        "express": 1.00,
    },
    "ecr": {
        "storage": 0.10,
    },
    "nat_gateway": {
        "hourly": 0.045,
        "per_gb": 0.045,
    },
    "load_balancer": {
        "alb": {"hourly": 0.0225, "lcu_hourly": 0.008},
        "nlb": {"hourly": 0.0225, "lcu_hourly": 0.006},
        "clb": {"hourly": 0.025},
    },
    "vpc_endpoint": {
        "interface_hourly": 0.01,  # per AZ
    },
    "vpn_connection": {
        "hourly": 0.05,
        "client_vpn": {
            "endpoint_hourly": 0.05,
            "connection_hourly": 0.05,
        },
    },
    "transit_gateway": {
        "hourly": 0.05,
        "data_processed": 0.02,  # per GB
        "peering": 0.05,
    },
    "traffic_mirror": {
        "session_hourly": 0.15,
    },
    "direct_connect": {
        "port_hours": {
            "50Mbps": 0.03,
            "100Mbps": 0.06,
            "500Mbps": 0.15,
            "1Gbps": 0.30,
            "10Gbps": 2.25,
            "100Gbps": 22.50,
        },
    },
    "global_accelerator": {
        "hourly": 0.025,
    },
    "network_firewall": {
        "endpoint_hourly": 0.395,
        "data_processed": 0.065,  # per GB
    },
    "fargate": {
        "vcpu_hourly": 0.04048,
        "memory_gb_hourly": 0.004445,
    },
    "eks": {
        "cluster_hourly": 0.10,
    },
    "lightsail": {
        "instances": {  # per month
            "nano": 3.50,
            "micro": 5.00,
            "small": 10.00,
            "medium": 20.00,
            "large": 40.00,
            "xlarge": 80.00,
        },
    },
    "sagemaker": {
        "notebook_instances": {
            "ml.t3.medium": 0.05,
            "ml.t3.large": 0.10,
            "ml.t3.xlarge": 0.20,
            "ml.m5.xlarge": 0.23,
        },
    },
    "mq": {
        "instance_hourly": {
            "mq.t2.micro": 0.03,
            "mq.t3.micro": 0.027,
            "mq.m5.large": 0.288,
            "mq.m5.xlarge": 0.576,
        },
    },
    "msk": {
        "instance_hourly": {
            "kafka.t3.small": 0.0456,
            "kafka.m5.large": 0.21,
            "kafka.m5.xlarge": 0.42,
        },
    },
    "kinesis": {
        "shard_hourly": 0.015,
    },
    "kinesis_firehose": {
        "data_ingested": 0.029,  # per GB
    },
    "kinesis_analytics": {
        "kpu_hourly": 0.11,
    },
    "mwaa": {
        "environment": {
            "mw1.small": 0.49,
            "mw1.medium": 0.99,
            "mw1.large": 1.99,
        },
    },
    "glue": {
        "dpu_hour": 0.44,
        "crawler_dpu_hour": 0.44,
    },
    "transfer_family": {
        "protocol_hourly": 0.30,
    },
    "efs": {
        "standard": 0.30,
        "provisioned_throughput": 6.00,  # per MiBps-month
    },
    "fsx": {
        "lustre": 0.14,
        "windows": 0.23,
        "ontap": 0.25,
        "openzfs": 0.09,
    },
    "backup": {
        "storage": 0.05,
    },
    "cloudfront": {
        "data_transfer": {
            "us": 0.085,
        },
        "requests": {
            "https": 0.01,  # per 10,000 requests
        },
        "functions": 0.10,  # per million invocations
    },
    "route53": {
        "hosted_zone": 0.50,
        "queries": 0.40,  # per million queries
        "health_checks": {
            "basic": 0.50,
        },
        "resolver_endpoint": 0.125,  # per ENI-hour
    },
    "secrets_manager": {
        "secret": 0.40,
    },
    "kms": {
        "key": 1.00,
    },
    "cloudwatch": {
        "alarm_standard": 0.10,
        "dashboards": 3.00,
    },
    "config": {
        "rules": 1.00,
        "config_items": 0.003,
    },
    "cloudtrail": {
        "data_events": 0.10,  # per 100,000 events
    },
    "codebuild": {  # per build minute
        "linux_small": 0.005,
        "linux_medium": 0.01,
        "linux_large": 0.02,
        "linux_2xlarge": 0.04,
        "arm_large": 0.015,
        "gpu_large": 0.18,
        "windows_medium": 0.02,
        "windows_large": 0.04,
    },
    "codepipeline": {
        "active_pipeline": 1.00,
    },
    "waf": {
        "web_acl": 5.00,
        "rule": 1.00,
    },
    "acm_pca": {
        "private_ca": 400.00,  # per CA-month
    },
    "grafana": {
        "editor": 9.00,  # per active editor-month
    },
    "directory_service": {
        "simple_ad": {"small": 0.05, "large": 0.15},
        "microsoft_ad": {"standard": 0.12, "enterprise": 0.40},
    },
}


def scale_prices(node: Any, multiplier: float) -> Any:
    """
    Return a scaled copy of a pricing node.

    Every numeric leaf is multiplied; mappings are rebuilt key by key and any
    other leaf (currency code, date string) is carried over untouched.

    Args:
        node: Pricing mapping or leaf value
        multiplier: Factor applied to numeric leaves

    Returns:
        A new structure sharing no mappings with the input
    """
    if isinstance(node, dict):
        return {key: scale_prices(value, multiplier) for key, value in node.items()}
    if isinstance(node, bool):
        return node
    if isinstance(node, (int, float)):
        return node * multiplier
    return node


class PricingTable:
    """
    Read-only view over the pricing catalog for one region.

    Calculators read prices with get(); they must never mutate `prices`.
    """

    def __init__(self, region: str, multiplier: float, prices: Dict[str, Any]):
        self.region = region
        self.multiplier = multiplier
        self.prices = prices

    def get(self, *path: str, default: Number = 0.0) -> Number:
        """
        Look up a unit price by key path, e.g. get("ec2", "instances", "t3.micro").

        Missing keys, non-numeric nodes and zero prices all return `default`,
        so each calculator supplies its own hard-coded fallback.

        Args:
            *path: Keys leading to a numeric leaf
            default: Fallback price

        Returns:
            Unit price
        """
        node: Any = self.prices
        for key in path:
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        if isinstance(node, bool) or not isinstance(node, (int, float)) or not node:
            return default
        return node

    def section(self, *path: str) -> Dict[str, Any]:
        """Return the mapping at `path`, or an empty mapping."""
        node: Any = self.prices
        for key in path:
            if not isinstance(node, dict) or key not in node:
                return {}
            node = node[key]
        return node if isinstance(node, dict) else {}

    def __repr__(self) -> str:
        return f"PricingTable(region={self.region!r}, multiplier={self.multiplier})"


def lookup(region: str) -> PricingTable:
    """
    Get the pricing table for a region.

    us-east-1 gets the literal base table. Any other region, known or not,
    gets an independent scaled copy (unknown regions are priced 10% higher).

    Args:
        region: AWS region code

    Returns:
        PricingTable for the region
    """
    if region == BASE_REGION:
        return PricingTable(region, 1.0, BASE_PRICING)

    multiplier = get_region_multiplier(region)
    logger.debug("Scaling base pricing for region %s by %s", region, multiplier)
    return PricingTable(region, multiplier, scale_prices(BASE_PRICING, multiplier))

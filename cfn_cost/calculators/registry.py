"""
Registry of resource cost calculators, keyed by exact CloudFormation type.

Dispatch order used by the stack aggregator:
free types are skipped, then CALCULATORS, then USAGE_ESTIMATORS;
anything else is reported as unsupported.
"""
from typing import Dict, FrozenSet, Optional, Tuple

from cfn_cost.calculators.base import ResourceCostCalculator
from cfn_cost.calculators import compute, storage, database, networking, integration, management
from cfn_cost.calculators.usage_based import USAGE_ESTIMATORS


# Types with no direct recurring cost
FREE_RESOURCES: FrozenSet[str] = frozenset({
    # CloudFormation
    "AWS::CloudFormation::Stack",
    "AWS::CloudFormation::WaitCondition",
    "AWS::CloudFormation::WaitConditionHandle",
    "AWS::CloudFormation::CustomResource",
    "AWS::CloudFormation::Macro",
    "AWS::CDK::Metadata",
    # IAM
    "AWS::IAM::Role",
    "AWS::IAM::Policy",
    "AWS::IAM::ManagedPolicy",
    "AWS::IAM::InstanceProfile",
    "AWS::IAM::User",
    "AWS::IAM::Group",
    "AWS::IAM::AccessKey",
    "AWS::IAM::ServiceLinkedRole",
    # VPC plumbing
    "AWS::EC2::SecurityGroup",
    "AWS::EC2::SecurityGroupIngress",
    "AWS::EC2::SecurityGroupEgress",
    "AWS::EC2::RouteTable",
    "AWS::EC2::Route",
    "AWS::EC2::SubnetRouteTableAssociation",
    "AWS::EC2::NetworkAclEntry",
    "AWS::EC2::VPCGatewayAttachment",
    "AWS::EC2::InternetGateway",
    # Lambda configuration
    "AWS::Lambda::Permission",
    "AWS::Lambda::EventSourceMapping",
    "AWS::Lambda::Alias",
    "AWS::Lambda::Version",
    "AWS::Lambda::LayerVersion",
    "AWS::Lambda::LayerVersionPermission",
    # Logs, notifications and events
    "AWS::Logs::LogGroup",
    "AWS::Logs::LogStream",
    "AWS::Logs::SubscriptionFilter",
    "AWS::SNS::Topic",
    "AWS::SNS::Subscription",
    "AWS::SQS::QueuePolicy",
    "AWS::Events::Rule",
    "AWS::Events::EventBus",
    # Scaling configuration
    "AWS::ApplicationAutoScaling::ScalableTarget",
    "AWS::ApplicationAutoScaling::ScalingPolicy",
    "AWS::AutoScaling::LaunchConfiguration",
    "AWS::AutoScaling::ScalingPolicy",
    "AWS::AutoScaling::LifecycleHook",
    # Parameters
    "AWS::SSM::Parameter",
})

# Any type under these namespaces is free (custom resources are backed by Lambda)
FREE_RESOURCE_PREFIXES: Tuple[str, ...] = ("Custom::",)


def _merge(*tables: Dict[str, ResourceCostCalculator]) -> Dict[str, ResourceCostCalculator]:
    merged: Dict[str, ResourceCostCalculator] = {}
    for table in tables:
        duplicates = merged.keys() & table.keys()
        if duplicates:
            raise ValueError(f"Calculator registered twice: {sorted(duplicates)}")
        merged.update(table)
    return merged


CALCULATORS: Dict[str, ResourceCostCalculator] = _merge(
    compute.CALCULATORS,
    storage.CALCULATORS,
    database.CALCULATORS,
    networking.CALCULATORS,
    integration.CALCULATORS,
    management.CALCULATORS,
)


def is_free_resource(resource_type: str) -> bool:
    return resource_type in FREE_RESOURCES or resource_type.startswith(FREE_RESOURCE_PREFIXES)


def get_calculator(resource_type: str) -> Optional[ResourceCostCalculator]:
    """Fixed-price calculator for a type, if one is registered."""
    return CALCULATORS.get(resource_type)


def get_usage_estimator(resource_type: str) -> Optional[ResourceCostCalculator]:
    """Usage-based estimator for a type, if one is registered."""
    return USAGE_ESTIMATORS.get(resource_type)


def supported_resource_types() -> FrozenSet[str]:
    return frozenset(CALCULATORS) | frozenset(USAGE_ESTIMATORS)

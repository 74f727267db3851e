"""
Default usage assumptions for resources whose cost depends on runtime volume.

Calculators never hard-code a usage volume; they read it from this table so
the assumption behind every estimate is visible in one place. Bump
ASSUMPTIONS_VERSION whenever a value changes, because reported numbers change
with it.
"""
from typing import Dict, Union


ASSUMPTIONS_VERSION = "2024.11"

Number = Union[int, float]


# Resource type -> assumption name -> value
DEFAULT_USAGE: Dict[str, Dict[str, Number]] = {
    "AWS::EC2::NatGateway": {
        "data_processed_gb": 100,
    },
    "AWS::ElasticLoadBalancingV2::LoadBalancer": {
        "average_lcu": 10,
    },
    "AWS::ECS::Service": {
        "task_vcpu": 0.5,
        "task_memory_gb": 1,
    },
    "AWS::EKS::FargateProfile": {
        "pod_count": 1,
        "pod_vcpu": 0.25,
        "pod_memory_gb": 0.5,
    },
    "AWS::EC2::Host": {
        "dedicated_premium": 1.1,  # multiplier over the on-demand instance rate
    },
    "AWS::EC2::TransitGatewayAttachment": {
        "data_processed_gb": 100,
    },
    "AWS::EC2::ClientVpnEndpoint": {
        "active_connections": 1,
    },
    "AWS::NetworkFirewall::Firewall": {
        "data_processed_gb": 100,
    },
    "AWS::Route53Resolver::ResolverEndpoint": {
        "minimum_enis": 2,
    },
    "AWS::CloudFront::Distribution": {
        "data_transfer_gb": 100,
        "requests": 1_000_000,
    },
    "AWS::CloudFront::Function": {
        "invocations": 2_000_000,
    },
    "AWS::Neptune::DBCluster": {
        "storage_gb": 100,
    },
    "AWS::DocDB::DBCluster": {
        "storage_gb": 100,
    },
    "AWS::EC2::Snapshot": {
        "storage_gb": 100,
    },
    "AWS::EFS::FileSystem": {
        "storage_gb": 100,
    },
    "AWS::Backup::BackupVault": {
        "storage_gb": 100,
    },
    "AWS::KinesisFirehose::DeliveryStream": {
        "data_ingested_gb": 100,
    },
    "AWS::KinesisAnalyticsV2::Application": {
        "kpus": 1,
    },
    "AWS::Glue::Job": {
        "dpu_hours": 10,
    },
    "AWS::Glue::Crawler": {
        "dpu_hours": 5,
    },
    "AWS::Config::ConfigurationRecorder": {
        "configuration_items": 1000,
    },
    "AWS::CloudTrail::Trail": {
        "data_events": 100_000,
    },
    "AWS::CodeBuild::Project": {
        "build_minutes": 100,
    },
    "AWS::Grafana::Workspace": {
        "active_editors": 2,
    },
    "AWS::Lambda::Function": {
        "invocations": 100_000,
        "duration_fraction_of_timeout": 0.5,
        "free_tier_gb_seconds": 400_000,
    },
    "AWS::DynamoDB::Table": {
        "on_demand_writes": 1_000_000,
        "on_demand_reads": 5_000_000,
    },
    "AWS::S3::Bucket": {
        "storage_gb": 100,
    },
    "AWS::SQS::Queue": {
        "requests": 1_000_000,
    },
    "AWS::ApiGateway::RestApi": {
        "requests": 1_000_000,
    },
    "AWS::ApiGatewayV2::Api": {
        "requests": 1_000_000,
    },
    "AWS::StepFunctions::StateMachine": {
        "executions": 10_000,
        "transitions_per_execution": 5,
    },
    "AWS::ECR::Repository": {
        "storage_gb": 10,
    },
    "AWS::Route53::RecordSet": {
        "queries": 1_000_000,
    },
}


def usage_assumption(resource_type: str, name: str) -> Number:
    """
    Get a named usage assumption for a resource type.

    Args:
        resource_type: CloudFormation resource type
        name: Assumption name (e.g., 'data_processed_gb')

    Returns:
        Assumed value

    Raises:
        KeyError: If no such assumption is documented
    """
    try:
        return DEFAULT_USAGE[resource_type][name]
    except KeyError:
        raise KeyError(f"No usage assumption '{name}' for {resource_type}") from None

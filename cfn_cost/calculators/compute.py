"""
Calculators for compute resources: EC2, Auto Scaling, ECS, EKS, Lightsail and
SageMaker notebooks.
"""
from typing import Dict

from cfn_cost.calculators.base import (
    ResourceProperties,
    ResourceCostCalculator,
    build_resource_cost,
    detail,
    hourly_detail,
    monthly_detail,
    free_detail,
)
from cfn_cost.domain.cost_models import ResourceCost
from cfn_cost.pricing.catalog import PricingTable


DEFAULT_INSTANCE_TYPE = "t3.micro"
DEFAULT_INSTANCE_PRICE = 0.0104


def ec2_hourly_price(pricing: PricingTable, instance_type: str, fallback_type: str = DEFAULT_INSTANCE_TYPE,
                     fallback_price: float = DEFAULT_INSTANCE_PRICE) -> float:
    """On-demand price of an instance type, falling back to a smaller known type."""
    return pricing.get(
        "ec2", "instances", instance_type,
        default=pricing.get("ec2", "instances", fallback_type, default=fallback_price),
    )


def calculate_ec2_instance(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    instance_type = props.string("InstanceType", DEFAULT_INSTANCE_TYPE)
    hourly_price = ec2_hourly_price(pricing, instance_type)
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"EC2 {instance_type}", hourly_price)],
        confidence="high",
        unit="instance",
    )


def calculate_auto_scaling_group(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    # Instance type lives in the launch template, which is not followed
    min_size = props.integer("MinSize", 1)
    instance_count = props.integer("DesiredCapacity", min_size)
    instance_type = DEFAULT_INSTANCE_TYPE
    hourly_price = ec2_hourly_price(pricing, instance_type)

    has_launch_config = props.has("LaunchTemplate") or props.has("LaunchConfigurationName")
    return build_resource_cost(
        resource_id, props.resource_type,
        [monthly_detail(f"ASG ({instance_count} x {instance_type})", instance_count, hourly_price, "instance/month")],
        confidence="medium" if has_launch_config else "low",
        unit="group",
    )


def calculate_dedicated_host(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    instance_type = props.string("InstanceType", "m5.large")
    host_price = pricing.get("ec2", "hosts", instance_type)
    if not host_price:
        host_price = ec2_hourly_price(pricing, instance_type, "m5.large", 0.096) * props.assumption("dedicated_premium")
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"Dedicated Host ({instance_type})", host_price)],
        confidence="medium",
        unit="host",
    )


def calculate_ecs_service(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    desired_count = props.integer("DesiredCount", 1)
    launch_type = props.string("LaunchType", "FARGATE")

    if launch_type != "FARGATE":
        return build_resource_cost(
            resource_id, props.resource_type,
            [free_detail("ECS Service (EC2 - cost in instances)", desired_count, "tasks")],
            confidence="medium",
            unit="service",
        )

    vcpu = props.assumption("task_vcpu")
    memory_gb = props.assumption("task_memory_gb")
    vcpu_price = pricing.get("fargate", "vcpu_hourly", default=0.04048)
    memory_price = pricing.get("fargate", "memory_gb_hourly", default=0.004445)
    return build_resource_cost(
        resource_id, props.resource_type,
        [
            monthly_detail(f"Fargate vCPU ({vcpu} vCPU est.)", desired_count, vcpu * vcpu_price, "task/month"),
            monthly_detail(f"Fargate Memory ({memory_gb:g}GB est.)", desired_count, memory_gb * memory_price,
                           "task/month"),
        ],
        confidence="low",
        unit="service",
    )


def calculate_eks_cluster(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail("EKS Control Plane", pricing.get("eks", "cluster_hourly", default=0.10))],
        confidence="high",
        unit="cluster",
    )


def calculate_eks_nodegroup(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    min_size = props.integer("ScalingConfig.MinSize", 1)
    node_count = props.integer("ScalingConfig.DesiredSize", min_size)
    instance_types = props.items("InstanceTypes")
    instance_type = instance_types[0] if instance_types and isinstance(instance_types[0], str) else "t3.medium"
    hourly_price = ec2_hourly_price(pricing, instance_type, "t3.medium", 0.0416)
    return build_resource_cost(
        resource_id, props.resource_type,
        [monthly_detail(f"EKS Nodes ({node_count} x {instance_type})", node_count, hourly_price, "node/month")],
        confidence="medium",
        unit="nodegroup",
    )


def calculate_eks_fargate_profile(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    pods = props.assumption("pod_count")
    pod_hourly = (
        props.assumption("pod_vcpu") * pricing.get("fargate", "vcpu_hourly", default=0.04048)
        + props.assumption("pod_memory_gb") * pricing.get("fargate", "memory_gb_hourly", default=0.004445)
    )
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail("Fargate Pods (est. 1 small pod)", pod_hourly, pods, "pod-hours")],
        confidence="low",
        unit="profile",
    )


LIGHTSAIL_BUNDLE_SIZES = ("micro", "small", "medium", "large", "xlarge")


def calculate_lightsail_instance(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    bundle_id = props.string("BundleId", "nano_2_0")
    size = "nano"
    # Later matches win, so "xlarge" beats "large"
    for candidate in LIGHTSAIL_BUNDLE_SIZES:
        if candidate in bundle_id:
            size = candidate

    fallback = {"nano": 3.5, "micro": 5, "small": 10, "medium": 20, "large": 40, "xlarge": 80}[size]
    monthly_price = pricing.get("lightsail", "instances", size, default=fallback)
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"Lightsail {bundle_id}", 1, monthly_price, "instance/month")],
        confidence="high",
        unit="instance",
    )


def calculate_sagemaker_notebook(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    instance_type = props.string("InstanceType", "ml.t3.medium")
    hourly_price = pricing.get("sagemaker", "notebook_instances", instance_type, default=0.05)
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"SageMaker Notebook ({instance_type})", hourly_price)],
        confidence="medium",
        unit="instance",
    )


CALCULATORS: Dict[str, ResourceCostCalculator] = {
    "AWS::EC2::Instance": calculate_ec2_instance,
    "AWS::AutoScaling::AutoScalingGroup": calculate_auto_scaling_group,
    "AWS::EC2::Host": calculate_dedicated_host,
    "AWS::ECS::Service": calculate_ecs_service,
    "AWS::EKS::Cluster": calculate_eks_cluster,
    "AWS::EKS::Nodegroup": calculate_eks_nodegroup,
    "AWS::EKS::FargateProfile": calculate_eks_fargate_profile,
    "AWS::Lightsail::Instance": calculate_lightsail_instance,
    "AWS::SageMaker::NotebookInstance": calculate_sagemaker_notebook,
}

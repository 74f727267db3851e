"""
Calculators for security, governance, monitoring and developer tooling.
"""
from typing import Dict

from cfn_cost.calculators.base import (
    ResourceProperties,
    ResourceCostCalculator,
    build_resource_cost,
    detail,
    hourly_detail,
    free_detail,
    fixed_monthly,
)
from cfn_cost.domain.cost_models import ResourceCost
from cfn_cost.pricing.catalog import PricingTable


def calculate_config_recorder(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    items = props.assumption("configuration_items")
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"Config Items Recorded (est. {items}/mo)", items,
                pricing.get("config", "config_items", default=0.003), "items")],
        confidence="low",
        unit="recorder",
    )


def calculate_cloudtrail(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    multi_region = props.flag("IsMultiRegionTrail", False)
    events = props.assumption("data_events")
    price_per_100k = pricing.get("cloudtrail", "data_events", default=0.10)
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(
            f"CloudTrail{' (Multi-Region)' if multi_region else ''} Data Events (est. {events // 1000}k)",
            events, price_per_100k / 100_000, "events",
        )],
        confidence="low",
        unit="trail",
    )


def codebuild_minute_price(pricing: PricingTable, compute_type: str, environment_type: str) -> float:
    """Per-minute price for a CodeBuild environment and compute size."""
    if environment_type == "ARM_CONTAINER":
        return pricing.get("codebuild", "arm_large", default=0.015)
    if environment_type == "LINUX_GPU_CONTAINER":
        return pricing.get("codebuild", "gpu_large", default=0.18)
    if "WINDOWS" in environment_type:
        if "LARGE" in compute_type:
            return pricing.get("codebuild", "windows_large", default=0.04)
        return pricing.get("codebuild", "windows_medium", default=0.02)
    if compute_type == "BUILD_GENERAL1_MEDIUM":
        return pricing.get("codebuild", "linux_medium", default=0.01)
    if compute_type == "BUILD_GENERAL1_LARGE":
        return pricing.get("codebuild", "linux_large", default=0.02)
    if compute_type == "BUILD_GENERAL1_2XLARGE":
        return pricing.get("codebuild", "linux_2xlarge", default=0.04)
    return pricing.get("codebuild", "linux_small", default=0.005)


def calculate_codebuild_project(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    compute_type = props.string("Environment.ComputeType", "BUILD_GENERAL1_SMALL")
    environment_type = props.string("Environment.Type", "LINUX_CONTAINER")
    minutes = props.assumption("build_minutes")
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"CodeBuild {compute_type} (est. {minutes} min)", minutes,
                codebuild_minute_price(pricing, compute_type, environment_type), "minutes")],
        confidence="low",
        unit="project",
    )


def calculate_wafv2_web_acl(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    rule_count = len(props.items("Rules"))
    details = [detail("Web ACL", 1, pricing.get("waf", "web_acl", default=5.00), "ACL/month")]
    if rule_count > 0:
        details.append(detail(f"Rules ({rule_count})", rule_count,
                              pricing.get("waf", "rule", default=1.00), "rules/month"))
    return build_resource_cost(resource_id, props.resource_type, details, confidence="medium", unit="web ACL")


def calculate_grafana_workspace(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    editors = props.assumption("active_editors")
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"Managed Grafana Editors (est. {editors})", editors,
                pricing.get("grafana", "editor", default=9.00), "editors/month")],
        confidence="low",
        unit="workspace",
    )


def calculate_simple_ad(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    size = props.string("Size", "Small")
    size_key = size.lower()
    hourly_price = pricing.get("directory_service", "simple_ad", size_key,
                               default=0.15 if size_key == "large" else 0.05)
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"Simple AD ({size})", hourly_price)],
        confidence="high",
        unit="directory",
    )


def calculate_microsoft_ad(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    edition = props.string("Edition", "Standard")
    edition_key = edition.lower()
    hourly_price = pricing.get("directory_service", "microsoft_ad", edition_key,
                               default=0.40 if edition_key == "enterprise" else 0.12)
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"Microsoft AD ({edition})", hourly_price)],
        confidence="high",
        unit="directory",
    )


def calculate_ssm_activation(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    return build_resource_cost(
        resource_id, props.resource_type,
        [free_detail("SSM Activation (Standard)", 1, "activation")],
        confidence="medium",
        unit="activation",
    )


CALCULATORS: Dict[str, ResourceCostCalculator] = {
    "AWS::SecretsManager::Secret": fixed_monthly(
        "Secrets Manager Secret", ("secrets_manager", "secret"), 0.40, "high", "secret", "secret/month"),
    "AWS::KMS::Key": fixed_monthly(
        "KMS Customer Managed Key", ("kms", "key"), 1.00, "high", "key", "key/month"),
    "AWS::CloudWatch::Alarm": fixed_monthly(
        "CloudWatch Alarm", ("cloudwatch", "alarm_standard"), 0.10, "high", "alarm", "alarm/month"),
    "AWS::CloudWatch::Dashboard": fixed_monthly(
        "CloudWatch Dashboard", ("cloudwatch", "dashboards"), 3.00, "high", "dashboard", "dashboard/month"),
    "AWS::Config::ConfigRule": fixed_monthly(
        "AWS Config Rule", ("config", "rules"), 1.00, "medium", "rule", "rule/month"),
    "AWS::Config::ConfigurationRecorder": calculate_config_recorder,
    "AWS::CloudTrail::Trail": calculate_cloudtrail,
    "AWS::CodeBuild::Project": calculate_codebuild_project,
    "AWS::CodePipeline::Pipeline": fixed_monthly(
        "CodePipeline Active Pipeline", ("codepipeline", "active_pipeline"), 1.00, "high", "pipeline",
        "pipeline/month"),
    "AWS::WAFv2::WebACL": calculate_wafv2_web_acl,
    "AWS::WAF::WebACL": fixed_monthly(
        "WAF Web ACL", ("waf", "web_acl"), 5.00, "medium", "web ACL", "ACL/month"),
    "AWS::ACMPCA::CertificateAuthority": fixed_monthly(
        "ACM Private Certificate Authority", ("acm_pca", "private_ca"), 400.00, "high",
        "certificate authority", "CA/month"),
    "AWS::Grafana::Workspace": calculate_grafana_workspace,
    "AWS::DirectoryService::SimpleAD": calculate_simple_ad,
    "AWS::DirectoryService::MicrosoftAD": calculate_microsoft_ad,
    "AWS::SSM::Activation": calculate_ssm_activation,
}

"""
Calculators for networking, load balancing, DNS and CDN resources.
"""
from typing import Dict

from cfn_cost.calculators.base import (
    ResourceProperties,
    ResourceCostCalculator,
    build_resource_cost,
    detail,
    hourly_detail,
    free_detail,
    fixed_hourly,
    fixed_monthly,
)
from cfn_cost.domain.cost_models import ResourceCost
from cfn_cost.pricing.catalog import PricingTable


def calculate_nat_gateway(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    data_gb = props.assumption("data_processed_gb")
    return build_resource_cost(
        resource_id, props.resource_type,
        [
            hourly_detail("NAT Gateway Hourly", pricing.get("nat_gateway", "hourly", default=0.045)),
            detail(f"Data Processing (est. {data_gb}GB)", data_gb,
                   pricing.get("nat_gateway", "per_gb", default=0.045), "GB"),
        ],
        confidence="medium",
        unit="gateway",
    )


def calculate_load_balancer_v2(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    kind = "nlb" if props.string("Type", "application") == "network" else "alb"
    hourly_price = pricing.get("load_balancer", kind, "hourly", default=0.0225)
    lcu_price = pricing.get("load_balancer", kind, "lcu_hourly", default=0.006 if kind == "nlb" else 0.008)
    average_lcu = props.assumption("average_lcu")
    return build_resource_cost(
        resource_id, props.resource_type,
        [
            hourly_detail(f"{kind.upper()} Hourly", hourly_price),
            hourly_detail(f"LCU (est. {average_lcu} avg)", lcu_price, average_lcu, "LCU-hours"),
        ],
        confidence="medium",
        unit="load balancer",
    )


def calculate_elastic_ip(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    return build_resource_cost(
        resource_id, props.resource_type,
        [free_detail("Elastic IP (free when attached)", 1, "IP/month")],
        confidence="medium",
        unit="elastic IP",
    )


def calculate_vpc_endpoint(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    if props.string("VpcEndpointType", "Interface") == "Gateway":
        return build_resource_cost(
            resource_id, props.resource_type,
            [free_detail("VPC Gateway Endpoint (free)", 1, "endpoint")],
            confidence="high",
            unit="endpoint",
        )

    az_count = max(len(props.items("SubnetIds")), 1)
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"VPC Interface Endpoint ({az_count} AZ)",
                       pricing.get("vpc_endpoint", "interface_hourly", default=0.01), az_count, "endpoint-hours")],
        confidence="medium",
        unit="endpoint",
    )


def calculate_transit_gateway_attachment(resource_id: str, props: ResourceProperties,
                                         pricing: PricingTable) -> ResourceCost:
    data_gb = props.assumption("data_processed_gb")
    return build_resource_cost(
        resource_id, props.resource_type,
        [
            hourly_detail("Transit Gateway Attachment", pricing.get("transit_gateway", "hourly", default=0.05)),
            detail(f"Data Processing (est. {data_gb}GB)", data_gb,
                   pricing.get("transit_gateway", "data_processed", default=0.02), "GB"),
        ],
        confidence="medium",
        unit="attachment",
    )


def calculate_client_vpn_endpoint(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    connections = props.assumption("active_connections")
    return build_resource_cost(
        resource_id, props.resource_type,
        [
            hourly_detail("Client VPN Endpoint",
                          pricing.get("vpn_connection", "client_vpn", "endpoint_hourly", default=0.05)),
            hourly_detail(f"VPN Connection (est. {connections})",
                          pricing.get("vpn_connection", "client_vpn", "connection_hourly", default=0.05),
                          connections, "connection-hours"),
        ],
        confidence="medium",
        unit="endpoint",
    )


def calculate_direct_connect(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    bandwidth = props.string("Bandwidth", "1Gbps")
    port_price = pricing.get("direct_connect", "port_hours", bandwidth, default=0.30)
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"Direct Connect {bandwidth}", port_price, unit="port-hours")],
        confidence="high",
        unit="connection",
    )


def calculate_network_firewall(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    endpoints = len(props.items("SubnetMappings")) or 1
    data_gb = props.assumption("data_processed_gb")
    return build_resource_cost(
        resource_id, props.resource_type,
        [
            hourly_detail(f"Network Firewall Endpoints ({endpoints})",
                          pricing.get("network_firewall", "endpoint_hourly", default=0.395),
                          endpoints, "endpoint-hours"),
            detail(f"Data Processing (est. {data_gb}GB)", data_gb,
                   pricing.get("network_firewall", "data_processed", default=0.065), "GB"),
        ],
        confidence="medium",
        unit="firewall",
    )


def calculate_resolver_endpoint(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    # Route 53 Resolver requires at least two IP addresses per endpoint
    enis = max(len(props.items("IpAddresses")), props.assumption("minimum_enis"))
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"Resolver Endpoint ENIs ({enis})",
                       pricing.get("route53", "resolver_endpoint", default=0.125), enis, "ENI-hours")],
        confidence="medium",
        unit="endpoint",
    )


def calculate_cloudfront_distribution(resource_id: str, props: ResourceProperties,
                                      pricing: PricingTable) -> ResourceCost:
    data_gb = props.assumption("data_transfer_gb")
    requests = props.assumption("requests")
    return build_resource_cost(
        resource_id, props.resource_type,
        [
            detail(f"CloudFront Data Transfer (est. {data_gb}GB)", data_gb,
                   pricing.get("cloudfront", "data_transfer", "us", default=0.085), "GB"),
            detail(f"HTTPS Requests (est. {requests / 1_000_000:g}M)", requests / 10_000,
                   pricing.get("cloudfront", "requests", "https", default=0.01), "10k requests"),
        ],
        confidence="low",
        unit="distribution",
    )


def calculate_cloudfront_function(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    invocations = props.assumption("invocations")
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"CloudFront Function Invocations (est. {invocations / 1_000_000:g}M/mo)", invocations,
                pricing.get("cloudfront", "functions", default=0.10) / 1_000_000, "invocations")],
        confidence="low",
        unit="function",
    )


CALCULATORS: Dict[str, ResourceCostCalculator] = {
    "AWS::EC2::NatGateway": calculate_nat_gateway,
    "AWS::ElasticLoadBalancingV2::LoadBalancer": calculate_load_balancer_v2,
    "AWS::ElasticLoadBalancing::LoadBalancer": fixed_hourly(
        "Classic ELB", ("load_balancer", "clb", "hourly"), 0.025, "high", "load balancer"),
    "AWS::EC2::EIP": calculate_elastic_ip,
    "AWS::EC2::VPCEndpoint": calculate_vpc_endpoint,
    "AWS::EC2::VPNConnection": fixed_hourly(
        "Site-to-Site VPN Connection", ("vpn_connection", "hourly"), 0.05, "high", "connection"),
    "AWS::EC2::ClientVpnEndpoint": calculate_client_vpn_endpoint,
    "AWS::EC2::TransitGateway": fixed_hourly(
        "Transit Gateway", ("transit_gateway", "hourly"), 0.05, "high", "transit gateway"),
    "AWS::EC2::TransitGatewayAttachment": calculate_transit_gateway_attachment,
    "AWS::EC2::TransitGatewayPeeringAttachment": fixed_hourly(
        "Transit Gateway Peering Attachment", ("transit_gateway", "peering"), 0.05, "high", "attachment"),
    "AWS::EC2::TrafficMirrorSession": fixed_hourly(
        "Traffic Mirror Session", ("traffic_mirror", "session_hourly"), 0.15, "high", "session"),
    "AWS::DirectConnect::Connection": calculate_direct_connect,
    "AWS::GlobalAccelerator::Accelerator": fixed_hourly(
        "Global Accelerator", ("global_accelerator", "hourly"), 0.025, "medium", "accelerator"),
    "AWS::NetworkFirewall::Firewall": calculate_network_firewall,
    "AWS::Route53::HostedZone": fixed_monthly(
        "Route53 Hosted Zone", ("route53", "hosted_zone"), 0.50, "high", "hosted zone", "zone/month"),
    "AWS::Route53::HealthCheck": fixed_monthly(
        "Route 53 Health Check (Basic)", ("route53", "health_checks", "basic"), 0.50, "medium",
        "health check", "check/month"),
    "AWS::Route53Resolver::ResolverEndpoint": calculate_resolver_endpoint,
    "AWS::CloudFront::Distribution": calculate_cloudfront_distribution,
    "AWS::CloudFront::Function": calculate_cloudfront_function,
}

"""
Calculators for managed databases, caches, search and migration instances.
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


def _instance_price(pricing: PricingTable, service: str, instance_type: str,
                    fallback_type: str, fallback_price: float) -> float:
    return pricing.get(
        service, "instances", instance_type,
        default=pricing.get(service, "instances", fallback_type, default=fallback_price),
    )


def calculate_rds_instance(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    instance_class = props.string("DBInstanceClass", "db.t3.micro")
    allocated_storage = props.number("AllocatedStorage", 20)
    multi_az = props.flag("MultiAZ", False)
    storage_type = props.string("StorageType", "gp2").lower()
    engine = props.string("Engine", "mysql").lower()

    engine_key = engine if pricing.section("rds", "instances", engine) else "mysql"
    hourly_price = pricing.get(
        "rds", "instances", engine_key, instance_class,
        default=pricing.get("rds", "instances", engine_key, "db.t3.micro", default=0.017),
    )
    storage_price = pricing.get(
        "rds", "storage", storage_type,
        default=pricing.get("rds", "storage", "gp2", default=0.115),
    )
    # Multi-AZ runs a full standby: both compute and storage double
    copies = 2 if multi_az else 1

    return build_resource_cost(
        resource_id, props.resource_type,
        [
            monthly_detail(f"RDS {instance_class}{' (Multi-AZ)' if multi_az else ''}", copies, hourly_price,
                           "instance/month"),
            detail(f"Storage ({storage_type})", allocated_storage * copies, storage_price, "GB/month"),
        ],
        confidence="high",
        unit="instance",
    )


def calculate_rds_cluster(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    if props.string("EngineMode", "provisioned") != "serverless":
        return build_resource_cost(
            resource_id, props.resource_type,
            [free_detail("Aurora Cluster (cost in DB instances)", 1, "cluster")],
            confidence="high",
            unit="cluster",
        )

    min_capacity = props.number("ScalingConfiguration.MinCapacity", 2)
    max_capacity = props.number("ScalingConfiguration.MaxCapacity", 8)
    average_capacity = (min_capacity + max_capacity) / 2
    acu_price = pricing.get("aurora", "serverless_acu_hourly", default=0.06)
    return build_resource_cost(
        resource_id, props.resource_type,
        [monthly_detail(f"Aurora Serverless (avg {average_capacity:g} ACU)", average_capacity, acu_price,
                        "ACU/month")],
        confidence="medium",
        unit="cluster",
    )


def calculate_cache_cluster(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    node_type = props.string("CacheNodeType", "cache.t3.micro")
    nodes = props.integer("NumCacheNodes", 1)
    hourly_price = pricing.get(
        "elasticache", "nodes", node_type,
        default=pricing.get("elasticache", "nodes", "cache.t3.micro", default=0.017),
    )
    return build_resource_cost(
        resource_id, props.resource_type,
        [monthly_detail(f"ElastiCache {node_type}", nodes, hourly_price, "node/month")],
        confidence="high",
        unit="cluster",
    )


def calculate_replication_group(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    node_type = props.string("CacheNodeType", "cache.t3.micro")
    node_groups = props.integer("NumNodeGroups", 1)
    replicas = props.integer("ReplicasPerNodeGroup", 1)
    total_nodes = node_groups * (1 + replicas)
    hourly_price = pricing.get(
        "elasticache", "nodes", node_type,
        default=pricing.get("elasticache", "nodes", "cache.t3.micro", default=0.017),
    )
    return build_resource_cost(
        resource_id, props.resource_type,
        [monthly_detail(f"ElastiCache {node_type} ({total_nodes} nodes)", total_nodes, hourly_price, "node/month")],
        confidence="high",
        unit="replication group",
    )


def _storage_only_cluster(label: str, service: str):
    def calculate(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
        size = props.assumption("storage_gb")
        return build_resource_cost(
            resource_id, props.resource_type,
            [detail(f"{label} Storage (est. {size}GB)", size, pricing.get(service, "storage", default=0.10),
                    "GB/month")],
            confidence="low",
            unit="cluster",
        )
    return calculate


def _hourly_instance(label: str, service: str, property_name: str, default_type: str, fallback_price: float):
    def calculate(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
        instance_type = props.string(property_name, default_type)
        hourly_price = _instance_price(pricing, service, instance_type, default_type, fallback_price)
        return build_resource_cost(
            resource_id, props.resource_type,
            [hourly_detail(f"{label} {instance_type}", hourly_price)],
            confidence="high",
            unit="instance",
        )
    return calculate


def calculate_redshift_cluster(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    node_type = props.string("NodeType", "dc2.large")
    nodes = props.integer("NumberOfNodes", 1)
    hourly_price = _instance_price(pricing, "redshift", node_type, "dc2.large", 0.25)
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"Redshift {node_type} ({nodes} nodes)", hourly_price, nodes, "node-hours")],
        confidence="high",
        unit="cluster",
    )


def _search_domain(label: str, service: str, config_key: str, default_type: str):
    def calculate(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
        instance_type = props.string(f"{config_key}.InstanceType", default_type)
        instances = props.integer(f"{config_key}.InstanceCount", 1)
        hourly_price = pricing.get(
            service, "instances", instance_type,
            default=pricing.get("opensearch", "instances", "t3.small.search", default=0.036),
        )
        return build_resource_cost(
            resource_id, props.resource_type,
            [hourly_detail(f"{label} {instance_type} ({instances} instances)", hourly_price, instances,
                           "instance-hours")],
            confidence="high",
            unit="domain",
        )
    return calculate


CALCULATORS: Dict[str, ResourceCostCalculator] = {
    "AWS::RDS::DBInstance": calculate_rds_instance,
    "AWS::RDS::DBCluster": calculate_rds_cluster,
    "AWS::ElastiCache::CacheCluster": calculate_cache_cluster,
    "AWS::ElastiCache::ReplicationGroup": calculate_replication_group,
    "AWS::Neptune::DBCluster": _storage_only_cluster("Neptune", "neptune"),
    "AWS::Neptune::DBInstance": _hourly_instance("Neptune", "neptune", "DBInstanceClass", "db.r5.large", 0.348),
    "AWS::DocDB::DBCluster": _storage_only_cluster("DocumentDB", "documentdb"),
    "AWS::DocDB::DBInstance": _hourly_instance("DocumentDB", "documentdb", "DBInstanceClass", "db.r5.large", 0.277),
    "AWS::Redshift::Cluster": calculate_redshift_cluster,
    "AWS::OpenSearchService::Domain": _search_domain(
        "OpenSearch", "opensearch", "ClusterConfig", "t3.small.search"),
    "AWS::Elasticsearch::Domain": _search_domain(
        "Elasticsearch", "elasticsearch", "ElasticsearchClusterConfig", "t3.small.elasticsearch"),
    "AWS::DMS::ReplicationInstance": _hourly_instance(
        "DMS", "dms", "ReplicationInstanceClass", "dms.t3.micro", 0.018),
}

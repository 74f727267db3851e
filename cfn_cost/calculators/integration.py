"""
Calculators for messaging, streaming, ETL, file transfer and workflow
orchestration resources.
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
)
from cfn_cost.domain.cost_models import ResourceCost
from cfn_cost.pricing.catalog import PricingTable


def calculate_mq_broker(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    instance_type = props.string("HostInstanceType", "mq.t3.micro")
    hourly_price = pricing.get(
        "mq", "instance_hourly", instance_type,
        default=pricing.get("mq", "instance_hourly", "mq.t3.micro", default=0.027),
    )
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"Amazon MQ {instance_type}", hourly_price)],
        confidence="high",
        unit="broker",
    )


def calculate_msk_cluster(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    instance_type = props.string("BrokerNodeGroupInfo.InstanceType", "kafka.t3.small")
    brokers = props.integer("NumberOfBrokerNodes", 3)
    hourly_price = pricing.get(
        "msk", "instance_hourly", instance_type,
        default=pricing.get("msk", "instance_hourly", "kafka.t3.small", default=0.072),
    )
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"MSK {instance_type} ({brokers} brokers)", hourly_price, brokers, "broker-hours")],
        confidence="high",
        unit="cluster",
    )


def calculate_kinesis_stream(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    shards = props.integer("ShardCount", 1)
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"Kinesis Stream ({shards} shards)", pricing.get("kinesis", "shard_hourly", default=0.015),
                       shards, "shard-hours")],
        confidence="high",
        unit="stream",
    )


def calculate_firehose_stream(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    data_gb = props.assumption("data_ingested_gb")
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"Kinesis Firehose Data Ingested (est. {data_gb}GB)", data_gb,
                pricing.get("kinesis_firehose", "data_ingested", default=0.029), "GB")],
        confidence="low",
        unit="delivery stream",
    )


def calculate_kinesis_analytics(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    kpus = props.assumption("kpus")
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"Kinesis Analytics Application ({kpus} KPU est.)",
                       pricing.get("kinesis_analytics", "kpu_hourly", default=0.11), kpus, "KPU-hours")],
        confidence="low",
        unit="application",
    )


def calculate_glue_job(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    dpu_hours = props.assumption("dpu_hours")
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"Glue Job (est. {dpu_hours} DPU-hours)", dpu_hours,
                pricing.get("glue", "dpu_hour", default=0.44), "DPU-hours")],
        confidence="low",
        unit="job",
    )


def calculate_glue_crawler(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    dpu_hours = props.assumption("dpu_hours")
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"Glue Crawler (est. {dpu_hours} DPU-hours)", dpu_hours,
                pricing.get("glue", "crawler_dpu_hour", default=0.44), "DPU-hours")],
        confidence="low",
        unit="crawler",
    )


def calculate_glue_database(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    return build_resource_cost(
        resource_id, props.resource_type,
        [free_detail("Glue Database (free tier/negligible)", 1, "database")],
        confidence="high",
        unit="database",
    )


def calculate_mwaa_environment(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    environment_class = props.string("EnvironmentClass", "mw1.small")
    hourly_price = pricing.get("mwaa", "environment", environment_class, default=0.49)
    return build_resource_cost(
        resource_id, props.resource_type,
        [hourly_detail(f"MWAA Environment ({environment_class})", hourly_price)],
        confidence="high",
        unit="environment",
    )


CALCULATORS: Dict[str, ResourceCostCalculator] = {
    "AWS::AmazonMQ::Broker": calculate_mq_broker,
    "AWS::MSK::Cluster": calculate_msk_cluster,
    "AWS::Kinesis::Stream": calculate_kinesis_stream,
    "AWS::KinesisFirehose::DeliveryStream": calculate_firehose_stream,
    "AWS::KinesisAnalyticsV2::Application": calculate_kinesis_analytics,
    "AWS::Glue::Job": calculate_glue_job,
    "AWS::Glue::Crawler": calculate_glue_crawler,
    "AWS::Glue::Database": calculate_glue_database,
    "AWS::Transfer::Server": fixed_hourly(
        "AWS Transfer Family Server", ("transfer_family", "protocol_hourly"), 0.30, "medium", "server"),
    "AWS::MWAA::Environment": calculate_mwaa_environment,
}

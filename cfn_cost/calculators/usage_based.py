"""
Estimators for usage-dominated resources.

These types have no fixed price worth speaking of; what they cost depends on
requests, executions or stored data. Each estimate applies the documented
default usage from pricing.assumptions and is graded accordingly.
"""
from typing import Dict

from cfn_cost.calculators.base import (
    ResourceProperties,
    ResourceCostCalculator,
    build_resource_cost,
    detail,
    monthly_detail,
)
from cfn_cost.domain.cost_models import ResourceCost
from cfn_cost.pricing.catalog import PricingTable


PER_MILLION = 1_000_000


def _millions(count: float) -> str:
    return f"{count / PER_MILLION:g}M"


def estimate_lambda_function(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    memory_mb = props.number("MemorySize", 128)
    timeout_seconds = props.number("Timeout", 3)
    invocations = props.assumption("invocations")
    # Average run assumed to take half the configured timeout
    average_duration_ms = timeout_seconds * 1000 * props.assumption("duration_fraction_of_timeout")

    gb_seconds = (memory_mb / 1024) * (average_duration_ms / 1000) * invocations
    billable_gb_seconds = max(0, gb_seconds - props.assumption("free_tier_gb_seconds"))

    return build_resource_cost(
        resource_id, props.resource_type,
        [
            detail(f"Lambda Requests (est. {invocations:,}/mo)", invocations,
                   pricing.get("lambda", "requests", default=0.20) / PER_MILLION, "requests"),
            detail(f"Lambda Compute ({memory_mb:g}MB, {average_duration_ms:g}ms avg)", billable_gb_seconds,
                   pricing.get("lambda", "duration", default=0.0000166667), "GB-seconds"),
        ],
        confidence="low",
        unit="function",
    )


def estimate_dynamodb_table(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    if props.string("BillingMode", "PROVISIONED") == "PAY_PER_REQUEST":
        writes = props.assumption("on_demand_writes")
        reads = props.assumption("on_demand_reads")
        return build_resource_cost(
            resource_id, props.resource_type,
            [
                detail(f"DynamoDB On-Demand Writes (est. {_millions(writes)}/mo)", writes,
                       pricing.get("dynamodb", "on_demand_write", default=1.25) / PER_MILLION, "writes"),
                detail(f"DynamoDB On-Demand Reads (est. {_millions(reads)}/mo)", reads,
                       pricing.get("dynamodb", "on_demand_read", default=0.25) / PER_MILLION, "reads"),
            ],
            confidence="low",
            unit="table",
        )

    read_units = props.number("ProvisionedThroughput.ReadCapacityUnits", 5) or 5
    write_units = props.number("ProvisionedThroughput.WriteCapacityUnits", 5) or 5
    return build_resource_cost(
        resource_id, props.resource_type,
        [
            monthly_detail(f"DynamoDB Read Capacity ({read_units} RCU)", read_units,
                           pricing.get("dynamodb", "read_capacity", default=0.00013), "RCU/month"),
            monthly_detail(f"DynamoDB Write Capacity ({write_units} WCU)", write_units,
                           pricing.get("dynamodb", "write_capacity", default=0.00065), "WCU/month"),
        ],
        confidence="medium",
        unit="table",
    )


def estimate_s3_bucket(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    size = props.assumption("storage_gb")
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"S3 Storage (est. {size}GB)", size,
                pricing.get("s3", "standard_storage", default=0.023), "GB/month")],
        confidence="low",
        unit="bucket",
    )


def estimate_sqs_queue(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    queue_name = props.string("QueueName", "")
    fifo = queue_name.endswith(".fifo") or props.flag("FifoQueue", False)
    requests = props.assumption("requests")
    price_per_million = (
        pricing.get("sqs", "fifo", default=0.50) if fifo else pricing.get("sqs", "standard", default=0.40)
    )
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"SQS {'FIFO' if fifo else 'Standard'} Requests (est. {_millions(requests)}/mo)", requests,
                price_per_million / PER_MILLION, "requests")],
        confidence="low",
        unit="queue",
    )


def estimate_api_gateway(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    http_api = props.resource_type == "AWS::ApiGatewayV2::Api"
    requests = props.assumption("requests")
    price_per_million = (
        pricing.get("api_gateway", "http", default=1.00) if http_api
        else pricing.get("api_gateway", "rest", default=3.50)
    )
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"{'HTTP' if http_api else 'REST'} API Requests (est. {_millions(requests)}/mo)", requests,
                price_per_million / PER_MILLION, "requests")],
        confidence="low",
        unit="API",
    )


def estimate_state_machine(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    machine_type = props.string("StateMachineType", "STANDARD")
    transitions = props.assumption("executions") * props.assumption("transitions_per_execution")
    price_per_million = (
        pricing.get("step_functions", "express", default=1.00) if machine_type == "EXPRESS"
        else pricing.get("step_functions", "standard", default=25.00)
    )
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"Step Functions {machine_type} (est. {transitions:,} transitions/mo)", transitions,
                price_per_million / PER_MILLION, "transitions")],
        confidence="low",
        unit="state machine",
    )


def estimate_ecr_repository(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    size = props.assumption("storage_gb")
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"ECR Storage (est. {size}GB)", size, pricing.get("ecr", "storage", default=0.10), "GB/month")],
        confidence="low",
        unit="repository",
    )


def estimate_record_set(resource_id: str, props: ResourceProperties, pricing: PricingTable) -> ResourceCost:
    queries = props.assumption("queries")
    return build_resource_cost(
        resource_id, props.resource_type,
        [detail(f"DNS Queries (est. {_millions(queries)}/mo)", queries,
                pricing.get("route53", "queries", default=0.40) / PER_MILLION, "queries")],
        confidence="low",
        unit="record set",
    )


USAGE_ESTIMATORS: Dict[str, ResourceCostCalculator] = {
    "AWS::Lambda::Function": estimate_lambda_function,
    "AWS::DynamoDB::Table": estimate_dynamodb_table,
    "AWS::S3::Bucket": estimate_s3_bucket,
    "AWS::SQS::Queue": estimate_sqs_queue,
    "AWS::ApiGateway::RestApi": estimate_api_gateway,
    "AWS::ApiGatewayV2::Api": estimate_api_gateway,
    "AWS::StepFunctions::StateMachine": estimate_state_machine,
    "AWS::ECR::Repository": estimate_ecr_repository,
    "AWS::Route53::RecordSet": estimate_record_set,
}

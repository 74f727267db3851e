"""
Tests for individual resource cost calculators and the calculator registry.
"""

import pytest

from cfn_cost.calculators.base import ResourceProperties, to_bool, to_number
from cfn_cost.calculators.registry import (
    CALCULATORS,
    get_calculator,
    get_usage_estimator,
    is_free_resource,
    supported_resource_types,
)
from cfn_cost.calculators.usage_based import USAGE_ESTIMATORS
from cfn_cost.pricing.catalog import lookup


HOURS = 730
PRICING = lookup("us-east-1")


def price(resource_type, properties=None, template=None, parameters=None, pricing=PRICING):
    """Run the registered calculator for one resource."""
    resource = {"Type": resource_type, "Properties": properties or {}}
    template = template or {"Resources": {"Subject": resource}}
    calculator = get_calculator(resource_type) or get_usage_estimator(resource_type)
    return calculator("Subject", ResourceProperties(template, resource, parameters), pricing)


def test_to_number_coerces_numeric_strings():
    """Numeric strings are numbers; placeholders and booleans are not."""
    assert to_number("20") == 20
    assert to_number(" 0.5 ") == 0.5
    assert to_number(7.5) == 7.5
    assert to_number("{{Ref:Size}}", 100) == 100
    assert to_number(True, 3) == 3
    assert to_number("lots", 1) == 1


def test_to_bool_accepts_strings():
    """CloudFormation booleans often arrive as strings."""
    assert to_bool("true") is True
    assert to_bool("False") is False
    assert to_bool(True) is True
    assert to_bool("maybe", default=True) is True


@pytest.mark.parametrize("resource_type", sorted(supported_resource_types()))
def test_every_calculator_prices_bare_resource(resource_type):
    """Each registered type prices a resource with no properties consistently."""
    cost = price(resource_type)

    assert cost.resource_id == "Subject"
    assert cost.resource_type == resource_type
    assert cost.details
    assert cost.monthly_cost >= 0
    assert cost.monthly_cost == pytest.approx(sum(d.monthly_cost for d in cost.details), abs=1e-6)
    assert cost.hourly_cost == cost.monthly_cost / HOURS
    assert cost.confidence in ("high", "medium", "low", "unknown")
    for item in cost.details:
        assert item.monthly_cost == pytest.approx(item.quantity * item.unit_price)


def test_registries_do_not_overlap():
    """A type is either fixed-price or usage-based, never both."""
    assert not set(CALCULATORS) & set(USAGE_ESTIMATORS)


def test_free_resources():
    """Free types and custom resources are recognised; priced types are not."""
    assert is_free_resource("AWS::IAM::Role")
    assert is_free_resource("AWS::EC2::SecurityGroup")
    assert is_free_resource("Custom::CertificateValidator")
    assert not is_free_resource("AWS::EC2::Instance")
    assert not is_free_resource("AWS::Made::Up")


def test_ec2_instance():
    """Instances are billed at their on-demand rate all month."""
    cost = price("AWS::EC2::Instance", {"InstanceType": "t3.large"})
    assert cost.monthly_cost == pytest.approx(0.0832 * HOURS)
    assert cost.confidence == "high"
    assert cost.details[0].quantity == HOURS


def test_ec2_unknown_instance_type_falls_back():
    """Unknown instance types are priced as t3.micro."""
    cost = price("AWS::EC2::Instance", {"InstanceType": "zz9.huge"})
    assert cost.monthly_cost == pytest.approx(0.0104 * HOURS)


def test_ec2_instance_type_from_parameter():
    """Parameter defaults and overrides flow into the instance type."""
    template = {"Parameters": {"Size": {"Type": "String", "Default": "t3.small"}}, "Resources": {}}
    properties = {"InstanceType": {"Ref": "Size"}}

    assert price("AWS::EC2::Instance", properties, template).monthly_cost == pytest.approx(0.0208 * HOURS)
    overridden = price("AWS::EC2::Instance", properties, template, {"Size": "t3.medium"})
    assert overridden.monthly_cost == pytest.approx(0.0416 * HOURS)


def test_region_scaling_applies_to_calculators():
    """Calculators read the scaled table for non-base regions."""
    cost = price("AWS::EC2::Instance", {"InstanceType": "t3.micro"}, pricing=lookup("eu-west-1"))
    assert cost.monthly_cost == pytest.approx(0.0104 * 1.05 * HOURS)


def test_nat_gateway_has_hourly_and_data_lines():
    """NAT gateways charge hourly plus the assumed 100 GB of processing."""
    cost = price("AWS::EC2::NatGateway")
    assert [d.component for d in cost.details] == ["NAT Gateway Hourly", "Data Processing (est. 100GB)"]
    assert cost.monthly_cost == pytest.approx(0.045 * HOURS + 100 * 0.045)
    assert cost.confidence == "medium"


def test_application_load_balancer():
    """ALBs charge hourly plus the assumed 10 LCUs."""
    cost = price("AWS::ElasticLoadBalancingV2::LoadBalancer")
    assert cost.details[0].component == "ALB Hourly"
    assert cost.monthly_cost == pytest.approx(0.0225 * HOURS + 0.008 * HOURS * 10)


def test_network_load_balancer():
    """Network load balancers use the NLB LCU rate."""
    cost = price("AWS::ElasticLoadBalancingV2::LoadBalancer", {"Type": "network"})
    assert cost.details[0].component == "NLB Hourly"
    assert cost.monthly_cost == pytest.approx(0.0225 * HOURS + 0.006 * HOURS * 10)


def test_gp3_volume_baseline_is_not_charged_twice():
    """gp3 extras apply only above 3000 IOPS and 125 MBps."""
    baseline = price("AWS::EC2::Volume", {"VolumeType": "gp3", "Size": 100, "Iops": 3000, "Throughput": 125})
    assert len(baseline.details) == 1
    assert baseline.monthly_cost == pytest.approx(100 * 0.08)

    boosted = price("AWS::EC2::Volume", {"VolumeType": "gp3", "Size": "100", "Iops": "4000", "Throughput": 250})
    assert len(boosted.details) == 3
    assert boosted.details[1].quantity == 1000
    assert boosted.details[2].quantity == 125
    assert boosted.monthly_cost == pytest.approx(8 + 1000 * 0.005 + 125 * 0.04)


def test_io1_volume_charges_all_provisioned_iops():
    """io1/io2 charge every provisioned IOPS."""
    cost = price("AWS::EC2::Volume", {"VolumeType": "io1", "Size": 50, "Iops": 1000})
    assert cost.details[1].component == "Provisioned IOPS"
    assert cost.details[1].quantity == 1000


def test_volume_size_placeholder_uses_default():
    """An unresolvable size falls back to the documented 100 GB."""
    cost = price("AWS::EC2::Volume", {"Size": {"Ref": "NoDefault"}})
    assert cost.details[0].quantity == 100


def test_rds_instance_single_az():
    """RDS charges the instance rate and its storage."""
    cost = price("AWS::RDS::DBInstance", {"DBInstanceClass": "db.t3.micro", "AllocatedStorage": "20"})
    assert cost.monthly_cost == pytest.approx(0.017 * HOURS + 20 * 0.115)


def test_rds_multi_az_doubles_compute_and_storage():
    """Multi-AZ doubles both components."""
    single = price("AWS::RDS::DBInstance", {"AllocatedStorage": 20})
    multi = price("AWS::RDS::DBInstance", {"AllocatedStorage": 20, "MultiAZ": "true"})
    assert multi.monthly_cost == pytest.approx(2 * single.monthly_cost)
    assert "(Multi-AZ)" in multi.details[0].component
    assert multi.details[1].quantity == 40


def test_rds_engine_pricing():
    """The engine selects the price list; unknown engines use MySQL prices."""
    postgres = price("AWS::RDS::DBInstance", {"Engine": "postgres", "AllocatedStorage": 0})
    unknown = price("AWS::RDS::DBInstance", {"Engine": "cobol-db", "AllocatedStorage": 0})
    assert postgres.monthly_cost == pytest.approx(0.018 * HOURS)
    assert unknown.monthly_cost == pytest.approx(0.017 * HOURS)


def test_provisioned_aurora_cluster_is_zero_with_explanation():
    """A provisioned cluster costs nothing itself but says why."""
    cost = price("AWS::RDS::DBCluster", {"Engine": "aurora-mysql"})
    assert cost.monthly_cost == 0
    assert cost.details[0].component == "Aurora Cluster (cost in DB instances)"


def test_serverless_aurora_cluster_uses_average_capacity():
    """Serverless clusters are priced at the midpoint of their ACU range."""
    cost = price(
        "AWS::RDS::DBCluster",
        {"EngineMode": "serverless", "ScalingConfiguration": {"MinCapacity": 2, "MaxCapacity": 6}},
    )
    assert cost.details[0].quantity == 4
    assert cost.monthly_cost == pytest.approx(4 * 0.06 * HOURS)


def test_replication_group_counts_replicas():
    """Each node group has a primary plus its replicas."""
    cost = price(
        "AWS::ElastiCache::ReplicationGroup",
        {"CacheNodeType": "cache.t3.micro", "NumNodeGroups": 2, "ReplicasPerNodeGroup": 2},
    )
    assert cost.details[0].quantity == 6


def test_ecs_service_on_ec2_is_free():
    """Tasks on EC2 are paid for by the instances."""
    cost = price("AWS::ECS::Service", {"LaunchType": "EC2", "DesiredCount": 3})
    assert cost.monthly_cost == 0
    assert cost.details[0].quantity == 3


def test_ecs_fargate_service():
    """Fargate tasks use the assumed 0.5 vCPU and 1 GB."""
    cost = price("AWS::ECS::Service", {"DesiredCount": 2})
    expected = 2 * (0.5 * 0.04048 + 1 * 0.004445) * HOURS
    assert cost.monthly_cost == pytest.approx(expected)
    assert cost.confidence == "low"


def test_eks_nodegroup():
    """Node groups multiply the instance rate by the desired size."""
    cost = price("AWS::EKS::Nodegroup", {"InstanceTypes": ["t3.large"], "ScalingConfig": {"DesiredSize": 3}})
    assert cost.monthly_cost == pytest.approx(3 * 0.0832 * HOURS)


@pytest.mark.parametrize("bundle, expected", [
    ("nano_2_0", 3.5),
    ("micro_2_0", 5.0),
    ("large_2_0", 40.0),
    ("xlarge_2_0", 80.0),
])
def test_lightsail_bundles(bundle, expected):
    """The most specific bundle size wins."""
    assert price("AWS::Lightsail::Instance", {"BundleId": bundle}).monthly_cost == pytest.approx(expected)


def test_fixed_monthly_resources_ignore_properties():
    """Flat-fee resources cost the same whatever their configuration."""
    plain = price("AWS::SecretsManager::Secret")
    configured = price("AWS::SecretsManager::Secret", {"Name": "db", "GenerateSecretString": {}})
    assert plain.monthly_cost == configured.monthly_cost == pytest.approx(0.40)


def test_wafv2_rules_line_only_when_rules_exist():
    """Rules are a separate line, present only when the ACL has rules."""
    bare = price("AWS::WAFv2::WebACL")
    with_rules = price("AWS::WAFv2::WebACL", {"Rules": [{"Name": "a"}, {"Name": "b"}]})
    assert len(bare.details) == 1
    assert with_rules.monthly_cost == pytest.approx(5.0 + 2 * 1.0)


def test_vpc_gateway_endpoint_is_free():
    """Gateway endpoints cost nothing, interface endpoints are charged per AZ."""
    gateway = price("AWS::EC2::VPCEndpoint", {"VpcEndpointType": "Gateway"})
    interface = price("AWS::EC2::VPCEndpoint", {"SubnetIds": ["a", "b"]})
    assert gateway.monthly_cost == 0
    assert interface.details[0].quantity == 2 * HOURS


def test_lambda_within_free_tier_pays_only_requests():
    """Default functions stay inside the compute free tier."""
    cost = price("AWS::Lambda::Function")
    assert cost.details[1].quantity == 0
    assert cost.monthly_cost == pytest.approx(100_000 * 0.20 / 1_000_000)
    assert cost.confidence == "low"


def test_lambda_large_function_pays_compute():
    """Billable GB-seconds are what is left after the free tier."""
    cost = price("AWS::Lambda::Function", {"MemorySize": 2048, "Timeout": 30})
    gb_seconds = 2 * 15 * 100_000
    assert cost.details[1].quantity == pytest.approx(gb_seconds - 400_000)


def test_dynamodb_provisioned_and_on_demand():
    """Provisioned tables pay for capacity, on-demand tables for requests."""
    provisioned = price("AWS::DynamoDB::Table", {"ProvisionedThroughput": {
        "ReadCapacityUnits": 5, "WriteCapacityUnits": 5}})
    on_demand = price("AWS::DynamoDB::Table", {"BillingMode": "PAY_PER_REQUEST"})

    assert provisioned.monthly_cost == pytest.approx(5 * 0.00013 * HOURS + 5 * 0.00065 * HOURS)
    assert provisioned.confidence == "medium"
    assert on_demand.monthly_cost == pytest.approx(1.25 + 1.25)
    assert on_demand.confidence == "low"


def test_sqs_fifo_queue():
    """FIFO queues use the FIFO request rate."""
    standard = price("AWS::SQS::Queue")
    fifo = price("AWS::SQS::Queue", {"QueueName": "orders.fifo"})
    assert standard.monthly_cost == pytest.approx(0.40)
    assert fifo.monthly_cost == pytest.approx(0.50)


def test_http_api_is_cheaper_than_rest_api():
    """HTTP APIs and REST APIs share an estimator but not a rate."""
    assert price("AWS::ApiGatewayV2::Api").monthly_cost == pytest.approx(1.00)
    assert price("AWS::ApiGateway::RestApi").monthly_cost == pytest.approx(3.50)

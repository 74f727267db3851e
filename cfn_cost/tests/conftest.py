"""
Shared pytest fixtures for cfn_cost tests.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import pytest
from fastapi.testclient import TestClient

from cfn_cost.resilience.circuit_breaker import reset_circuit_breakers


@pytest.fixture(autouse=True)
def fresh_circuit_breakers():
    """Every test starts with closed circuit breakers."""
    reset_circuit_breakers()
    yield
    reset_circuit_breakers()


@pytest.fixture
def client():
    """FastAPI test client."""
    from cfn_cost.main import app
    return TestClient(app)


@pytest.fixture
def empty_template():
    """Template with a Resources section and nothing in it."""
    return {"Resources": {}}


@pytest.fixture
def ec2_template():
    """Template with a single t3.micro instance."""
    return {
        "Resources": {
            "WebServer": {
                "Type": "AWS::EC2::Instance",
                "Properties": {"InstanceType": "t3.micro"},
            }
        }
    }


@pytest.fixture
def nat_template():
    """Template with one NAT gateway."""
    return {
        "Resources": {
            "NatGateway": {
                "Type": "AWS::EC2::NatGateway",
                "Properties": {"SubnetId": {"Ref": "PublicSubnet"}},
            }
        }
    }


@pytest.fixture
def mixed_template():
    """Template mixing priced, usage-based, free and unknown resources."""
    return {
        "AWSTemplateFormatVersion": "2010-09-09",
        "Parameters": {
            "InstanceType": {"Type": "String", "Default": "t3.large"},
        },
        "Resources": {
            "AppRole": {"Type": "AWS::IAM::Role", "Properties": {}},
            "AppSecurityGroup": {"Type": "AWS::EC2::SecurityGroup", "Properties": {}},
            "AppServer": {
                "Type": "AWS::EC2::Instance",
                "Properties": {"InstanceType": {"Ref": "InstanceType"}},
            },
            "DataVolume": {
                "Type": "AWS::EC2::Volume",
                "Properties": {"VolumeType": "gp3", "Size": "200"},
            },
            "Table": {
                "Type": "AWS::DynamoDB::Table",
                "Properties": {
                    "ProvisionedThroughput": {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5},
                },
            },
            "Mystery": {"Type": "AWS::Made::Up", "Properties": {}},
            "Provider": {"Type": "Custom::Thing", "Properties": {}},
            "Metadata": {"Type": "AWS::CDK::Metadata"},
        },
    }


@pytest.fixture
def dynamodb_template():
    """Factory for a template with one DynamoDB table in the given billing mode."""
    def build(billing_mode: str) -> dict:
        properties = {"BillingMode": billing_mode}
        if billing_mode == "PROVISIONED":
            properties["ProvisionedThroughput"] = {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5}
        return {"Resources": {"Table": {"Type": "AWS::DynamoDB::Table", "Properties": properties}}}
    return build

"""
Tests for loading templates from CloudFormation, cdk.out and local files.
"""

import json
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from cfn_cost.services.template_fetcher import TemplateFetcher, TemplateFetchError
from cfn_cost.services.template_parser import TemplateParseError


def client_error(code, operation="GetTemplate"):
    return ClientError({"Error": {"Code": code, "Message": f"{code} happened"}}, operation)


@pytest.fixture
def cfn_client():
    """Mock CloudFormation client."""
    return Mock()


@pytest.fixture
def fetcher(cfn_client):
    return TemplateFetcher(region="us-east-1", client=cfn_client)


@pytest.fixture
def cdk_out(tmp_path, ec2_template, nat_template):
    """cdk.out directory with a manifest naming two stacks."""
    (tmp_path / "WebStack.template.json").write_text(json.dumps(ec2_template), encoding="utf-8")
    (tmp_path / "NetworkStack.template.json").write_text(json.dumps(nat_template), encoding="utf-8")
    manifest = {
        "version": "36.0.0",
        "artifacts": {
            "Tree": {"type": "cdk:tree"},
            "WebStack": {"type": "aws:cloudformation:stack"},
            "NetworkStack": {"type": "aws:cloudformation:stack"},
            "WebStack.assets": {"type": "cdk:asset-manifest"},
        },
    }
    (tmp_path / "manifest.json").write_text(json.dumps(manifest), encoding="utf-8")
    return tmp_path


def test_fetch_deployed_template_dict_body(fetcher, cfn_client, ec2_template):
    """Bodies already decoded by boto3 are used as is."""
    cfn_client.get_template.return_value = {"TemplateBody": ec2_template}

    fetched = fetcher.fetch_deployed_template("WebStack")

    cfn_client.get_template.assert_called_once_with(StackName="WebStack", TemplateStage="Processed")
    assert fetched.template == ec2_template
    assert fetched.source == "deployed"
    assert fetched.stack_name == "WebStack"


def test_fetch_deployed_template_yaml_body(fetcher, cfn_client):
    """String bodies go through the parser."""
    cfn_client.get_template.return_value = {
        "TemplateBody": "Resources:\n  Queue:\n    Type: AWS::SQS::Queue\n"
    }
    fetched = fetcher.fetch_deployed_template("QueueStack")
    assert fetched.template["Resources"]["Queue"]["Type"] == "AWS::SQS::Queue"


def test_fetch_deployed_template_empty_body(fetcher, cfn_client):
    """An empty body is a fetch error."""
    cfn_client.get_template.return_value = {"TemplateBody": ""}
    with pytest.raises(TemplateFetchError, match="No template body returned for stack: Web"):
        fetcher.fetch_deployed_template("Web")


def test_fetch_deployed_template_client_error(fetcher, cfn_client):
    """Client errors are wrapped with the stack name."""
    cfn_client.get_template.side_effect = client_error("ValidationError")
    with pytest.raises(TemplateFetchError, match="Failed to fetch deployed template for Gone"):
        fetcher.fetch_deployed_template("Gone")


def test_missing_stacks_do_not_open_circuit(fetcher, cfn_client):
    """ValidationError means the service answered; the circuit stays closed."""
    cfn_client.get_template.side_effect = client_error("ValidationError")
    for _ in range(5):
        with pytest.raises(TemplateFetchError):
            fetcher.fetch_deployed_template("Gone")
    assert cfn_client.get_template.call_count == 5


def test_service_failures_open_circuit(fetcher, cfn_client):
    """Repeated service failures stop further calls to CloudFormation."""
    cfn_client.get_template.side_effect = client_error("Throttling")
    for _ in range(3):
        with pytest.raises(TemplateFetchError):
            fetcher.fetch_deployed_template("Web")

    with pytest.raises(TemplateFetchError, match="circuit open"):
        fetcher.fetch_deployed_template("Web")
    assert cfn_client.get_template.call_count == 3


def test_list_deployed_stacks_pages(fetcher, cfn_client):
    """All pages are read with the active-status filter."""
    paginator = cfn_client.get_paginator.return_value
    paginator.paginate.return_value = [
        {"StackSummaries": [{"StackName": "A", "StackId": "id-a", "StackStatus": "CREATE_COMPLETE"}]},
        {"StackSummaries": [{"StackName": "B", "StackStatus": "UPDATE_COMPLETE"}]},
    ]

    stacks = fetcher.list_deployed_stacks()

    cfn_client.get_paginator.assert_called_once_with("list_stacks")
    statuses = paginator.paginate.call_args.kwargs["StackStatusFilter"]
    assert "CREATE_COMPLETE" in statuses
    assert "ROLLBACK_COMPLETE" not in statuses
    assert [stack.stack_name for stack in stacks] == ["A", "B"]
    assert stacks[0].stack_id == "id-a"
    assert stacks[1].stack_id == ""


def test_list_deployed_stacks_failure(fetcher, cfn_client):
    """Listing failures are fetch errors."""
    cfn_client.get_paginator.side_effect = client_error("AccessDenied", "ListStacks")
    with pytest.raises(TemplateFetchError, match="Failed to list stacks in us-east-1"):
        fetcher.list_deployed_stacks()


@pytest.mark.parametrize("status, expected", [
    ("CREATE_COMPLETE", True),
    ("UPDATE_ROLLBACK_COMPLETE", True),
    ("ROLLBACK_COMPLETE", False),
    ("DELETE_IN_PROGRESS", False),
])
def test_stack_exists_by_status(fetcher, cfn_client, status, expected):
    """Only active stacks count as existing."""
    cfn_client.describe_stacks.return_value = {"Stacks": [{"StackName": "Web", "StackStatus": status}]}
    assert fetcher.stack_exists("Web") is expected


def test_stack_exists_on_error(fetcher, cfn_client):
    """Any error means the stack does not exist."""
    cfn_client.describe_stacks.side_effect = client_error("ValidationError", "DescribeStacks")
    assert fetcher.stack_exists("Web") is False


def test_discover_cdk_stacks_uses_manifest(cdk_out):
    """Stack artifacts in the manifest are authoritative."""
    assert TemplateFetcher.discover_cdk_stacks(cdk_out) == ["WebStack", "NetworkStack"]


def test_discover_cdk_stacks_falls_back_to_glob(cdk_out):
    """Without a manifest, template files name the stacks."""
    (cdk_out / "manifest.json").unlink()
    assert TemplateFetcher.discover_cdk_stacks(cdk_out) == ["NetworkStack", "WebStack"]


def test_discover_cdk_stacks_bad_manifest(cdk_out):
    """An unreadable manifest is ignored."""
    (cdk_out / "manifest.json").write_text("{not json", encoding="utf-8")
    assert TemplateFetcher.discover_cdk_stacks(cdk_out) == ["NetworkStack", "WebStack"]


def test_discover_cdk_stacks_missing_directory(tmp_path):
    """A missing cdk.out directory is a fetch error."""
    with pytest.raises(TemplateFetchError, match="CDK output directory not found"):
        TemplateFetcher.discover_cdk_stacks(tmp_path / "cdk.out")


def test_fetch_synthesized_template(cdk_out):
    """Synthesized templates are read from <stack>.template.json."""
    fetched = TemplateFetcher.fetch_synthesized_template(cdk_out, "WebStack")
    assert fetched.source == "synthesized"
    assert fetched.template_path.endswith("WebStack.template.json")
    assert "WebServer" in fetched.template["Resources"]


def test_fetch_synthesized_template_missing(cdk_out):
    """A stack without a template file is a fetch error."""
    with pytest.raises(TemplateFetchError, match="Synthesized template not found"):
        TemplateFetcher.fetch_synthesized_template(cdk_out, "Nope")


def test_fetch_local_template_infers_stack_name(tmp_path, ec2_template):
    """Stack names come from the file name."""
    cdk_file = tmp_path / "Api.template.json"
    cdk_file.write_text(json.dumps(ec2_template), encoding="utf-8")
    yaml_file = tmp_path / "queue.yaml"
    yaml_file.write_text("Resources:\n  Q:\n    Type: AWS::SQS::Queue\n", encoding="utf-8")

    assert TemplateFetcher.fetch_local_template(cdk_file).stack_name == "Api"
    assert TemplateFetcher.fetch_local_template(yaml_file).stack_name == "queue"
    assert TemplateFetcher.fetch_local_template(yaml_file, "Named").stack_name == "Named"
    assert TemplateFetcher.fetch_local_template(yaml_file).source == "local"


def test_fetch_local_template_missing(tmp_path):
    """A missing local file is a fetch error."""
    with pytest.raises(TemplateFetchError, match="Template file not found"):
        TemplateFetcher.fetch_local_template(tmp_path / "missing.json")


def test_fetch_local_template_invalid(tmp_path):
    """An invalid local file is a parse error."""
    path = tmp_path / "bad.json"
    path.write_text('{"Outputs": {}}', encoding="utf-8")
    with pytest.raises(TemplateParseError):
        TemplateFetcher.fetch_local_template(path)


def test_fetch_all_synthesized_templates_skips_failures(cdk_out):
    """Stacks whose template is missing are skipped."""
    (cdk_out / "NetworkStack.template.json").unlink()
    templates = TemplateFetcher.fetch_all_synthesized_templates(cdk_out)
    assert [template.stack_name for template in templates] == ["WebStack"]


def test_fetch_for_comparison_new_stack(fetcher, cfn_client, cdk_out):
    """Stacks that are not deployed have no deployed template."""
    cfn_client.describe_stacks.side_effect = client_error("ValidationError", "DescribeStacks")

    templates = fetcher.fetch_for_comparison(cdk_out, "WebStack")

    assert templates.synthesized.stack_name == "WebStack"
    assert templates.deployed is None
    cfn_client.get_template.assert_not_called()


def test_fetch_for_comparison_deployed_stack(fetcher, cfn_client, cdk_out, nat_template):
    """Deployed stacks come back with their live template."""
    cfn_client.describe_stacks.return_value = {"Stacks": [{"StackStatus": "UPDATE_COMPLETE"}]}
    cfn_client.get_template.return_value = {"TemplateBody": nat_template}

    templates = fetcher.fetch_for_comparison(cdk_out, "WebStack")

    assert templates.deployed.template == nat_template
    assert templates.deployed.source == "deployed"


def test_fetch_for_comparison_deployed_fetch_failure(fetcher, cfn_client, cdk_out):
    """A deployed template that cannot be fetched is treated as absent."""
    cfn_client.describe_stacks.return_value = {"Stacks": [{"StackStatus": "CREATE_COMPLETE"}]}
    cfn_client.get_template.return_value = {"TemplateBody": None}

    assert fetcher.fetch_for_comparison(cdk_out, "WebStack").deployed is None


def test_fetch_all_for_comparison(fetcher, cfn_client, cdk_out):
    """Every synthesized stack is loaded for comparison."""
    cfn_client.describe_stacks.side_effect = client_error("ValidationError", "DescribeStacks")
    results = fetcher.fetch_all_for_comparison(cdk_out)
    assert [result.stack_name for result in results] == ["WebStack", "NetworkStack"]

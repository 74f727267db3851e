"""
Tests for intrinsic function resolution.
"""

from cfn_cost.services.intrinsics import (
    UnresolvedAttribute,
    UnresolvedRef,
    get_property_value,
    is_unresolved,
    resolve,
)


TEMPLATE = {
    "Parameters": {
        "InstanceType": {"Type": "String", "Default": "m5.large"},
        "VpcId": {"Type": "AWS::EC2::VPC::Id"},
    },
    "Resources": {},
}


def test_scalars_pass_through():
    """Plain values come back unchanged."""
    for value in ("text", 5, 2.5, True, None):
        assert resolve(TEMPLATE, value) == value


def test_ref_uses_parameter_default():
    """Ref to a parameter with a default resolves to the default."""
    assert resolve(TEMPLATE, {"Ref": "InstanceType"}) == "m5.large"


def test_ref_override_beats_default():
    """Explicit parameter overrides take precedence over defaults."""
    assert resolve(TEMPLATE, {"Ref": "InstanceType"}, {"InstanceType": "c5.xlarge"}) == "c5.xlarge"


def test_ref_without_default_is_placeholder():
    """Ref to a parameter without a default becomes a placeholder, not an error."""
    value = resolve(TEMPLATE, {"Ref": "VpcId"})
    assert value == "{{Ref:VpcId}}"
    assert isinstance(value, UnresolvedRef)
    assert value.name == "VpcId"
    assert is_unresolved(value)


def test_get_att_is_placeholder():
    """GetAtt is never computed; both list and dotted forms give a placeholder."""
    listed = resolve(TEMPLATE, {"Fn::GetAtt": ["Database", "Endpoint.Address"]})
    dotted = resolve(TEMPLATE, {"Fn::GetAtt": "Database.Endpoint.Address"})
    assert listed == dotted == "{{GetAtt:Database.Endpoint.Address}}"
    assert isinstance(listed, UnresolvedAttribute)


def test_sub_returned_verbatim():
    """Fn::Sub strings are not substituted."""
    assert resolve(TEMPLATE, {"Fn::Sub": "${AWS::StackName}-bucket"}) == "${AWS::StackName}-bucket"
    assert resolve(TEMPLATE, {"Fn::Sub": ["${Name}-x", {"Name": "a"}]}) == "${Name}-x"


def test_if_takes_true_branch():
    """Conditions are not evaluated; the true branch wins."""
    value = {"Fn::If": ["IsProd", {"Ref": "InstanceType"}, "t3.micro"]}
    assert resolve(TEMPLATE, value) == "m5.large"


def test_select_in_range():
    """Fn::Select picks the element, accepting a numeric string index."""
    assert resolve(TEMPLATE, {"Fn::Select": [1, ["a", "b", "c"]]}) == "b"
    assert resolve(TEMPLATE, {"Fn::Select": ["2", ["a", "b", "c"]]}) == "c"


def test_select_out_of_range_is_none():
    """An unresolvable Fn::Select resolves to None."""
    assert resolve(TEMPLATE, {"Fn::Select": [5, ["a"]]}) is None
    assert resolve(TEMPLATE, {"Fn::Select": [0, {"Fn::GetAZs": ""}]}) is None


def test_records_and_lists_recurse():
    """Nested intrinsics inside mappings and lists are resolved."""
    value = {"Type": {"Ref": "InstanceType"}, "Tags": [{"Value": {"Ref": "VpcId"}}]}
    assert resolve(TEMPLATE, value) == {"Type": "m5.large", "Tags": [{"Value": "{{Ref:VpcId}}"}]}


def test_get_property_value_walks_dotted_path():
    """Dotted paths reach nested properties and resolve them."""
    resource = {
        "Type": "AWS::EKS::Nodegroup",
        "Properties": {"ScalingConfig": {"DesiredSize": {"Ref": "Size"}}},
    }
    assert get_property_value(TEMPLATE, resource, "ScalingConfig.DesiredSize", 1, {"Size": 4}) == 4


def test_get_property_value_defaults():
    """Missing segments, nulls, non-mappings and failed selects all give the default."""
    resource = {
        "Type": "AWS::EC2::Instance",
        "Properties": {
            "InstanceType": None,
            "Flat": "value",
            "Zone": {"Fn::Select": [3, ["a"]]},
        },
    }
    assert get_property_value(TEMPLATE, resource, "Missing", "d") == "d"
    assert get_property_value(TEMPLATE, resource, "InstanceType", "d") == "d"
    assert get_property_value(TEMPLATE, resource, "Flat.Deeper", "d") == "d"
    assert get_property_value(TEMPLATE, resource, "Zone", "d") == "d"
    assert get_property_value(TEMPLATE, {"Type": "AWS::S3::Bucket"}, "BucketName", "d") == "d"

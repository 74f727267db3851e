"""
CloudFormation template parser.
Parses JSON or YAML template bodies into plain dictionaries and compares
templates structurally.
"""
from pathlib import Path
from typing import Dict, Any, List, Union
import json
import logging

import yaml

from cfn_cost.domain.template_models import TemplateDiff


logger = logging.getLogger(__name__)


class TemplateParseError(Exception):
    """Raised when a template cannot be parsed or has no Resources section."""
    pass


class CloudFormationLoader(yaml.SafeLoader):
    """SafeLoader that understands CloudFormation short-form tags (!Ref, !GetAtt, ...)."""
    pass


def _construct_short_form(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> Dict[str, Any]:
    if isinstance(node, yaml.ScalarNode):
        value: Any = loader.construct_scalar(node)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)

    if tag_suffix == "Ref":
        return {"Ref": value}
    if tag_suffix == "Condition":
        return {"Condition": value}
    if tag_suffix == "GetAtt" and isinstance(value, str):
        value = value.split(".", 1)
    return {f"Fn::{tag_suffix}": value}


CloudFormationLoader.add_multi_constructor("!", _construct_short_form)


def _validate(template: Any, source_name: str) -> Dict[str, Any]:
    if not isinstance(template, dict):
        raise TemplateParseError(f"Invalid template structure in {source_name}")
    if not isinstance(template.get("Resources"), dict):
        raise TemplateParseError(f"Template {source_name} has no Resources section")
    return template


def parse_content(content: str, source_name: str = "template") -> Dict[str, Any]:
    """
    Parse a template body, trying JSON first and then YAML.

    Args:
        content: Raw template text
        source_name: Name used in error messages

    Returns:
        Template dictionary

    Raises:
        TemplateParseError: If the content is not valid JSON or YAML, is not
            a mapping, or has no Resources mapping
    """
    try:
        template = json.loads(content)
    except ValueError:
        try:
            template = yaml.load(content, Loader=CloudFormationLoader)
        except yaml.YAMLError as error:
            raise TemplateParseError(
                f"Failed to parse {source_name} as JSON or YAML: {error}"
            ) from error

    return _validate(template, source_name)


def parse_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Parse a template file.

    Args:
        path: Path to a .json/.yaml/.yml/.template file

    Returns:
        Template dictionary

    Raises:
        TemplateParseError: If the file is missing, unreadable or invalid
    """
    file_path = Path(path).resolve()
    if not file_path.is_file():
        raise TemplateParseError(f"Template file not found: {file_path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as error:
        raise TemplateParseError(f"Failed to read template file {file_path}: {error}") from error

    return parse_content(content, str(file_path))


def extract_resources(template: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """
    Get the resources of a template.

    Entries that are not mappings with a Type are dropped.

    Args:
        template: Template dictionary

    Returns:
        Logical id -> resource record, in template order
    """
    resources = template.get("Resources") or {}
    if not isinstance(resources, dict):
        return {}
    return {
        logical_id: resource
        for logical_id, resource in resources.items()
        if isinstance(resource, dict) and isinstance(resource.get("Type"), str)
    }


def get_resources_by_type(template: Dict[str, Any], resource_type: str) -> Dict[str, Dict[str, Any]]:
    return {
        logical_id: resource
        for logical_id, resource in extract_resources(template).items()
        if resource["Type"] == resource_type
    }


def get_resource_types(template: Dict[str, Any]) -> List[str]:
    """Distinct resource types in the template, sorted."""
    return sorted({resource["Type"] for resource in extract_resources(template).values()})


def _serialize_properties(resource: Dict[str, Any]) -> str:
    return json.dumps(resource.get("Properties") or {}, default=str)


def compare_templates(before: Dict[str, Any], after: Dict[str, Any]) -> TemplateDiff:
    """
    Structural diff of two templates, matched by logical id.

    A resource present in both is modified when its Type changed or its
    serialized Properties differ. This is a shape comparison, not a cost one.

    Args:
        before: Earlier template
        after: Later template

    Returns:
        TemplateDiff
    """
    before_resources = extract_resources(before)
    after_resources = extract_resources(after)
    diff = TemplateDiff()

    for logical_id, after_resource in after_resources.items():
        before_resource = before_resources.get(logical_id)
        if before_resource is None:
            diff.added[logical_id] = after_resource
        elif (
            before_resource["Type"] != after_resource["Type"]
            or _serialize_properties(before_resource) != _serialize_properties(after_resource)
        ):
            diff.modified[logical_id] = {"before": before_resource, "after": after_resource}
        else:
            diff.unchanged[logical_id] = after_resource

    for logical_id, before_resource in before_resources.items():
        if logical_id not in after_resources:
            diff.removed[logical_id] = before_resource

    logger.debug(
        "Template diff: %d added, %d removed, %d modified, %d unchanged",
        len(diff.added), len(diff.removed), len(diff.modified), len(diff.unchanged),
    )
    return diff

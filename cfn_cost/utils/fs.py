"""
Filesystem utilities for locating synthesized CDK templates in a cdk.out directory.
"""
import json
import logging
from pathlib import Path
from typing import List, Union


logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".template.json"
MANIFEST_FILE = "manifest.json"
STACK_ARTIFACT_TYPE = "aws:cloudformation:stack"


def template_path_for(cdk_out_dir: Union[str, Path], stack_name: str) -> Path:
    """Path where the CDK writes the synthesized template of a stack."""
    return Path(cdk_out_dir).resolve() / f"{stack_name}{TEMPLATE_SUFFIX}"


def read_manifest_stacks(cdk_out_dir: Path) -> List[str]:
    """
    Read stack names from the cloud assembly manifest.

    Args:
        cdk_out_dir: cdk.out directory

    Returns:
        Names of artifacts of type aws:cloudformation:stack, in manifest order;
        empty if the manifest is missing or unreadable
    """
    manifest_path = cdk_out_dir / MANIFEST_FILE
    if not manifest_path.is_file():
        return []

    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (ValueError, UnicodeDecodeError, OSError) as error:
        logger.debug("Ignoring unreadable manifest %s: %s", manifest_path, error)
        return []

    artifacts = manifest.get("artifacts") if isinstance(manifest, dict) else None
    if not isinstance(artifacts, dict):
        return []

    return [
        name for name, artifact in artifacts.items()
        if isinstance(artifact, dict) and artifact.get("type") == STACK_ARTIFACT_TYPE
    ]


def find_stack_templates(cdk_out_dir: Path) -> List[str]:
    """
    Stack names inferred from *.template.json files (non-recursive).

    Returns:
        Sorted stack names
    """
    return sorted(
        path.name[:-len(TEMPLATE_SUFFIX)]
        for path in cdk_out_dir.glob(f"*{TEMPLATE_SUFFIX}")
        if path.is_file()
    )


def discover_cdk_stacks(cdk_out_dir: Union[str, Path]) -> List[str]:
    """
    Find the stacks synthesized into a cdk.out directory.

    The manifest is authoritative; template files are globbed only when it
    names no stacks.

    Args:
        cdk_out_dir: cdk.out directory

    Returns:
        Stack names

    Raises:
        FileNotFoundError: If the directory does not exist
    """
    directory = Path(cdk_out_dir).resolve()
    if not directory.is_dir():
        raise FileNotFoundError(f"CDK output directory not found: {directory}")

    stacks = read_manifest_stacks(directory)
    if stacks:
        return stacks
    return find_stack_templates(directory)

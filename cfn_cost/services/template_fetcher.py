"""
Template fetcher.
Loads CloudFormation templates from deployed stacks (via boto3), from a CDK
cdk.out directory, or from a local file.
"""
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
import logging

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from cfn_cost.core.config import config
from cfn_cost.domain.template_models import ComparisonTemplates, FetchedTemplate, StackInfo
from cfn_cost.resilience.circuit_breaker import CircuitBreakerError, get_circuit_breaker
from cfn_cost.services.template_parser import TemplateParseError, parse_content, parse_file
from cfn_cost.utils import fs


logger = logging.getLogger(__name__)

ACTIVE_STACK_STATUSES = [
    "CREATE_COMPLETE",
    "UPDATE_COMPLETE",
    "UPDATE_ROLLBACK_COMPLETE",
    "IMPORT_COMPLETE",
    "IMPORT_ROLLBACK_COMPLETE",
]


class TemplateFetchError(Exception):
    """Raised when a template cannot be fetched."""
    pass


def _is_service_failure(error: Exception) -> bool:
    """A ValidationError (e.g. unknown stack) means CloudFormation itself is healthy."""
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code") != "ValidationError"
    return True


class TemplateFetcher:
    """Client for fetching CloudFormation templates."""

    def __init__(self, region: Optional[str] = None, profile: Optional[str] = None, client: Any = None):
        """
        Initialize the fetcher.

        The boto3 client is created on first use, so local and synthesized
        templates can be loaded without AWS credentials.

        Args:
            region: AWS region of the deployed stacks (defaults to config.DEFAULT_REGION)
            profile: Optional AWS credential profile (defaults to config.AWS_PROFILE)
            client: Pre-built CloudFormation client (tests inject a mock here)
        """
        self.region = region or config.DEFAULT_REGION
        self.profile = profile or config.AWS_PROFILE
        self._client = client
        self.circuit_breaker = get_circuit_breaker(f"cloudformation:{self.region}")

    @property
    def client(self) -> Any:
        if self._client is None:
            boto_config = BotoConfig(
                connect_timeout=config.CLOUDFORMATION_TIMEOUT,
                read_timeout=config.CLOUDFORMATION_TIMEOUT,
                retries={"max_attempts": 0},  # No retries, circuit breaker handles failures
            )
            session = boto3.Session(profile_name=self.profile, region_name=self.region)
            self._client = session.client("cloudformation", config=boto_config)
        return self._client

    def fetch_deployed_template(self, stack_name: str) -> FetchedTemplate:
        """
        Fetch the processed template (macros and transforms applied) of a deployed stack.

        Args:
            stack_name: CloudFormation stack name

        Returns:
            FetchedTemplate with source "deployed"

        Raises:
            TemplateFetchError: If the stack is missing, the call fails, the
                circuit is open, or the body is empty or invalid
        """
        prefix = f"Failed to fetch deployed template for {stack_name}"
        try:
            response = self.circuit_breaker.call(
                self.client.get_template,
                StackName=stack_name,
                TemplateStage="Processed",
                is_failure=_is_service_failure,
            )
        except (ClientError, BotoCoreError, CircuitBreakerError) as error:
            raise TemplateFetchError(f"{prefix}: {error}") from error

        body = response.get("TemplateBody")
        if not body:
            raise TemplateFetchError(f"{prefix}: No template body returned for stack: {stack_name}")

        # boto3 decodes JSON bodies itself; YAML bodies arrive as text
        if isinstance(body, dict):
            template: Dict[str, Any] = body
        else:
            try:
                template = parse_content(body, f"deployed stack {stack_name}")
            except TemplateParseError as error:
                raise TemplateFetchError(f"{prefix}: {error}") from error

        return FetchedTemplate(stack_name=stack_name, template=template, source="deployed")

    def list_deployed_stacks(self) -> List[StackInfo]:
        """
        List stacks in an active (deployed, not failed) state.

        Returns:
            StackInfo for every active stack in the region

        Raises:
            TemplateFetchError: If listing fails or the circuit is open
        """
        def list_pages() -> List[Dict[str, Any]]:
            paginator = self.client.get_paginator("list_stacks")
            summaries: List[Dict[str, Any]] = []
            for page in paginator.paginate(StackStatusFilter=ACTIVE_STACK_STATUSES):
                summaries.extend(page.get("StackSummaries", []))
            return summaries

        try:
            summaries = self.circuit_breaker.call(list_pages)
        except (ClientError, BotoCoreError, CircuitBreakerError) as error:
            raise TemplateFetchError(f"Failed to list stacks in {self.region}: {error}") from error

        return [
            StackInfo(
                stack_name=summary["StackName"],
                stack_id=summary.get("StackId", ""),
                status=summary.get("StackStatus", ""),
                created_time=summary.get("CreationTime"),
                last_updated_time=summary.get("LastUpdatedTime"),
            )
            for summary in summaries
        ]

    def stack_exists(self, stack_name: str) -> bool:
        """True only for a stack in an active state; any error means it does not exist."""
        try:
            response = self.circuit_breaker.call(
                self.client.describe_stacks,
                StackName=stack_name,
                is_failure=_is_service_failure,
            )
        except (ClientError, BotoCoreError, CircuitBreakerError) as error:
            logger.debug("Treating stack %s as not deployed: %s", stack_name, error)
            return False

        stacks = response.get("Stacks") or []
        return bool(stacks) and stacks[0].get("StackStatus") in ACTIVE_STACK_STATUSES

    @staticmethod
    def fetch_synthesized_template(cdk_out_dir: Union[str, Path], stack_name: str) -> FetchedTemplate:
        """
        Load <stack_name>.template.json from a cdk.out directory.

        Raises:
            TemplateFetchError: If the template file does not exist
            TemplateParseError: If the file is not a valid template
        """
        template_path = fs.template_path_for(cdk_out_dir, stack_name)
        if not template_path.is_file():
            raise TemplateFetchError(f"Synthesized template not found: {template_path}")

        return FetchedTemplate(
            stack_name=stack_name,
            template=parse_file(template_path),
            source="synthesized",
            template_path=str(template_path),
        )

    @staticmethod
    def fetch_local_template(path: Union[str, Path], stack_name: Optional[str] = None) -> FetchedTemplate:
        """
        Load a template file from disk.

        Args:
            path: JSON or YAML template file
            stack_name: Stack name; inferred from the file name when omitted

        Raises:
            TemplateFetchError: If the file does not exist
            TemplateParseError: If the file is not a valid template
        """
        template_path = Path(path).resolve()
        if not template_path.is_file():
            raise TemplateFetchError(f"Template file not found: {template_path}")

        if stack_name is None:
            name = template_path.name
            stack_name = name[:-len(fs.TEMPLATE_SUFFIX)] if name.endswith(fs.TEMPLATE_SUFFIX) else template_path.stem

        return FetchedTemplate(
            stack_name=stack_name,
            template=parse_file(template_path),
            source="local",
            template_path=str(template_path),
        )

    @staticmethod
    def discover_cdk_stacks(cdk_out_dir: Union[str, Path]) -> List[str]:
        """
        Stack names synthesized into a cdk.out directory.

        Raises:
            TemplateFetchError: If the directory does not exist
        """
        try:
            return fs.discover_cdk_stacks(cdk_out_dir)
        except FileNotFoundError as error:
            raise TemplateFetchError(str(error)) from error

    @classmethod
    def fetch_all_synthesized_templates(cls, cdk_out_dir: Union[str, Path]) -> List[FetchedTemplate]:
        """Load every synthesized stack template, skipping (with a warning) any that fail."""
        templates = []
        for stack_name in cls.discover_cdk_stacks(cdk_out_dir):
            try:
                templates.append(cls.fetch_synthesized_template(cdk_out_dir, stack_name))
            except (TemplateFetchError, TemplateParseError) as error:
                logger.warning("Could not fetch template for stack %s: %s", stack_name, error)
        return templates

    def fetch_for_comparison(self, cdk_out_dir: Union[str, Path], stack_name: str) -> ComparisonTemplates:
        """
        Load the synthesized template of a stack and, if it is deployed, the live one.

        A deployed template that cannot be fetched is logged and left as None,
        so the stack is compared as new.

        Raises:
            TemplateFetchError: If the synthesized template is missing
            TemplateParseError: If the synthesized template is invalid
        """
        synthesized = self.fetch_synthesized_template(cdk_out_dir, stack_name)

        deployed = None
        if self.stack_exists(stack_name):
            try:
                deployed = self.fetch_deployed_template(stack_name)
            except TemplateFetchError as error:
                logger.warning("Could not fetch deployed template for %s: %s", stack_name, error)

        return ComparisonTemplates(stack_name=stack_name, synthesized=synthesized, deployed=deployed)

    def fetch_all_for_comparison(self, cdk_out_dir: Union[str, Path]) -> List[ComparisonTemplates]:
        """fetch_for_comparison for every synthesized stack, skipping stacks that fail."""
        results = []
        for stack_name in self.discover_cdk_stacks(cdk_out_dir):
            try:
                results.append(self.fetch_for_comparison(cdk_out_dir, stack_name))
            except (TemplateFetchError, TemplateParseError) as error:
                logger.warning("Could not process stack %s: %s", stack_name, error)
        return results

"""
Domain models for templates moving in and out of the estimator.
"""
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime

from cfn_cost.domain.cost_models import TemplateSource


@dataclass
class FetchedTemplate:
    """A parsed template together with where it came from."""
    stack_name: str
    template: Dict[str, Any]
    source: TemplateSource
    template_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "stackName": self.stack_name,
            "source": self.source,
            "template": self.template,
        }
        if self.template_path is not None:
            result["templatePath"] = self.template_path
        return result


@dataclass
class StackInfo:
    """Summary of a deployed CloudFormation stack."""
    stack_name: str
    stack_id: str
    status: str
    created_time: Optional[datetime] = None
    last_updated_time: Optional[datetime] = None


@dataclass
class TemplateDiff:
    """
    Structural (not cost) difference between two templates.

    Resources are matched by logical id. A resource is modified when its
    type changed or its serialized Properties differ.
    """
    added: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    removed: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    modified: Dict[str, Dict[str, Dict[str, Any]]] = field(default_factory=dict)  # id -> {"before", "after"}
    unchanged: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def has_changes(self) -> bool:
        return bool(self.added or self.removed or self.modified)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "added": sorted(self.added),
            "removed": sorted(self.removed),
            "modified": sorted(self.modified),
            "unchanged": sorted(self.unchanged),
        }


@dataclass
class ComparisonTemplates:
    """Synthesized template of a stack and, when deployed, its live counterpart."""
    stack_name: str
    synthesized: FetchedTemplate
    deployed: Optional[FetchedTemplate] = None

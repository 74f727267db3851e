"""
Best-effort resolution of CloudFormation intrinsic functions.

Only the subset needed to read resource configuration is evaluated:
Ref (parameter defaults), Fn::GetAtt (placeholder), Fn::Sub (verbatim),
Fn::If (true branch) and Fn::Select. Nothing here ever raises for an
unresolvable expression; the caller's default applies instead.
"""
from typing import Dict, Any, Optional
import logging


logger = logging.getLogger(__name__)

_MISSING = object()


class UnresolvedRef(str):
    """Placeholder for a Ref that has no override and no parameter default."""

    def __new__(cls, name: str):
        instance = super().__new__(cls, f"{{{{Ref:{name}}}}}")
        instance.name = name
        return instance


class UnresolvedAttribute(str):
    """Placeholder for Fn::GetAtt; attribute values only exist after deployment."""

    def __new__(cls, target: str, attribute: str):
        instance = super().__new__(cls, f"{{{{GetAtt:{target}.{attribute}}}}}")
        instance.target = target
        instance.attribute = attribute
        return instance


def is_unresolved(value: Any) -> bool:
    return isinstance(value, (UnresolvedRef, UnresolvedAttribute))


def _resolve_ref(template: Dict[str, Any], name: Any, parameters: Dict[str, Any]) -> Any:
    if not isinstance(name, str):
        return UnresolvedRef(str(name))
    if name in parameters:
        return parameters[name]
    parameter = (template.get("Parameters") or {}).get(name)
    if isinstance(parameter, dict) and "Default" in parameter:
        return parameter["Default"]
    return UnresolvedRef(name)


def _resolve_get_att(args: Any) -> Any:
    if isinstance(args, list) and len(args) == 2:
        return UnresolvedAttribute(str(args[0]), str(args[1]))
    if isinstance(args, str) and "." in args:
        target, attribute = args.split(".", 1)
        return UnresolvedAttribute(target, attribute)
    return None


def _resolve_select(template: Dict[str, Any], args: Any, parameters: Dict[str, Any]) -> Any:
    if not isinstance(args, list) or len(args) != 2:
        return None
    index, items = args
    if isinstance(index, str) and index.isdigit():
        index = int(index)
    if isinstance(index, bool) or not isinstance(index, int):
        return None
    items = resolve(template, items, parameters)
    if not isinstance(items, list) or not 0 <= index < len(items):
        return None
    return resolve(template, items[index], parameters)


def resolve(
    template: Dict[str, Any],
    value: Any,
    parameters: Optional[Dict[str, Any]] = None,
) -> Any:
    """
    Resolve intrinsic functions inside a property value.

    Args:
        template: Template the value belongs to (for Parameters)
        value: Scalar, list or mapping, possibly holding intrinsic records
        parameters: Optional parameter overrides, taking precedence over defaults

    Returns:
        Resolved value. Unresolvable Ref/GetAtt become placeholder strings;
        an unresolvable Fn::Select becomes None.
    """
    parameters = parameters or {}

    if value is None or isinstance(value, (str, int, float, bool)):
        return value

    if isinstance(value, list):
        return [resolve(template, item, parameters) for item in value]

    if not isinstance(value, dict):
        return value

    if "Ref" in value:
        return _resolve_ref(template, value["Ref"], parameters)

    if "Fn::GetAtt" in value:
        return _resolve_get_att(value["Fn::GetAtt"])

    if "Fn::Sub" in value:
        sub = value["Fn::Sub"]
        if isinstance(sub, list) and sub:
            return sub[0]
        return sub

    if "Fn::If" in value:
        args = value["Fn::If"]
        if isinstance(args, list) and len(args) >= 2:
            # Conditions are not evaluated; the true branch is assumed
            return resolve(template, args[1], parameters)
        return None

    if "Fn::Select" in value:
        return _resolve_select(template, value["Fn::Select"], parameters)

    return {key: resolve(template, item, parameters) for key, item in value.items()}


def get_property_value(
    template: Dict[str, Any],
    resource: Dict[str, Any],
    path: str,
    default: Any = None,
    parameters: Optional[Dict[str, Any]] = None,
) -> Any:
    """
    Read a resolved property from a resource by dotted path.

    Args:
        template: Template containing the resource
        resource: Resource record ({"Type": ..., "Properties": {...}})
        path: Dot-separated path inside Properties (e.g. 'ScalingConfig.DesiredSize')
        default: Returned when any segment is missing, null or not a mapping
        parameters: Optional parameter overrides

    Returns:
        Resolved property value or default
    """
    current: Any = resource.get("Properties")
    for segment in path.split("."):
        if not isinstance(current, dict):
            return default
        current = current.get(segment, _MISSING)
        if current is _MISSING or current is None:
            return default

    resolved = resolve(template, current, parameters)
    if resolved is None:
        return default
    return resolved

"""
Namespace resolution for one install, uninstall or status call.
"""

from typing import Any, Dict, Optional

from kubeop.core import catalog


def resolve_namespace(requested: str, declared: str, node: str) -> str:
    """
    Get the namespace the service will eventually be deployed to.

    requested: the namespace from the pattern or policy (may be empty)
    declared:  the namespace embedded in the operator itself (may be empty)
    node:      the agent's own namespace

    The result is requested if not empty, else declared if not empty, else node.
    """
    return requested or declared or node


def declared_namespace(groups, metadata: Optional[Dict[str, Any]]) -> str:
    """
    The namespace the operator asks for: its own Namespace object first,
    then the "namespace" entry of the deployment metadata.
    """
    for ns_obj in groups.get(catalog.NAMESPACE_KIND):
        if ns_obj.name:
            return ns_obj.name

    value = (metadata or {}).get("namespace")
    if isinstance(value, str) and value:
        return value
    return ""

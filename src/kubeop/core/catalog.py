#!/usr/bin/env python3
"""
KUBEOP KIND CATALOG
-------------------
The registry of Kubernetes kinds the decoder understands, keyed by API
version. A manifest whose (apiVersion, kind) pair is listed here decodes
"successfully"; anything else is treated as a custom resource.

The catalog also fixes the two special kind sets:
  * BASE kinds have a typed adapter and a fixed install order.
  * DANGER kinds are recognized but cannot be handled generically and
    are skipped.

Author: KubeOp Team
Date: 2026-10-18
"""

from typing import Dict, FrozenSet, List, Tuple

NAMESPACE_KIND = "Namespace"
ROLE_KIND = "Role"
ROLEBINDING_KIND = "RoleBinding"
DEPLOYMENT_KIND = "Deployment"
SERVICEACCOUNT_KIND = "ServiceAccount"
CRD_KIND = "CustomResourceDefinition"
UNSTRUCTURED_KIND = "Unstructured"
OLM_OPERATOR_GROUP_KIND = "OperatorGroup"

# Install order. Uninstall walks it backwards.
BASE_KINDS: Tuple[str, ...] = (
    NAMESPACE_KIND,
    ROLE_KIND,
    ROLEBINDING_KIND,
    DEPLOYMENT_KIND,
    SERVICEACCOUNT_KIND,
    CRD_KIND,
)

DANGER_KINDS: Tuple[str, ...] = (OLM_OPERATOR_GROUP_KIND,)

KNOWN_KINDS: Dict[str, FrozenSet[str]] = {
    "v1": frozenset([
        "Binding", "ConfigMap", "Endpoints", "Event", "LimitRange", "Namespace",
        "Node", "PersistentVolume", "PersistentVolumeClaim", "Pod", "PodTemplate",
        "ReplicationController", "ResourceQuota", "Secret", "Service",
        "ServiceAccount",
    ]),
    "apps/v1": frozenset([
        "ControllerRevision", "DaemonSet", "Deployment", "ReplicaSet", "StatefulSet",
    ]),
    "batch/v1": frozenset(["CronJob", "Job"]),
    "autoscaling/v1": frozenset(["HorizontalPodAutoscaler"]),
    "autoscaling/v2": frozenset(["HorizontalPodAutoscaler"]),
    "policy/v1": frozenset(["PodDisruptionBudget"]),
    "networking.k8s.io/v1": frozenset(["Ingress", "IngressClass", "NetworkPolicy"]),
    "rbac.authorization.k8s.io/v1": frozenset([
        "ClusterRole", "ClusterRoleBinding", "Role", "RoleBinding",
    ]),
    "scheduling.k8s.io/v1": frozenset(["PriorityClass"]),
    "storage.k8s.io/v1": frozenset([
        "CSIDriver", "CSINode", "StorageClass", "VolumeAttachment",
    ]),
    "coordination.k8s.io/v1": frozenset(["Lease"]),
    "discovery.k8s.io/v1": frozenset(["EndpointSlice"]),
    "admissionregistration.k8s.io/v1": frozenset([
        "MutatingWebhookConfiguration", "ValidatingWebhookConfiguration",
    ]),
    "apiextensions.k8s.io/v1": frozenset(["CustomResourceDefinition"]),
    "apiextensions.k8s.io/v1beta1": frozenset(["CustomResourceDefinition"]),
    # Operator lifecycle manager
    "operators.coreos.com/v1alpha1": frozenset([
        "CatalogSource", "ClusterServiceVersion", "InstallPlan", "Subscription",
    ]),
    "operators.coreos.com/v1": frozenset([
        "OLMConfig", "Operator", "OperatorCondition", "OperatorGroup",
    ]),
}


def is_known(api_version: str, kind: str) -> bool:
    """True when the pair decodes against the catalog."""
    return kind in KNOWN_KINDS.get(api_version, frozenset())


def is_base_kind(kind: str) -> bool:
    return kind in BASE_KINDS


def is_danger_kind(kind: str) -> bool:
    return kind in DANGER_KINDS


def uninstall_order() -> List[str]:
    """CRDs first, then the remaining base kinds in reverse install order."""
    rest = [kind for kind in reversed(BASE_KINDS) if kind != CRD_KIND]
    return [CRD_KIND] + rest

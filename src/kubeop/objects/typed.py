#!/usr/bin/env python3
"""
KUBEOP TYPED ADAPTERS
---------------------
One adapter per base kind. Each maps the APIObject contract onto the typed
Kubernetes API for that kind. Bodies are sent as dictionaries; the
namespace is written into a copy so the decoded manifest stays as read.

Author: KubeOp Team
Date: 2026-10-18
"""

import copy
import logging
from typing import Any, Dict, Optional

from kubernetes import client
from kubernetes.client import ApiException

from kubeop.cluster.client import KubeClient, cluster_error
from kubeop.core import catalog
from kubeop.core.errors import ClusterError
from kubeop.core.settings import DEFAULT_AGENT_NAMESPACE
from kubeop.objects.base import APIObject
from kubeop.orchestration.environment import EnvironmentInjector

logger = logging.getLogger("kubeop.objects")


def _in_namespace(body: Dict[str, Any], namespace: str) -> Dict[str, Any]:
    namespaced = copy.deepcopy(body)
    namespaced.setdefault("metadata", {})["namespace"] = namespace
    return namespaced


class NamespaceObject(APIObject):
    """
    The namespace object is created under the resolved namespace, whatever
    name the archive gave it. The agent's own namespace is left alone.
    """
    kind = catalog.NAMESPACE_KIND

    def __init__(self, body: Dict[str, Any], api_version: str = "v1",
                 agent_namespace: str = DEFAULT_AGENT_NAMESPACE):
        super().__init__(body, api_version)
        self.agent_namespace = agent_namespace

    @classmethod
    def named(cls, namespace: str, agent_namespace: str = DEFAULT_AGENT_NAMESPACE) -> "NamespaceObject":
        body = {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": namespace}}
        return cls(body, agent_namespace=agent_namespace)

    def install(self, kube: KubeClient, namespace: str) -> None:
        if namespace == self.agent_namespace:
            logger.info(f"Agent namespace {namespace} already exists, not creating it")
            return
        body = copy.deepcopy(self.body)
        body.setdefault("metadata", {})["name"] = namespace
        self._create(lambda: kube.core.create_namespace(body=body))

    def uninstall(self, kube: KubeClient, namespace: str) -> Optional[ClusterError]:
        if namespace == self.agent_namespace:
            logger.info(f"Leaving the agent namespace {namespace} in place")
            return None
        return self._delete(lambda: kube.core.delete_namespace(name=namespace))


class RoleObject(APIObject):
    kind = catalog.ROLE_KIND

    def install(self, kube: KubeClient, namespace: str) -> None:
        body = _in_namespace(self.body, namespace)
        self._create(lambda: kube.rbac.create_namespaced_role(namespace=namespace, body=body))

    def uninstall(self, kube: KubeClient, namespace: str) -> Optional[ClusterError]:
        return self._delete(lambda: kube.rbac.delete_namespaced_role(name=self.name, namespace=namespace))


class RoleBindingObject(APIObject):
    kind = catalog.ROLEBINDING_KIND

    def install(self, kube: KubeClient, namespace: str) -> None:
        body = _in_namespace(self.body, namespace)
        # Service account subjects live next to the binding
        for subject in body.get("subjects") or []:
            if isinstance(subject, dict) and subject.get("kind") == catalog.SERVICEACCOUNT_KIND:
                subject["namespace"] = namespace
        self._create(lambda: kube.rbac.create_namespaced_role_binding(namespace=namespace, body=body))

    def uninstall(self, kube: KubeClient, namespace: str) -> Optional[ClusterError]:
        return self._delete(
            lambda: kube.rbac.delete_namespaced_role_binding(name=self.name, namespace=namespace)
        )


class DeploymentObject(APIObject):
    """
    The operator itself. Installing it first materializes the env var
    ConfigMap (when there are user inputs) and points every container at it.
    """
    kind = catalog.DEPLOYMENT_KIND

    def __init__(self, body: Dict[str, Any], api_version: str = "apps/v1",
                 env_vars: Optional[Dict[str, Any]] = None, workload_id: str = "",
                 injector: Optional[EnvironmentInjector] = None):
        super().__init__(body, api_version)
        self.env_vars = env_vars or {}
        self.workload_id = workload_id
        self.injector = injector or EnvironmentInjector()

    def install(self, kube: KubeClient, namespace: str) -> None:
        if self.env_vars:
            config_name = self.injector.create_config(kube, self.env_vars, self.workload_id, namespace)
            if config_name:
                self.injector.inject_reference(self.body, config_name)

        body = _in_namespace(self.body, namespace)
        self._create(lambda: kube.apps.create_namespaced_deployment(namespace=namespace, body=body))

    def uninstall(self, kube: KubeClient, namespace: str) -> Optional[ClusterError]:
        try:
            return self._delete(
                lambda: kube.apps.delete_namespaced_deployment(name=self.name, namespace=namespace)
            )
        finally:
            if self.workload_id:
                self.injector.delete_config(kube, self.workload_id, namespace)

    def label_selector(self) -> str:
        spec = self.body.get("spec") or {}
        labels = (spec.get("selector") or {}).get("matchLabels")
        if not labels:
            labels = ((spec.get("template") or {}).get("metadata") or {}).get("labels") or {}
        return ",".join(f"{key}={value}" for key, value in labels.items())

    def status(self, kube: KubeClient, namespace: str) -> Any:
        """Returns the V1PodList of the pods backing this deployment."""
        selector = self.label_selector()
        # An empty selector would match every pod in the namespace
        if not selector:
            logger.warning(f"{self.kind} {self.name} has no pod labels, reporting no pods")
            return client.V1PodList(items=[])
        try:
            return kube.core.list_namespaced_pod(namespace=namespace, label_selector=selector)
        except ApiException as e:
            raise cluster_error(f"Listing pods of {self.kind} {self.name}", e) from e


class ServiceAccountObject(APIObject):
    kind = catalog.SERVICEACCOUNT_KIND

    def install(self, kube: KubeClient, namespace: str) -> None:
        body = _in_namespace(self.body, namespace)
        self._create(lambda: kube.core.create_namespaced_service_account(namespace=namespace, body=body))

    def uninstall(self, kube: KubeClient, namespace: str) -> Optional[ClusterError]:
        return self._delete(
            lambda: kube.core.delete_namespaced_service_account(name=self.name, namespace=namespace)
        )


class CustomResourceDefinitionObject(APIObject):
    """
    CRDs are cluster scoped. apiextensions.k8s.io/v1 goes through the typed
    API; older versions are sent as-is through the dynamic client.
    """
    kind = catalog.CRD_KIND
    TYPED_VERSION = "apiextensions.k8s.io/v1"

    def _dynamic_resource(self, kube: KubeClient):
        return kube.dynamic.resources.get(api_version=self.api_version, kind=self.kind)

    def install(self, kube: KubeClient, namespace: str) -> None:
        if self.api_version == self.TYPED_VERSION:
            self._create(lambda: kube.apiextensions.create_custom_resource_definition(body=self.body))
        else:
            self._create(lambda: self._dynamic_resource(kube).create(body=self.body))

    def uninstall(self, kube: KubeClient, namespace: str) -> Optional[ClusterError]:
        if self.api_version == self.TYPED_VERSION:
            return self._delete(lambda: kube.apiextensions.delete_custom_resource_definition(name=self.name))
        return self._delete(lambda: self._dynamic_resource(kube).delete(name=self.name))


TYPED_ADAPTERS = {
    catalog.NAMESPACE_KIND: NamespaceObject,
    catalog.ROLE_KIND: RoleObject,
    catalog.ROLEBINDING_KIND: RoleBindingObject,
    catalog.DEPLOYMENT_KIND: DeploymentObject,
    catalog.SERVICEACCOUNT_KIND: ServiceAccountObject,
    catalog.CRD_KIND: CustomResourceDefinitionObject,
}

#!/usr/bin/env python3
"""
KUBEOP ENGINE - The High Orchestrator
-------------------------------------
The OperatorEngine drives one operator deployment archive through the
cluster. Every public call decodes the archive from scratch, resolves the
namespace once, and then walks the classified objects in a fixed order:

  install    Namespace, Role, RoleBinding, Deployment, ServiceAccount,
             CustomResourceDefinition, then generic objects. Stops at the
             first failure; nothing is rolled back.
  uninstall  CRDs first (removing a CRD removes its custom resources), the
             rest of the base kinds in reverse, then generic objects. Never
             stops early; every outcome is reported.
  status     pods of the first Deployment.

Author: KubeOp Team
Date: 2026-10-18
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from kubeop.cluster.client import KubeClient
from kubeop.core import catalog
from kubeop.core.errors import NamespaceConflictError, NotFoundError
from kubeop.core.models import ContainerStatus, ObjectOutcome
from kubeop.core.settings import AgentSettings
from kubeop.decoding.decoder import ManifestDecoder, ObjectGroups
from kubeop.objects.base import APIObject
from kubeop.objects.typed import DeploymentObject, NamespaceObject
from kubeop.orchestration.environment import EnvironmentInjector
from kubeop.orchestration.namespace import declared_namespace, resolve_namespace
from kubeop.orchestration.status import aggregate_container_status
from kubeop.unpacking.archive import ArchiveExtractor

logger = logging.getLogger("kubeop.engine")


class OperatorEngine:
    """
    Installs, removes and reports on operator deployments for one agent.
    Holds no per-deployment state between calls.
    """

    def __init__(self, kube: Optional[KubeClient], settings: Optional[AgentSettings] = None,
                 injector: Optional[EnvironmentInjector] = None):
        self.kube = kube
        self.settings = settings or AgentSettings.from_env()
        self.extractor = ArchiveExtractor()
        self.injector = injector or EnvironmentInjector()

    # --- PHASE 1: DECODING ---

    def process_deployment(self, archive: str, metadata: Optional[Dict[str, Any]] = None,
                           env_vars: Optional[Dict[str, Any]] = None, workload_id: str = "",
                           cr_install_timeout: float = 0) -> Tuple[ObjectGroups, str]:
        """
        Converts the deployment string into classified objects and returns
        them together with the namespace the operator declares (may be "").
        """
        documents = self.extractor.extract(archive)

        decoder = ManifestDecoder(
            cr_install_timeout=cr_install_timeout,
            poll_interval=self.settings.poll_interval
        )
        groups = decoder.decode(documents)

        for deployment in groups.get(catalog.DEPLOYMENT_KIND):
            deployment.env_vars = dict(env_vars or {})
            deployment.workload_id = workload_id
            deployment.injector = self.injector
        for ns_obj in groups.get(catalog.NAMESPACE_KIND):
            ns_obj.agent_namespace = self.settings.namespace

        logger.debug(f"Classified deployment objects: {groups.counts()}")
        return groups, declared_namespace(groups, metadata)

    def _namespace(self, requested: str, declared: str) -> str:
        return resolve_namespace(requested, declared, self.settings.namespace)

    # --- PHASE 2: INSTALL ---

    def install(self, archive: str, metadata: Optional[Dict[str, Any]] = None,
                env_vars: Optional[Dict[str, Any]] = None, workload_id: str = "",
                requested_namespace: str = "", cr_install_timeout: float = 0) -> List[ObjectOutcome]:
        """
        Creates the objects of the operator deployment in the cluster, the
        custom resources that start the operator last.
        """
        groups, op_namespace = self.process_deployment(
            archive, metadata, env_vars, workload_id, cr_install_timeout
        )

        namespace = self._namespace(requested_namespace, op_namespace)
        node_namespace = self.settings.namespace
        if namespace != node_namespace and not self.settings.is_cluster_scoped:
            raise NamespaceConflictError(
                f"Service failed to start for agreement {workload_id}. Could not deploy service "
                f"into namespace {namespace} because the agent's namespace is {node_namespace} "
                f"and it restricts all services to have the same namespace."
            )

        # A namespace other than the agent's must exist before anything lands in it
        if catalog.NAMESPACE_KIND not in groups and namespace != node_namespace:
            groups.add(catalog.NAMESPACE_KIND, NamespaceObject.named(namespace, node_namespace))

        outcomes = []
        for kind, obj in self._install_sequence(groups):
            obj.install(self.kube, namespace)
            logger.info(f"successfully installed {kind} {obj.name}")
            outcomes.append(ObjectOutcome(kind=kind, name=obj.name))

        logger.debug("all operator objects installed")
        return outcomes

    def _install_sequence(self, groups: ObjectGroups):
        for kind in catalog.BASE_KINDS:
            for obj in groups.get(kind):
                yield kind, obj
        for obj in groups.unstructured:
            yield obj.kind, obj

    # --- PHASE 3: UNINSTALL ---

    def uninstall(self, archive: str, metadata: Optional[Dict[str, Any]] = None,
                  workload_id: str = "", requested_namespace: str = "") -> List[ObjectOutcome]:
        """
        Removes every object of the operator deployment, best-effort.
        Only a failure to decode the archive is raised.
        """
        groups, op_namespace = self.process_deployment(archive, metadata, {}, workload_id)
        namespace = self._namespace(requested_namespace, op_namespace)

        outcomes = []
        for kind in catalog.uninstall_order():
            for obj in groups.get(kind):
                outcomes.append(self._uninstall_one(kind, obj, namespace))

        for obj in groups.unstructured:
            outcomes.append(self._uninstall_one(obj.kind, obj, namespace))

        failed = sum(1 for outcome in outcomes if not outcome.success)
        logger.debug(f"Completed removal of all operator objects from the cluster ({failed} failure(s)).")
        return outcomes

    def _uninstall_one(self, kind: str, obj: APIObject, namespace: str) -> ObjectOutcome:
        name = ""
        try:
            name = obj.name
            logger.info(f"attempting to uninstall {kind} {name}")
            err = obj.uninstall(self.kube, namespace)
        except Exception as e:  # transport errors from the client are not ApiExceptions
            err = e
        if err is not None:
            logger.warning(f"Failed to uninstall {kind} {name}: {type(err).__name__}: {err}")
            return ObjectOutcome(kind=kind, name=name, success=False, error=str(err))
        return ObjectOutcome(kind=kind, name=name)

    # --- PHASE 4: STATUS ---

    def _operator_deployment(self, groups: ObjectGroups) -> DeploymentObject:
        deployments = groups.get(catalog.DEPLOYMENT_KIND)
        if not deployments:
            raise NotFoundError("Error: failed to find operator deployment object.")
        return deployments[0]

    def operator_status(self, archive: str, metadata: Optional[Dict[str, Any]] = None,
                        workload_id: str = "", requested_namespace: str = "") -> Any:
        """Raw status payload of the operator Deployment."""
        groups, op_namespace = self.process_deployment(archive, metadata, {}, workload_id)
        namespace = self._namespace(requested_namespace, op_namespace)
        return self._operator_deployment(groups).status(self.kube, namespace)

    def status(self, archive: str, metadata: Optional[Dict[str, Any]] = None,
               workload_id: str = "", requested_namespace: str = "") -> List[ContainerStatus]:
        """Container statuses of the first operator pod, [] if none runs."""
        groups, op_namespace = self.process_deployment(archive, metadata, {}, workload_id)
        namespace = self._namespace(requested_namespace, op_namespace)
        pod_list = self._operator_deployment(groups).status(self.kube, namespace)
        return aggregate_container_status(pod_list)

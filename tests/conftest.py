"""Shared pytest fixtures for KubeOp tests."""

import io
import sys
import base64
import tarfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from kubeop.core.settings import AgentSettings  # noqa: E402


NAMESPACE_YAML = """apiVersion: v1
kind: Namespace
metadata:
  name: svc-ns
"""

ROLE_YAML = """apiVersion: rbac.authorization.k8s.io/v1
kind: Role
metadata:
  name: op-role
rules:
- apiGroups: ['']
  resources: ['pods']
  verbs: ['get', 'watch', 'list']
"""

ROLEBINDING_YAML = """apiVersion: rbac.authorization.k8s.io/v1
kind: RoleBinding
metadata:
  name: op-binding
subjects:
- kind: ServiceAccount
  name: op-sa
  namespace: placeholder
roleRef:
  kind: Role
  name: op-role
  apiGroup: rbac.authorization.k8s.io
"""

DEPLOYMENT_YAML = """apiVersion: apps/v1
kind: Deployment
metadata:
  name: op-deployment
spec:
  selector:
    matchLabels:
      app: op
  template:
    metadata:
      labels:
        app: op
    spec:
      serviceAccountName: op-sa
      containers:
      - name: operator
        image: example/operator:1.0
        env:
        - name: WATCH_NAMESPACE
          value: ''
      - name: sidecar
        image: example/sidecar:1.0
"""

SERVICEACCOUNT_YAML = """apiVersion: v1
kind: ServiceAccount
metadata:
  name: op-sa
"""

CRD_YAML = """apiVersion: apiextensions.k8s.io/v1
kind: CustomResourceDefinition
metadata:
  name: widgets.example.com
spec:
  group: example.com
  names:
    kind: Widget
    plural: widgets
  scope: Namespaced
  versions:
  - name: v1
    served: true
    storage: true
"""

SERVICE_YAML = """apiVersion: v1
kind: Service
metadata:
  name: op-metrics
spec:
  ports:
  - port: 8080
"""

CUSTOM_RESOURCE_YAML = """apiVersion: example.com/v1
kind: Widget
metadata:
  name: my-widget
spec:
  size: 3
"""

OPERATOR_GROUP_YAML = """apiVersion: operators.coreos.com/v1
kind: OperatorGroup
metadata:
  name: op-group
"""


def build_archive(files, directories=()):
    """
    Packs (name, body) pairs into a gzip-compressed tar and returns it
    base64 encoded, the way operator deployments are shipped.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for directory in directories:
            info = tarfile.TarInfo(directory)
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            tar.addfile(info)
        for name, body in files:
            data = body.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def make_archive():
    return build_archive


@pytest.fixture
def full_archive():
    """One object of every install group, listed in reverse install order."""
    return build_archive([
        ("operator/service.yaml", SERVICE_YAML),
        ("operator/crd.yaml", CRD_YAML),
        ("operator/service_account.yaml", SERVICEACCOUNT_YAML),
        ("operator/deployment.yaml", DEPLOYMENT_YAML),
        ("operator/role_binding.yaml", ROLEBINDING_YAML),
        ("operator/role.yaml", ROLE_YAML),
        ("operator/namespace.yaml", NAMESPACE_YAML),
    ], directories=["operator"])


@pytest.fixture
def kube():
    """
    Stand-in cluster client. Every API call, including those on the dynamic
    client's resources, is recorded in order on kube.mock_calls.
    """
    client = MagicMock()
    client.dynamic.resources.get.return_value.namespaced = True
    return client


@pytest.fixture
def settings():
    return AgentSettings(namespace="openhorizon-agent", poll_interval=0)


def call_names(mock):
    """Names of the recorded calls, e.g. 'rbac.create_namespaced_role'."""
    return [name for name, _args, _kwargs in mock.mock_calls]

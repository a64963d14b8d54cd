import pytest

from kubeop.core.models import RawDocument
from kubeop.decoding.decoder import ManifestDecoder
from kubeop.orchestration.namespace import declared_namespace, resolve_namespace

from conftest import NAMESPACE_YAML, ROLE_YAML


@pytest.mark.parametrize("requested,declared,node,expected", [
    ("", "svc-ns", "openhorizon-agent", "svc-ns"),
    ("req-ns", "svc-ns", "x", "req-ns"),
    ("", "", "x", "x"),
    ("req-ns", "", "x", "req-ns"),
])
def test_resolution_precedence(requested, declared, node, expected):
    assert resolve_namespace(requested, declared, node) == expected


def test_declared_namespace_prefers_namespace_object():
    groups = ManifestDecoder().decode([RawDocument(body=NAMESPACE_YAML), RawDocument(body=ROLE_YAML)])
    assert declared_namespace(groups, {"namespace": "meta-ns"}) == "svc-ns"


def test_declared_namespace_falls_back_to_metadata():
    groups = ManifestDecoder().decode([RawDocument(body=ROLE_YAML)])

    assert declared_namespace(groups, {"namespace": "meta-ns"}) == "meta-ns"
    assert declared_namespace(groups, {"namespace": 42}) == ""
    assert declared_namespace(groups, None) == ""

"""Tests for JSON/YAML entry points and Kubernetes-shaped output."""

import json

import yaml

from kube_builder.builder import DeploymentBuilder
from kube_builder.codec import decode_json, decode_yaml, to_dict, to_yaml
from kube_builder.errors import DecodeError, ValidationError

DEPLOYMENT_YAML = b"""
apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
  namespace: prod
  labels: {app: web}
spec:
  replicas: 3
  selector:
    matchLabels: {app: web}
  template:
    metadata:
      labels: {app: web}
    spec:
      containers:
        - name: web
          image: nginx:1.25
          ports:
            - containerPort: 80
          livenessProbe:
            httpGet: {path: /healthz, port: 80}
            periodSeconds: 5
          resources:
            limits: {cpu: 500m}
"""


def test_decode_yaml():
    dp, error = decode_yaml(DEPLOYMENT_YAML)

    assert error is None
    assert dp.metadata.namespace == "prod"
    assert dp.spec.replicas == 3
    container = dp.spec.template.spec.containers[0]
    assert container.ports[0].container_port == 80
    assert container.liveness_probe.http_get.path == "/healthz"


def test_decode_json_matches_yaml():
    raw = yaml.safe_load(DEPLOYMENT_YAML)
    from_json, error = decode_json(json.dumps(raw).encode())

    assert error is None
    assert from_json == decode_yaml(DEPLOYMENT_YAML)[0]


def test_decode_json_malformed():
    dp, error = decode_json(b"{not json")

    assert dp is None
    assert isinstance(error, DecodeError)
    assert error.fmt == "json"


def test_decode_yaml_malformed():
    _, error = decode_yaml(b"metadata: [unclosed")
    assert isinstance(error, DecodeError)


def test_decode_yaml_requires_mapping():
    _, error = decode_yaml(b"- a\n- b\n")

    assert isinstance(error, DecodeError)
    assert "mapping" in str(error)


def test_decode_yaml_wrong_field_type():
    _, error = decode_yaml(b"spec:\n  replicas: many\n")
    assert isinstance(error, DecodeError)


class TestBuilderEntryPoints:
    def test_from_yaml_then_finish(self):
        dp, error = DeploymentBuilder.from_yaml(DEPLOYMENT_YAML).set_replicas(5).finish()

        assert error is None
        assert dp.spec.replicas == 5
        assert dp.spec.selector.match_labels == {"app": "web"}

    def test_from_json_bad_input_is_recorded(self):
        builder = DeploymentBuilder.from_json(b"[")
        builder.set_name("web")

        dp, error = builder.finish()
        assert isinstance(error, DecodeError)
        assert dp.metadata.name == ""

    def test_load_skipped_after_error(self, builder):
        builder.set_container("web", "", 80).load_yaml(DEPLOYMENT_YAML)

        assert isinstance(builder.error, ValidationError)
        assert builder.deployment.metadata.name == ""

    def test_empty_yaml_document_still_needs_fields(self):
        _, error = DeploymentBuilder.from_yaml(b"").finish()

        assert isinstance(error, ValidationError)
        assert error.field == "metadata.name"


def test_to_dict_uses_wire_names(minimal_builder):
    minimal_builder.set_cmd_liveness(["true"], 1, 1, 1).set_pvc_claim("data", "data-pvc")
    dp, _ = minimal_builder.finish()

    out = to_dict(dp)

    assert out["apiVersion"] == "apps/v1"
    assert out["kind"] == "Deployment"
    assert out["spec"]["selector"] == {"matchLabels": {"app": "web"}}
    container = out["spec"]["template"]["spec"]["containers"][0]
    assert container["ports"] == [{"containerPort": 80}]
    assert container["livenessProbe"]["exec"] == {"command": ["true"]}
    assert "readinessProbe" not in container
    volume = out["spec"]["template"]["spec"]["volumes"][0]
    assert volume["persistentVolumeClaim"] == {"claimName": "data-pvc", "readOnly": False}


def test_to_yaml_round_trips_through_decode(minimal_builder):
    dp, _ = minimal_builder.finish()

    decoded, error = decode_yaml(to_yaml(dp))
    assert error is None
    assert decoded == dp

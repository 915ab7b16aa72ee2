from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEPLOYMENT_KIND = "Deployment"
DEPLOYMENT_API_VERSION = "apps/v1"


class K8sModel(BaseModel):
    """
    Base for every descriptor fragment.
    Fields are snake_case in Python and camelCase on the wire; unknown keys are dropped.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ObjectMeta(K8sModel):
    name: str = ""
    namespace: str = ""
    labels: Optional[dict[str, str]] = None
    annotations: Optional[dict[str, str]] = None


class ContainerPort(K8sModel):
    container_port: int = Field(..., description="Port exposed by the container image")


class EnvVar(K8sModel):
    name: str
    value: str = ""


class VolumeMount(K8sModel):
    name: str = Field(..., description="Volume name declared on the pod spec")
    mount_path: str


class HTTPHeader(K8sModel):
    name: str
    value: str


class HTTPGetAction(K8sModel):
    port: int | str
    path: str = ""
    http_headers: Optional[list[HTTPHeader]] = None


class TCPSocketAction(K8sModel):
    host: str = ""
    port: int | str


class ExecAction(K8sModel):
    command: list[str] = Field(default_factory=list)


class Probe(K8sModel):
    """Exactly one of http_get, tcp_socket or exec_ is set by the probe helpers."""

    http_get: Optional[HTTPGetAction] = None
    tcp_socket: Optional[TCPSocketAction] = None
    exec_: Optional[ExecAction] = Field(None, alias="exec")
    initial_delay_seconds: int = 0
    timeout_seconds: int = 0
    period_seconds: int = 0

    @property
    def action(self) -> str | None:
        if self.http_get is not None:
            return "http"
        if self.tcp_socket is not None:
            return "tcp"
        if self.exec_ is not None:
            return "exec"
        return None


class Container(K8sModel):
    name: str = ""
    image: str = ""
    ports: Optional[list[ContainerPort]] = None
    env: Optional[list[EnvVar]] = None
    volume_mounts: Optional[list[VolumeMount]] = None
    liveness_probe: Optional[Probe] = None
    readiness_probe: Optional[Probe] = None

    def has_image(self) -> bool:
        return bool(self.image.strip())


class PersistentVolumeClaimVolumeSource(K8sModel):
    claim_name: str
    read_only: bool = False


class Volume(K8sModel):
    name: str
    persistent_volume_claim: Optional[PersistentVolumeClaimVolumeSource] = None


class PodSpec(K8sModel):
    containers: Optional[list[Container]] = None
    volumes: Optional[list[Volume]] = None


class PodTemplateSpec(K8sModel):
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: PodSpec = Field(default_factory=PodSpec)


class LabelSelectorRequirement(K8sModel):
    key: str = Field(..., min_length=1)
    operator: Literal["In", "NotIn", "Exists", "DoesNotExist"]
    values: Optional[list[str]] = None


class LabelSelector(K8sModel):
    match_labels: Optional[dict[str, str]] = None
    match_expressions: Optional[list[LabelSelectorRequirement]] = None


class DeploymentSpec(K8sModel):
    replicas: Optional[int] = None
    min_ready_seconds: Optional[int] = None
    revision_history_limit: Optional[int] = None
    progress_deadline_seconds: Optional[int] = None
    selector: Optional[LabelSelector] = None
    template: PodTemplateSpec = Field(default_factory=PodTemplateSpec)


class Deployment(K8sModel):
    api_version: str = ""
    kind: str = ""
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: DeploymentSpec = Field(default_factory=DeploymentSpec)

from typing import Any, Callable, Iterable, Optional

from pydantic import ValidationError as SchemaError

from .codec import decode_json, decode_yaml
from .converters import map_match_expressions, map_to_envs
from .errors import BuilderError, MappingError, ValidationError
from .log import get_logger
from .models import (
    DEPLOYMENT_API_VERSION,
    DEPLOYMENT_KIND,
    Container,
    Deployment,
    LabelSelector,
    Probe,
    Volume,
    VolumeMount,
)
from .probes import cmd_probe, http_probe, tcp_probe
from .settings import get_settings

logger = get_logger(__name__)

# Probes and volume mounts always land on this container.
PRIMARY_CONTAINER = 0

MAX_PORT = 65536


class DeploymentBuilder:
    """
    Chainable accumulator for an apps/v1 Deployment.

    Every setter returns the builder. The first error recorded sticks: later
    setters become no-ops and finish() hands that error back to the caller.
    """

    def __init__(self):
        self.deployment = Deployment()
        self.error: Optional[BuilderError] = None

    @classmethod
    def create(cls) -> "DeploymentBuilder":
        return cls()

    @classmethod
    def from_json(cls, data: bytes | str) -> "DeploymentBuilder":
        return cls().load_json(data)

    @classmethod
    def from_yaml(cls, data: bytes | str) -> "DeploymentBuilder":
        return cls().load_yaml(data)

    def finish(self) -> tuple[Deployment, Optional[BuilderError]]:
        """
        Ends the chain: checks required fields, derives the selector if missing and
        stamps kind/apiVersion. The descriptor is returned even when an error is set.
        """
        self._verify()
        return self.deployment, self.error

    # -- internals --------------------------------------------------------

    def _fail(self, error: BuilderError) -> "DeploymentBuilder":
        if self.error is None:
            logger.warning("Deployment build failed: %s", error)
            self.error = error
        return self

    @property
    def _containers(self) -> list[Container]:
        spec = self.deployment.spec.template.spec
        if spec.containers is None:
            spec.containers = []
        return spec.containers

    def _primary_container(self) -> Container:
        """Returns slot 0, allocating an empty container when the pod has none."""
        containers = self._containers
        if not containers:
            logger.debug("Allocating empty primary container")
            containers.append(Container())
        return containers[PRIMARY_CONTAINER]

    def _build(self, make: Callable[..., Any], field: str, *args, **kwargs) -> Any:
        """Runs a fragment constructor, recording schema failures as a MappingError."""
        if self.error is not None:
            return None
        try:
            return make(*args, **kwargs)
        except SchemaError as e:
            self._fail(MappingError(f"invalid {field}", e, field=field))
            return None

    def _blank_image_slot(self) -> int | None:
        for index, container in enumerate(self._containers):
            if not container.has_image():
                return index
        return None

    def _verify(self):
        if self.error is not None:
            return

        meta = self.deployment.metadata
        pod_meta = self.deployment.spec.template.metadata
        containers = self.deployment.spec.template.spec.containers

        if not meta.name.strip():
            self._fail(ValidationError("Deployment name is not allowed to be empty", field="metadata.name"))
            return
        if not meta.labels:
            self._fail(ValidationError("Deployment labels are not allowed to be empty", field="metadata.labels"))
            return
        if not pod_meta.labels:
            self._fail(
                ValidationError(
                    "Deployment pod template labels are not allowed to be empty",
                    field="spec.template.metadata.labels",
                )
            )
            return
        if not containers:
            self._fail(
                ValidationError(
                    "Deployment containers are not allowed to be empty",
                    field="spec.template.spec.containers",
                )
            )
            return

        # set_selector also rewrites metadata.labels to the pod labels.
        selector = self.deployment.spec.selector
        if selector is None or not (selector.match_labels or selector.match_expressions):
            logger.debug("Deriving selector from pod labels %s", pod_meta.labels)
            self.set_selector(self.get_pod_labels())
            if self.error is not None:
                return

        self.deployment.kind = DEPLOYMENT_KIND
        self.deployment.api_version = DEPLOYMENT_API_VERSION

    # -- decoding ---------------------------------------------------------

    def load_json(self, data: bytes | str) -> "DeploymentBuilder":
        """Replaces the descriptor with one decoded from JSON."""
        if self.error is not None:
            return self
        deployment, error = decode_json(data)
        if error is not None:
            return self._fail(error)
        self.deployment = deployment
        return self

    def load_yaml(self, data: bytes | str) -> "DeploymentBuilder":
        """Replaces the descriptor with one decoded from YAML."""
        if self.error is not None:
            return self
        deployment, error = decode_yaml(data)
        if error is not None:
            return self._fail(error)
        self.deployment = deployment
        return self

    # -- identity ---------------------------------------------------------

    def set_name(self, name: str) -> "DeploymentBuilder":
        if self.error is None:
            self.deployment.metadata.name = name
        return self

    def set_namespace(self, namespace: str) -> "DeploymentBuilder":
        """Sets the Deployment namespace and the pod template namespace."""
        if self.error is None:
            self.deployment.metadata.namespace = namespace
            self.deployment.spec.template.metadata.namespace = namespace
        return self

    def set_namespace_and_name(self, namespace: str, name: str) -> "DeploymentBuilder":
        return self.set_namespace(namespace).set_name(name)

    def set_annotations(self, annotations: dict[str, str]) -> "DeploymentBuilder":
        if self.error is None:
            self.deployment.metadata.annotations = dict(annotations)
        return self

    # -- labels & selector ------------------------------------------------

    def set_labels(self, labels: dict[str, str]) -> "DeploymentBuilder":
        """Sets the Deployment labels and the pod labels to the same content."""
        if self.error is None:
            self.deployment.metadata.labels = dict(labels)
            self.deployment.spec.template.metadata.labels = dict(labels)
        return self

    def set_pod_labels(self, labels: dict[str, str]) -> "DeploymentBuilder":
        """
        Sets pod labels only. Meant for builds that do not call set_labels();
        the two are never reconciled.
        """
        if self.error is None:
            self.deployment.spec.template.metadata.labels = dict(labels)
        return self

    def get_pod_labels(self) -> dict[str, str] | None:
        return self.deployment.spec.template.metadata.labels

    def set_selector(self, labels: dict[str, str]) -> "DeploymentBuilder":
        """
        Sets selector matchLabels, and also the Deployment and pod labels.
        Existing matchExpressions are kept.
        """
        if self.error is not None:
            return self
        if not labels:
            return self._fail(
                ValidationError("LabelSelector set error, labels empty", field="spec.selector.matchLabels")
            )

        built = self._build(LabelSelector, "spec.selector.matchLabels", match_labels=dict(labels))
        if built is None:
            return self

        self.set_labels(labels)
        selector = self.deployment.spec.selector
        if selector is None:
            self.deployment.spec.selector = built
        else:
            selector.match_labels = built.match_labels
        return self

    def set_match_expressions(self, expressions: Iterable[Any]) -> "DeploymentBuilder":
        if self.error is not None:
            return self
        try:
            requirements = map_match_expressions(expressions)
        except MappingError as e:
            return self._fail(e)

        selector = self.deployment.spec.selector
        if selector is None:
            self.deployment.spec.selector = LabelSelector(match_expressions=requirements)
        else:
            selector.match_expressions = requirements
        return self

    # -- replicas & lifecycle ---------------------------------------------

    def set_replicas(self, replicas: int) -> "DeploymentBuilder":
        if self.error is None:
            self.deployment.spec.replicas = replicas
        return self

    def set_min_ready_seconds(self, sec: int) -> "DeploymentBuilder":
        if self.error is not None:
            return self
        if sec < 0:
            logger.warning("minReadySeconds %d is negative, using 0", sec)
            sec = 0
        self.deployment.spec.min_ready_seconds = sec
        return self

    def set_history_limit(self, limit: int) -> "DeploymentBuilder":
        """Number of old ReplicaSets kept for rollback."""
        if self.error is not None:
            return self
        if limit <= 0:
            fallback = get_settings().HISTORY_LIMIT_FALLBACK
            logger.warning("revisionHistoryLimit %d is not positive, using %d", limit, fallback)
            limit = fallback
        self.deployment.spec.revision_history_limit = limit
        return self

    def set_deploy_max_time(self, sec: int) -> "DeploymentBuilder":
        """
        Sets progressDeadlineSeconds. When a rollout takes longer, the controller
        reports ProgressDeadlineExceeded.
        """
        if self.error is not None:
            return self
        if sec < 0:
            fallback = get_settings().DEPLOY_MAX_TIME_FALLBACK
            logger.warning("progressDeadlineSeconds %d is negative, using %d", sec, fallback)
            sec = fallback
        self.deployment.spec.progress_deadline_seconds = sec
        return self

    # -- probes -----------------------------------------------------------

    def _set_liveness(self, probe: Probe | None) -> "DeploymentBuilder":
        if self.error is None and probe is not None:
            self._primary_container().liveness_probe = probe
        return self

    def _set_readiness(self, probe: Probe | None) -> "DeploymentBuilder":
        if self.error is None and probe is not None:
            self._primary_container().readiness_probe = probe
        return self

    def set_http_liveness(
        self,
        port: int,
        path: str,
        init_delay_sec: int,
        timeout_sec: int,
        period_sec: int,
        headers: Optional[dict[str, str]] = None,
    ) -> "DeploymentBuilder":
        probe = self._build(http_probe, "livenessProbe", port, path, init_delay_sec, timeout_sec, period_sec, headers)
        return self._set_liveness(probe)

    def set_cmd_liveness(self, cmd: list[str], init_delay_sec: int, timeout_sec: int, period_sec: int):
        probe = self._build(cmd_probe, "livenessProbe", cmd, init_delay_sec, timeout_sec, period_sec)
        return self._set_liveness(probe)

    def set_tcp_liveness(self, host: str, port: int, init_delay_sec: int, timeout_sec: int, period_sec: int):
        probe = self._build(tcp_probe, "livenessProbe", host, port, init_delay_sec, timeout_sec, period_sec)
        return self._set_liveness(probe)

    def set_http_readiness(
        self,
        port: int,
        path: str,
        init_delay_sec: int,
        timeout_sec: int,
        period_sec: int,
        headers: Optional[dict[str, str]] = None,
    ) -> "DeploymentBuilder":
        probe = self._build(http_probe, "readinessProbe", port, path, init_delay_sec, timeout_sec, period_sec, headers)
        return self._set_readiness(probe)

    def set_cmd_readiness(self, cmd: list[str], init_delay_sec: int, timeout_sec: int, period_sec: int):
        probe = self._build(cmd_probe, "readinessProbe", cmd, init_delay_sec, timeout_sec, period_sec)
        return self._set_readiness(probe)

    def set_tcp_readiness(self, host: str, port: int, init_delay_sec: int, timeout_sec: int, period_sec: int):
        probe = self._build(tcp_probe, "readinessProbe", host, port, init_delay_sec, timeout_sec, period_sec)
        return self._set_readiness(probe)

    # -- containers, env, volumes -----------------------------------------

    def set_container(self, name: str, image: str, container_port: int) -> "DeploymentBuilder":
        """
        Fills the first container without an image, or appends a new one.
        Probe/env/mount setters may have pre-allocated such an empty slot.
        """
        if self.error is not None:
            return self
        if container_port <= 0 or container_port >= MAX_PORT:
            return self._fail(
                ValidationError(
                    "SetContainer err, container port range: 0 < containerPort < 65536",
                    field="containerPort",
                )
            )
        if not image or not image.strip():
            return self._fail(ValidationError("SetContainer err, image is not allowed to be empty", field="image"))

        container = self._build(
            Container, "container", name=name, image=image, ports=[{"container_port": container_port}]
        )
        if container is None:
            return self
        containers = self._containers

        slot = self._blank_image_slot()
        if slot is not None:
            logger.debug("Filling container slot %d with image %s", slot, image)
            containers[slot].name = container.name
            containers[slot].image = container.image
            containers[slot].ports = container.ports
            return self

        containers.append(container)
        return self

    def set_envs(self, env_map: dict[str, str]) -> "DeploymentBuilder":
        """Attaches the env list to every container whose env is still unset."""
        if self.error is not None:
            return self
        try:
            envs = map_to_envs(env_map)
        except MappingError as e:
            return self._fail(e)

        containers = self._containers
        if not containers:
            containers.append(Container(env=envs))
            return self

        for container in containers:
            if container.env is None:
                container.env = [env.model_copy() for env in envs]
        return self

    def set_pvc_claim(self, volume_name: str, claim_name: str) -> "DeploymentBuilder":
        """
        Declares a PersistentVolumeClaim volume.
        volume_name: logical name referenced by set_pvc_mounts().
        claim_name: an existing PVC in the Deployment's namespace.
        """
        if self.error is not None:
            return self
        volume = self._build(
            Volume,
            "volumes",
            name=volume_name,
            persistent_volume_claim={"claim_name": claim_name, "read_only": False},
        )
        if volume is None:
            return self
        spec = self.deployment.spec.template.spec
        if spec.volumes is None:
            spec.volumes = []
        spec.volumes.append(volume)
        return self

    def set_pvc_mounts(self, volume_name: str, mount_path: str) -> "DeploymentBuilder":
        """Mounts a declared volume on the primary container only."""
        if self.error is not None:
            return self
        mount = self._build(VolumeMount, "volumeMounts", name=volume_name, mount_path=mount_path)
        if mount is None:
            return self

        container = self._primary_container()
        if container.volume_mounts is None:
            container.volume_mounts = []
        container.volume_mounts.append(mount)
        return self

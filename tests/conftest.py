import pytest

from kube_builder.builder import DeploymentBuilder
from kube_builder.models import Container, EnvVar
from kube_builder.settings import get_settings


@pytest.fixture
def builder():
    return DeploymentBuilder.create()


@pytest.fixture
def minimal_builder():
    """Smallest chain that finishes without error."""
    return DeploymentBuilder.create().set_name("web").set_labels({"app": "web"}).set_container("web", "nginx:1.25", 80)


@pytest.fixture
def make_containers():
    def _make(builder, *containers: Container):
        builder.deployment.spec.template.spec.containers = list(containers)
        return builder

    return _make


@pytest.fixture
def env_x():
    return [EnvVar(name="X", value="1")]


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'tessera'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


from tessera.core.composition import (  # noqa: E402
    BusinessContext,
    Classification,
    CompositionCache,
    CompositionRequest,
    CompositionRequirements,
    DynamicComposer,
)
from tessera.core.config import CompositionConfig, clear_all_caches  # noqa: E402
from tessera.core.templates import TemplateRegistry, TemplateRenderer, TemplateResolver  # noqa: E402
from tessera.data import get_data_path  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Run every test from an empty project with no TESSERA_* overrides."""
    for key in list(os.environ):
        if key.startswith("TESSERA_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_all_caches()
    yield
    clear_all_caches()


@pytest.fixture
def registry_path(tmp_path: Path) -> Path:
    return tmp_path / ".tessera" / "template-registry.yaml"


@pytest.fixture
def registry(registry_path: Path) -> TemplateRegistry:
    """Registry seeded with the bundled starter set, persisted under tmp_path."""
    reg = TemplateRegistry(registry_path)
    reg.load()
    return reg


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer(get_data_path("templates"))


@pytest.fixture
def resolver(registry: TemplateRegistry, renderer: TemplateRenderer) -> TemplateResolver:
    return TemplateResolver(registry, renderer)


@pytest.fixture
def composer(registry: TemplateRegistry, tmp_path: Path) -> DynamicComposer:
    return DynamicComposer(
        registry,
        config=CompositionConfig(repo_root=tmp_path),
        cache=CompositionCache(max_entries=16, ttl_seconds=None),
    )


@pytest.fixture
def login_request() -> CompositionRequest:
    return CompositionRequest(
        description="user login form",
        requirements=CompositionRequirements(
            functionality=("email", "password"),
            complexity="simple",
            accessibility_level="AAA",
            privacy_compliance=True,
        ),
        context=BusinessContext(user_type="citizen", data_types=("personal-data",)),
    )


@pytest.fixture
def classified_login_request(login_request: CompositionRequest) -> CompositionRequest:
    return CompositionRequest(
        description=login_request.description,
        requirements=CompositionRequirements(
            functionality=("email", "password"),
            complexity="simple",
            accessibility_level="AAA",
            privacy_compliance=True,
            classification=Classification.RESTRICTED,
        ),
        context=login_request.context,
    )

"""Shared test fixtures for swagger-odm."""

import json
from pathlib import Path

import pytest

from swagger_odm import CompilationSession, SwaggerODMConfig
from swagger_odm.backends.memory.client import MemorySchemaBackend
from swagger_odm.core.config import CompilerConfig

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def swagger(definitions: dict, version: str = "2.0", **extra) -> dict:
    """Build a minimal Swagger document around some definitions."""
    document = {"swagger": version, "definitions": definitions}
    document.update(extra)
    return document


@pytest.fixture
def make_document():
    """Factory for minimal Swagger documents."""
    return swagger


@pytest.fixture
def make_context(make_document):
    """Factory building a compilation context for some definitions."""

    def _make(definitions: dict, version: str = "2.0", config=None, **extra):
        session = CompilationSession(config=config)
        return session.build_context(make_document(definitions, version, **extra))

    return _make


@pytest.fixture
def data_dir() -> Path:
    """Directory holding the sample documents."""
    return DATA_DIR


@pytest.fixture
def houses_document() -> dict:
    """Sample Swagger 2 document with houses, people and companies."""
    with open(DATA_DIR / "swagger" / "houses.json") as f:
        return json.load(f)


@pytest.fixture
def legacy_document() -> dict:
    """Sample Swagger 1.2 document using the legacy extension key."""
    with open(DATA_DIR / "swagger" / "legacy.json") as f:
        return json.load(f)


@pytest.fixture
def test_config() -> SwaggerODMConfig:
    """Configuration resolving validator paths next to the sample documents."""
    return SwaggerODMConfig(
        compiler=CompilerConfig(validators_base_dir=str(DATA_DIR / "swagger")),
    )


@pytest.fixture
def backend() -> MemorySchemaBackend:
    """Connected in-memory schema backend."""
    memory = MemorySchemaBackend()
    memory.connect()
    yield memory
    memory.disconnect()


@pytest.fixture
def session(test_config: SwaggerODMConfig, backend: MemorySchemaBackend) -> CompilationSession:
    """Compilation session with the in-memory backend."""
    return CompilationSession(config=test_config, backend=backend)

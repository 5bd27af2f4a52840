"""Pytest fixtures for stage validation testing.

Provides reusable test fixtures for:
- In-memory transaction store
- Transaction facts recorded by the /select stage
- A validation engine bound to the store

Usage:
    @pytest.mark.asyncio
    async def test_valid_message(engine, select_facts):
        issues = await engine.validate(make_payload())
        assert issues == []
"""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Adjust imports based on project structure
backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))
sys.path.insert(0, str(Path(__file__).parent))

from domain.validation import OnSelectValidationEngine
from infrastructure.cache import InMemoryTransactionStore
from fixtures.on_select import TXN_ID, seed_select_facts


@pytest.fixture
def store() -> InMemoryTransactionStore:
    """Fresh in-memory transaction store per test."""
    return InMemoryTransactionStore()


@pytest_asyncio.fixture
async def select_facts(store):
    """Store populated with the facts a valid /select would have recorded."""
    await seed_select_facts(store, TXN_ID)
    return store


@pytest.fixture
def engine(store) -> OnSelectValidationEngine:
    return OnSelectValidationEngine(store)

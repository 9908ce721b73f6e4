import pytest
from database.database import create_engine_for_url, init_db
from database.memory_store import MemoryEntityStore
from database.sql_store import SqlEntityStore
from services.settings_service import seed_default_tables

async def make_store(backend: str):
    if backend == "memory":
        return MemoryEntityStore()
    engine = create_engine_for_url("sqlite:///:memory:")
    session_factory = await init_db(engine)
    return SqlEntityStore(session_factory, engine)

@pytest.fixture(params=["memory", "sql"])
async def store(request):
    """Пустое хранилище: каждый тест прогоняется на обоих бэкендах"""
    entity_store = await make_store(request.param)
    yield entity_store
    await entity_store.close()

@pytest.fixture
async def memory_store():
    entity_store = MemoryEntityStore()
    yield entity_store
    await entity_store.close()

@pytest.fixture
async def seeded_store(store):
    """Хранилище со стандартными столиками №1-8 (id совпадает с номером)"""
    await seed_default_tables(store)
    return store

@pytest.fixture
def customer_info():
    return {"name": "Alice Smith", "email": "alice@gmail.com", "phone": "555-0100"}

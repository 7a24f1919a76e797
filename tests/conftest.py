"""
ScrumCMD - Configuración y fixtures de pruebas
"""
import os
from datetime import date, datetime, timezone
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

# Entorno de pruebas (antes de importar la app)
os.environ['SQL_ECHO'] = 'false'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test_scrumcmd.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['SCRUMCMD_USERNAME'] = 'PM-CMD'
os.environ['SCRUMCMD_PASSWORD'] = 'test-password'

from scrumcmd.main import app
from scrumcmd.database import get_db
from scrum_common.database import DatabaseManager
from scrumcmd.services.clock import FixedClock, get_clock
from scrum_common.security import create_access_token

# Sábado 20 de enero de 2024
NOW = datetime(2024, 1, 20, 10, 0, 0, tzinfo=timezone.utc)
TODAY = date(2024, 1, 20)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW, TODAY)


@pytest.fixture
async def session_factory(tmp_path):
    """Base SQLite nueva por prueba."""
    manager = DatabaseManager(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    await manager.create_all()

    yield manager.session_factory

    await manager.drop_all()
    await manager.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory, clock) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP con base de pruebas y reloj fijo."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    token = create_access_token({'sub': 'PM-CMD'})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def api(client, auth_headers):
    """Atajos autenticados sobre /api."""
    class Api:
        async def get(self, path, **kwargs):
            return await client.get(f'/api{path}', headers=auth_headers, **kwargs)

        async def post(self, path, json=None):
            return await client.post(f'/api{path}', json=json, headers=auth_headers)

        async def put(self, path, json=None):
            return await client.put(f'/api{path}', json=json, headers=auth_headers)

        async def patch(self, path, json=None):
            return await client.patch(f'/api{path}', json=json, headers=auth_headers)

        async def delete(self, path):
            return await client.delete(f'/api{path}', headers=auth_headers)

    return Api()


@pytest.fixture
def make_employee(api):
    async def _make(name='Ana Torres', **fields):
        payload = {'name': name, 'role': 'Developer', 'email': f'{name.split()[0].lower()}@example.com'}
        payload.update(fields)
        response = await api.post('/employees', json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def make_project(api):
    async def _make(name='Portal', **fields):
        payload = {'name': name}
        payload.update(fields)
        response = await api.post('/projects', json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def make_task(api):
    async def _make(title='Tarea', **fields):
        payload = {'title': title}
        payload.update(fields)
        response = await api.post('/tasks', json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _make

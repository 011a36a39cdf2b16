"""
Tests for the FastAPI application.
"""

from uuid import uuid4

import httpx
import pytest
from fastapi.testclient import TestClient

from api.container import ServiceContainer
from api.main import create_app
from catalog.author_client import AuthorServiceClient


@pytest.fixture
def container(bff_config, mock_broker, mock_author_resolver):
    return ServiceContainer.build(
        bff_config, broker=mock_broker, author_resolver=mock_author_resolver
    )


@pytest.fixture
def client(container):
    """Create test client with lifespan enabled."""
    with TestClient(create_app(container=container)) as test_client:
        yield test_client


def author_body(first_name="Matt"):
    return {
        "firstName": first_name,
        "lastName": "Butcher",
        "address": "Boulder, CO",
        "language": "English",
    }


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["broker_status"] == "healthy"
    assert "timestamp" in data
    assert "version" in data


def test_health_check_degraded_when_broker_down(client, mock_broker):
    mock_broker.ping.side_effect = ConnectionError("redis down")

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["broker_status"] == "unhealthy"
    assert response.json()["status"] == "degraded"


def test_create_and_get_author(client):
    created = client.post("/api/v1/authors", json=author_body())

    assert created.status_code == 200
    data = created.json()
    assert data["firstName"] == "Matt"
    assert data["lastName"] == "Butcher"
    assert set(data) == {"id", "firstName", "lastName", "address", "language"}

    fetched = client.get(f"/api/v1/authors/{data['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == data


def test_list_authors_in_creation_order(client):
    for name in ["Ann", "Bob"]:
        client.post("/api/v1/authors", json=author_body(first_name=name))

    response = client.get("/api/v1/authors")

    assert response.status_code == 200
    assert [author["firstName"] for author in response.json()] == ["Ann", "Bob"]


def test_author_not_found(client):
    response = client.get(f"/api/v1/authors/{uuid4()}")

    assert response.status_code == 404
    data = response.json()
    assert data["status_code"] == 404
    assert "isn't found" in data["error"]


def test_malformed_id_rejected(client):
    response = client.get("/api/v1/books/not-a-uuid")

    assert response.status_code == 422


def test_invalid_author_body_rejected(client):
    response = client.post("/api/v1/authors", json={"firstName": "Matt"})

    assert response.status_code == 422


def test_create_book(client, known_authors):
    author_id = next(iter(known_authors))

    response = client.post(
        "/api/v1/books",
        json={"title": "Go in Practice", "authorId": str(author_id), "pages": 350},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["authorId"] == str(author_id)
    assert data["title"] == "Go in Practice"
    assert data["pages"] == 350

    fetched = client.get(f"/api/v1/books/{data['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == data


def test_create_book_unknown_author(client, container, mock_broker):
    response = client.post(
        "/api/v1/books",
        json={"title": "Go in Practice", "authorId": str(uuid4()), "pages": 350},
    )

    assert response.status_code == 404
    assert len(container.book_store) == 0
    assert client.get("/api/v1/books").json() == []
    mock_broker.publish.assert_not_awaited()


def test_create_book_succeeds_when_broker_down(client, container, mock_broker, known_authors):
    mock_broker.publish.side_effect = ConnectionError("redis down")

    response = client.post(
        "/api/v1/books",
        json={"title": "Go in Practice", "authorId": str(next(iter(known_authors))), "pages": 350},
    )

    assert response.status_code == 200
    assert len(container.book_store) == 1
    assert container.metrics.error_count("BookService") == 1


def test_metrics_endpoint(client):
    client.get("/api/v1/books")
    client.get(f"/api/v1/books/{uuid4()}")

    response = client.get("/metrics")

    assert response.status_code == 200
    data = response.json()
    assert data["request_count"]["BookService"] == 2
    assert data["error_count"]["BookService"] == 1
    assert data["execution_duration"]["BookService"]["count"] == 2
    assert data["execution_duration"]["BookService"]["active"] == 0


def test_serve_flags_limit_routes(bff_config, container):
    books_only = bff_config.model_copy(update={"serve_authors": False})

    with TestClient(create_app(bff_config=books_only, container=container)) as test_client:
        assert test_client.get("/api/v1/authors").status_code == 404
        assert test_client.get("/api/v1/books").status_code == 200


def test_book_creation_resolves_author_over_http(bff_config, mock_broker, mock_author_resolver):
    """Book creation looks the author up through the author endpoint itself."""
    container = ServiceContainer.build(
        bff_config, broker=mock_broker, author_resolver=mock_author_resolver
    )
    app = create_app(container=container)
    http_client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app))
    container.book_service.author_resolver = AuthorServiceClient("http://authors.test", http_client)

    with TestClient(app) as test_client:
        author = test_client.post("/api/v1/authors", json=author_body()).json()

        created = test_client.post(
            "/api/v1/books",
            json={"title": "Go in Practice", "authorId": author["id"], "pages": 350},
        )
        missing = test_client.post(
            "/api/v1/books",
            json={"title": "Go in Practice", "authorId": str(uuid4()), "pages": 350},
        )

    assert created.status_code == 200
    assert created.json()["authorId"] == author["id"]
    assert missing.status_code == 404
    assert len(container.book_store) == 1

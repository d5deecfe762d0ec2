import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.accounts.dtos import Principal
from modules.accounts.models import Role, User
from modules.products.models import Product


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def customer_user():
    return User.objects.create_user(
        email="customer@example.com", password="customer123", role=Role.CUSTOMER
    )


@pytest.fixture()
def other_customer_user():
    return User.objects.create_user(
        email="other@example.com", password="other123", role=Role.CUSTOMER
    )


@pytest.fixture()
def admin_user():
    return User.objects.create_user(
        email="admin@example.com", password="admin123", role=Role.ADMIN
    )


@pytest.fixture()
def customer(customer_user):
    return Principal.from_user(customer_user)


@pytest.fixture()
def admin(admin_user):
    return Principal.from_user(admin_user)


@pytest.fixture()
def customer_client(customer_user):
    client = APIClient()
    client.force_authenticate(user=customer_user)
    return client


@pytest.fixture()
def other_customer_client(other_customer_user):
    client = APIClient()
    client.force_authenticate(user=other_customer_user)
    return client


@pytest.fixture()
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture()
def make_product():
    def _make(name="Widget", price=1000, stock=10):
        return Product.objects.create(name=name, price=price, stock=stock)

    return _make


@pytest.fixture()
def laptop(make_product):
    return make_product(name="Laptop", price=99999, stock=10)


@pytest.fixture()
def mouse(make_product):
    return make_product(name="Mouse", price=2999, stock=50)

"""
Shared fixtures for the marketplace test suite.
"""

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from marketplace.models import Item, University

User = get_user_model()


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear Django cache before each test to reset throttle limits."""
    cache.clear()


@pytest.fixture
def api_client():
    """Provide an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def university(db):
    return University.objects.create(name='State University', domain='uni.edu', location='Springfield')


@pytest.fixture
def make_user(db, university):
    """Factory creating users with a credentials account."""
    def _make_user(email, password='password1', name=None, university=university, **extra):
        return User.objects.create_credentials_user(
            email=email,
            password=password,
            name=name or email.split('@')[0].title(),
            university=university,
            **extra
        )
    return _make_user


@pytest.fixture
def make_item(db):
    """Factory creating AVAILABLE items owned by the given user."""
    def _make_item(owner, title='Desk lamp', **extra):
        fields = {
            'description': 'Works fine, small scratch on the base.',
            'category': 'DECOR',
            'condition': 'GOOD',
        }
        fields.update(extra)
        return Item.objects.create(owner=owner, university=owner.university, title=title, **fields)
    return _make_item


@pytest.fixture
def client_for():
    """Return an API client authenticated as the given user."""
    def _client_for(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client_for


@pytest.fixture
def alice(make_user):
    return make_user('alice@uni.edu', name='Alice')


@pytest.fixture
def bob(make_user):
    return make_user('bob@uni.edu', name='Bob')

"""
Login and session tests for users.login, users.logout and token refresh.

Covers successful login, identical failures for every bad credential,
throttling, and refresh token blacklisting on logout.
"""

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken

User = get_user_model()


@pytest.fixture
def student(make_user):
    return make_user('student@uni.edu', password='SecurePass123!', name='Student')


def login(client, email, password):
    return client.post(reverse('users.login'), {'email': email, 'password': password}, format='json')


# ============================================================================
# 1. SUCCESSFUL LOGIN
# ============================================================================

@pytest.mark.django_db
class TestSuccessfulLogin:

    def test_login_returns_user_and_session(self, api_client, student):
        response = login(api_client, 'student@uni.edu', 'SecurePass123!')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['success'] is True
        assert body['user'] == {'id': str(student.pk), 'email': 'student@uni.edu', 'name': 'Student'}
        assert body['session']['access']
        assert body['session']['refresh']

    def test_access_token_identifies_user(self, api_client, student):
        response = login(api_client, 'student@uni.edu', 'SecurePass123!')

        token = AccessToken(response.json()['session']['access'])
        assert token['user_id'] == str(student.pk)

    def test_access_token_authenticates_protected_procedure(self, api_client, student):
        response = login(api_client, 'student@uni.edu', 'SecurePass123!')
        access = response.json()['session']['access']

        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
        me = api_client.get(reverse('users.me'))

        assert me.status_code == status.HTTP_200_OK
        assert me.json()['user']['id'] == str(student.pk)

    def test_login_is_case_insensitive_on_email(self, api_client, student):
        response = login(api_client, 'STUDENT@UNI.EDU', 'SecurePass123!')

        assert response.status_code == status.HTTP_200_OK

    def test_login_stamps_last_active(self, api_client, student):
        assert student.last_active is None

        login(api_client, 'student@uni.edu', 'SecurePass123!')

        student.refresh_from_db()
        assert student.last_active is not None

    def test_response_never_contains_password_or_hash(self, api_client, student):
        response = login(api_client, 'student@uni.edu', 'SecurePass123!')

        content = response.content.decode()
        assert 'SecurePass123!' not in content
        assert 'bcrypt' not in content


# ============================================================================
# 2. AUTHENTICATION FAILURES
# ============================================================================

@pytest.mark.django_db
class TestAuthenticationFailures:

    def test_wrong_password_is_unauthorized(self, api_client, student):
        response = login(api_client, 'student@uni.edu', 'WrongPassword123!')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        body = response.json()
        assert body['success'] is False
        assert body['error']['code'] == 'UNAUTHORIZED'
        assert body['error']['message'] == 'Invalid email or password'
        assert 'session' not in body

    def test_unknown_email_and_wrong_password_look_identical(self, api_client, student):
        wrong_password = login(api_client, 'student@uni.edu', 'WrongPassword123!')
        unknown_email = login(api_client, 'nobody@uni.edu', 'WrongPassword123!')

        assert wrong_password.status_code == unknown_email.status_code == status.HTTP_401_UNAUTHORIZED
        assert wrong_password.json() == unknown_email.json()

    def test_inactive_account_looks_like_bad_credentials(self, api_client, student):
        User.objects.filter(pk=student.pk).update(is_active=False)

        inactive = login(api_client, 'student@uni.edu', 'SecurePass123!')
        unknown = login(api_client, 'nobody@uni.edu', 'SecurePass123!')

        assert inactive.status_code == status.HTTP_401_UNAUTHORIZED
        assert inactive.json() == unknown.json()

    def test_user_without_credentials_account_cannot_login(self, api_client, db):
        User.objects.create_user(username='admin@uni.edu', email='admin@uni.edu', password='AdminPass123!')

        response = login(api_client, 'admin@uni.edu', 'AdminPass123!')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.parametrize('payload', [
        {'email': '', 'password': ''},
        {'password': 'SomePassword123!'},
        {'email': 'student@uni.edu'},
        {'email': 'not-an-email', 'password': 'SomePassword123!'},
    ])
    def test_malformed_input_is_validation_error(self, api_client, payload):
        response = api_client.post(reverse('users.login'), payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error']['code'] == 'VALIDATION'

    def test_login_attempts_are_throttled(self, api_client, student):
        for _ in range(5):
            login(api_client, 'student@uni.edu', 'WrongPassword123!')

        response = login(api_client, 'student@uni.edu', 'SecurePass123!')

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.json()['error']['code'] == 'TOO_MANY_REQUESTS'


# ============================================================================
# 3. REGISTER THEN LOGIN
# ============================================================================

@pytest.mark.django_db
def test_register_then_login_scenario(api_client, university):
    register = api_client.post(reverse('users.register'), {
        'email': 'a@uni.edu',
        'password': 'password1',
        'name': 'A',
        'universityId': str(university.pk),
    }, format='json')
    assert register.status_code == status.HTTP_201_CREATED
    user_id = register.json()['user']['id']

    wrong = login(api_client, 'a@uni.edu', 'password2')
    assert wrong.status_code == status.HTTP_401_UNAUTHORIZED
    assert wrong.json()['error']['code'] == 'UNAUTHORIZED'

    right = login(api_client, 'a@uni.edu', 'password1')
    assert right.status_code == status.HTTP_200_OK
    assert right.json()['success'] is True
    assert right.json()['user']['id'] == user_id


# ============================================================================
# 4. LOGOUT & REFRESH
# ============================================================================

@pytest.mark.django_db
class TestLogout:

    def test_refresh_token_works_before_logout(self, api_client, student):
        refresh = login(api_client, 'student@uni.edu', 'SecurePass123!').json()['session']['refresh']

        response = api_client.post(reverse('auth.refresh'), {'refresh': refresh}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.json()

    def test_logout_blacklists_refresh_token(self, api_client, student):
        refresh = login(api_client, 'student@uni.edu', 'SecurePass123!').json()['session']['refresh']

        logout = api_client.post(reverse('users.logout'), {'refresh': refresh}, format='json')
        assert logout.status_code == status.HTTP_200_OK
        assert logout.json()['success'] is True

        response = api_client.post(reverse('auth.refresh'), {'refresh': refresh}, format='json')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()['error']['code'] == 'UNAUTHORIZED'

    def test_logout_with_garbage_token_is_unauthorized(self, api_client):
        response = api_client.post(reverse('users.logout'), {'refresh': 'not-a-token'}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_twice_fails_second_time(self, api_client, student):
        refresh = login(api_client, 'student@uni.edu', 'SecurePass123!').json()['session']['refresh']

        api_client.post(reverse('users.logout'), {'refresh': refresh}, format='json')
        response = api_client.post(reverse('users.logout'), {'refresh': refresh}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

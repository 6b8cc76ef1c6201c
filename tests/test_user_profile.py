"""
Tests for users.me, users.updateMe and users.getById.
"""

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status

User = get_user_model()


# ============================================================================
# users.me
# ============================================================================

@pytest.mark.django_db
class TestMe:

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('users.me'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()['error']['code'] == 'UNAUTHORIZED'

    def test_returns_full_profile(self, client_for, alice, university):
        response = client_for(alice).get(reverse('users.me'))

        assert response.status_code == status.HTTP_200_OK
        user = response.json()['user']
        assert user['id'] == str(alice.pk)
        assert user['email'] == 'alice@uni.edu'
        assert user['name'] == 'Alice'
        assert user['reputationScore'] == 5.0
        assert user['totalTrades'] == 0
        assert user['emailVerified'] is False
        assert user['university'] == {
            'id': str(university.pk),
            'name': 'State University',
            'domain': 'uni.edu',
            'location': 'Springfield',
        }
        for key in ('major', 'graduationYear', 'dormLocation', 'phoneNumber',
                    'profileImage', 'createdAt', 'updatedAt', 'lastActive'):
            assert key in user

    def test_profile_excludes_credentials(self, client_for, alice):
        user = client_for(alice).get(reverse('users.me')).json()['user']

        assert 'password' not in user
        assert 'accounts' not in user

    def test_rejects_post(self, client_for, alice):
        response = client_for(alice).post(reverse('users.me'), {}, format='json')

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED

    def test_deleted_user_is_not_found(self, client_for, alice):
        client = client_for(alice)
        User.objects.filter(pk=alice.pk).delete()

        response = client.get(reverse('users.me'))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()['error']['code'] == 'NOT_FOUND'


# ============================================================================
# users.updateMe
# ============================================================================

@pytest.mark.django_db
class TestUpdateMe:

    def test_requires_authentication(self, api_client):
        response = api_client.post(reverse('users.updateMe'), {'name': 'X'}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_deleted_user_is_not_found(self, client_for, alice):
        client = client_for(alice)
        User.objects.filter(pk=alice.pk).delete()

        response = client.post(reverse('users.updateMe'), {'major': 'History'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()['error']['code'] == 'NOT_FOUND'
        assert not User.objects.filter(pk=alice.pk).exists()

    def test_updates_allowed_fields(self, client_for, alice):
        payload = {
            'name': 'Alice Smith',
            'major': 'Mathematics',
            'graduationYear': 2027,
            'dormLocation': 'West Hall 204',
            'phoneNumber': '+44 20 7946 0958',
            'profileImage': 'https://cdn.example.com/alice.png',
        }
        response = client_for(alice).post(reverse('users.updateMe'), payload, format='json')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['success'] is True
        assert body['user']['name'] == 'Alice Smith'
        assert body['user']['graduationYear'] == 2027

        alice.refresh_from_db()
        assert alice.name == 'Alice Smith'
        assert alice.major == 'Mathematics'
        assert alice.graduation_year == 2027
        assert alice.dorm_location == 'West Hall 204'
        assert alice.phone_number == '+44 20 7946 0958'
        assert alice.profile_image == 'https://cdn.example.com/alice.png'

    def test_partial_update_leaves_other_fields(self, client_for, make_user):
        user = make_user('carol@uni.edu', major='History', dorm_location='East Hall')

        client_for(user).post(reverse('users.updateMe'), {'major': 'Biology'}, format='json')

        user.refresh_from_db()
        assert user.major == 'Biology'
        assert user.dorm_location == 'East Hall'

    def test_stamps_updated_at(self, client_for, alice):
        before = alice.updated_at

        client_for(alice).post(reverse('users.updateMe'), {'major': 'Art'}, format='json')

        alice.refresh_from_db()
        assert alice.updated_at > before

    @pytest.mark.parametrize('payload', [
        {'reputationScore': 0.5},
        {'totalTrades': 99},
        {'email': 'mallory@uni.edu'},
        {'name': 'Mallory', 'reputationScore': 1.0},
        {'major': 'Law', 'totalTrades': 0, 'email': 'x@uni.edu'},
        {'reputation_score': 0.0},
        {'total_trades': 50},
        {'isStaff': True},
    ])
    def test_restricted_fields_are_never_changed(self, client_for, alice, payload):
        response = client_for(alice).post(reverse('users.updateMe'), payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error']['code'] == 'VALIDATION'

        alice.refresh_from_db()
        assert alice.reputation_score == 5.0
        assert alice.total_trades == 0
        assert alice.email == 'alice@uni.edu'
        assert alice.name == 'Alice'
        assert alice.is_staff is False

    def test_unknown_field_is_named_in_details(self, client_for, alice):
        response = client_for(alice).post(reverse('users.updateMe'), {'totalTrades': 7}, format='json')

        assert 'totalTrades' in response.json()['error']['details']

    @pytest.mark.parametrize('payload, field', [
        ({'graduationYear': 3000}, 'graduationYear'),
        ({'phoneNumber': '1111111111'}, 'phoneNumber'),
        ({'profileImage': 'not a url'}, 'profileImage'),
        ({'name': ''}, 'name'),
    ])
    def test_invalid_values(self, client_for, alice, payload, field):
        response = client_for(alice).post(reverse('users.updateMe'), payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert field in response.json()['error']['details']


# ============================================================================
# users.getById
# ============================================================================

@pytest.mark.django_db
class TestGetById:

    def test_is_public(self, api_client, alice):
        response = api_client.get(reverse('users.getById'), {'userId': str(alice.pk)})

        assert response.status_code == status.HTTP_200_OK
        user = response.json()['user']
        assert user['id'] == str(alice.pk)
        assert user['name'] == 'Alice'
        assert user['reputationScore'] == 5.0
        assert user['university']['name'] == 'State University'

    def test_hides_contact_details(self, api_client, make_user):
        user = make_user('dave@uni.edu', phone_number='+1-234-567-8900', dorm_location='North Hall')

        body = api_client.get(reverse('users.getById'), {'userId': str(user.pk)}).json()['user']

        assert 'email' not in body
        assert 'phoneNumber' not in body
        assert 'dormLocation' not in body

    def test_unknown_user_is_not_found(self, api_client, db):
        response = api_client.get(reverse('users.getById'), {'userId': '00000000-0000-0000-0000-000000000000'})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()['error']['code'] == 'NOT_FOUND'

    def test_malformed_id_is_validation_error(self, api_client, db):
        response = api_client.get(reverse('users.getById'), {'userId': 'abc'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error']['code'] == 'VALIDATION'

    def test_missing_id_is_validation_error(self, api_client, db):
        response = api_client.get(reverse('users.getById'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

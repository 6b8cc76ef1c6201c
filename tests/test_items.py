"""
Tests for the items.* procedures: listing, browsing, editing and removal.
"""

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from marketplace.models import Item, University


@pytest.fixture
def item_data():
    return {
        'title': 'Calculus textbook',
        'description': 'Stewart, 8th edition. Some highlighting.',
        'category': 'TEXTBOOKS',
        'condition': 'GOOD',
    }


# ============================================================================
# items.create
# ============================================================================

@pytest.mark.django_db
class TestCreateItem:

    def test_creates_available_item_owned_by_caller(self, client_for, alice, university, item_data):
        item_data.update({
            'imageUrls': ['https://cdn.example.com/1.jpg', 'https://cdn.example.com/2.jpg'],
            'estimatedValue': '25.50',
            'lookingFor': 'A desk lamp',
        })

        response = client_for(alice).post(reverse('items.create'), item_data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()['item']
        assert body['status'] == Item.AVAILABLE
        assert body['owner']['id'] == str(alice.pk)
        assert body['universityId'] == str(university.pk)
        assert body['imageUrls'] == ['https://cdn.example.com/1.jpg', 'https://cdn.example.com/2.jpg']
        assert body['estimatedValue'] == '25.50'

        item = Item.objects.get(pk=body['id'])
        assert item.owner == alice
        assert item.estimated_value == Decimal('25.50')
        assert item.open_to_offers is True

    def test_requires_authentication(self, api_client, item_data, db):
        response = api_client.post(reverse('items.create'), item_data, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.parametrize('field', ['title', 'description', 'category', 'condition'])
    def test_required_fields(self, client_for, alice, item_data, field):
        item_data.pop(field)

        response = client_for(alice).post(reverse('items.create'), item_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert field in response.json()['error']['details']

    def test_unknown_category_is_rejected(self, client_for, alice, item_data):
        item_data['category'] = 'CARS'

        response = client_for(alice).post(reverse('items.create'), item_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.parametrize('key', ['status', 'ownerId', 'universityId'])
    def test_server_managed_fields_are_rejected(self, client_for, alice, item_data, key):
        item_data[key] = 'TRADED'

        response = client_for(alice).post(reverse('items.create'), item_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert key in response.json()['error']['details']
        assert not Item.objects.exists()

    def test_too_many_images(self, client_for, alice, item_data, settings):
        settings.MARKETPLACE = {**settings.MARKETPLACE, 'MAX_ITEM_IMAGES': 2}
        item_data['imageUrls'] = [f'https://cdn.example.com/{i}.jpg' for i in range(3)]

        response = client_for(alice).post(reverse('items.create'), item_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'imageUrls' in response.json()['error']['details']

    def test_negative_value_is_rejected(self, client_for, alice, item_data):
        item_data['estimatedValue'] = '-1.00'

        response = client_for(alice).post(reverse('items.create'), item_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_user_without_university_cannot_list(self, client_for, make_user, item_data):
        drifter = make_user('drifter@uni.edu', university=None)

        response = client_for(drifter).post(reverse('items.create'), item_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Item.objects.exists()


# ============================================================================
# items.list
# ============================================================================

@pytest.mark.django_db
class TestListItems:

    def test_is_public_and_lists_available_items_newest_first(self, api_client, alice, make_item):
        older = make_item(alice, title='Kettle', category='KITCHEN')
        newer = make_item(alice, title='Monitor', category='ELECTRONICS')
        hidden = make_item(alice, title='Chair', category='FURNITURE')
        Item.objects.filter(pk=hidden.pk).update(status=Item.PENDING_TRADE)

        response = api_client.get(reverse('items.list'))

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['success'] is True
        assert body['count'] == 2
        assert [item['id'] for item in body['items']] == [str(newer.pk), str(older.pk)]

    def test_filters_by_category_and_condition(self, api_client, alice, make_item):
        match = make_item(alice, title='Calculus', category='TEXTBOOKS', condition='LIKE_NEW')
        make_item(alice, title='Biology', category='TEXTBOOKS', condition='POOR')
        make_item(alice, title='Lamp', category='DECOR', condition='LIKE_NEW')

        response = api_client.get(reverse('items.list'), {'category': 'TEXTBOOKS', 'condition': 'LIKE_NEW'})

        assert [item['id'] for item in response.json()['items']] == [str(match.pk)]

    def test_filters_by_university(self, api_client, alice, make_user, make_item):
        other = University.objects.create(name='Tech Institute', domain='tech.edu')
        outsider = make_user('eve@tech.edu', university=other)
        make_item(alice)
        theirs = make_item(outsider, title='Soldering iron', category='ELECTRONICS')

        response = api_client.get(reverse('items.list'), {'universityId': str(other.pk)})

        assert [item['id'] for item in response.json()['items']] == [str(theirs.pk)]

    def test_search_matches_title_or_description(self, api_client, alice, make_item):
        by_title = make_item(alice, title='Graphing calculator', category='ELECTRONICS')
        by_description = make_item(alice, title='Bundle', description='Includes a CALCULATOR case')
        make_item(alice, title='Desk lamp')

        response = api_client.get(reverse('items.list'), {'search': 'calculator'})

        ids = {item['id'] for item in response.json()['items']}
        assert ids == {str(by_title.pk), str(by_description.pk)}

    def test_pagination(self, api_client, alice, make_item):
        for i in range(5):
            make_item(alice, title=f'Item {i}')

        response = api_client.get(reverse('items.list'), {'pageSize': 2, 'page': 2})

        body = response.json()
        assert body['count'] == 5
        assert len(body['items']) == 2
        assert body['next'] is not None
        assert body['previous'] is not None

    def test_invalid_filter_is_validation_error(self, api_client, db):
        response = api_client.get(reverse('items.list'), {'category': 'CARS'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error']['code'] == 'VALIDATION'


# ============================================================================
# items.get
# ============================================================================

@pytest.mark.django_db
class TestGetItem:

    def test_returns_item_with_owner(self, api_client, alice, make_item):
        item = make_item(alice)

        response = api_client.get(reverse('items.get'), {'itemId': str(item.pk)})

        assert response.status_code == status.HTTP_200_OK
        body = response.json()['item']
        assert body['title'] == 'Desk lamp'
        assert body['owner'] == {'id': str(alice.pk), 'name': 'Alice', 'reputationScore': 5.0}

    def test_removed_item_is_hidden_from_others(self, client_for, api_client, alice, bob, make_item):
        item = make_item(alice)
        Item.objects.filter(pk=item.pk).update(status=Item.REMOVED)

        assert api_client.get(reverse('items.get'), {'itemId': str(item.pk)}).status_code == 404
        assert client_for(bob).get(reverse('items.get'), {'itemId': str(item.pk)}).status_code == 404
        assert client_for(alice).get(reverse('items.get'), {'itemId': str(item.pk)}).status_code == 200

    def test_unknown_item_is_not_found(self, api_client, db):
        response = api_client.get(reverse('items.get'), {'itemId': '00000000-0000-0000-0000-000000000000'})

        assert response.status_code == status.HTTP_404_NOT_FOUND


# ============================================================================
# items.update
# ============================================================================

@pytest.mark.django_db
class TestUpdateItem:

    def test_owner_can_edit(self, client_for, alice, make_item):
        item = make_item(alice)

        response = client_for(alice).post(reverse('items.update'), {
            'itemId': str(item.pk),
            'title': 'Brass desk lamp',
            'openToOffers': False,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['item']['title'] == 'Brass desk lamp'
        item.refresh_from_db()
        assert item.title == 'Brass desk lamp'
        assert item.open_to_offers is False
        assert item.category == 'DECOR'

    def test_other_user_is_forbidden(self, client_for, alice, bob, make_item):
        item = make_item(alice)

        response = client_for(bob).post(reverse('items.update'), {
            'itemId': str(item.pk),
            'title': 'Mine now',
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        item.refresh_from_db()
        assert item.title == 'Desk lamp'

    def test_reserved_item_cannot_be_edited(self, client_for, alice, make_item):
        item = make_item(alice)
        Item.objects.filter(pk=item.pk).update(status=Item.PENDING_TRADE)

        response = client_for(alice).post(reverse('items.update'), {
            'itemId': str(item.pk),
            'title': 'Changed',
        }, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        item.refresh_from_db()
        assert item.title == 'Desk lamp'

    def test_non_object_body_is_validation_error(self, client_for, alice, make_item):
        make_item(alice)

        response = client_for(alice).post(reverse('items.update'), [1, 2], format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error']['code'] == 'VALIDATION'

    @pytest.mark.parametrize('payload', [{'status': 'TRADED'}, {'ownerId': 'x'}, {'universityId': 'x'}])
    def test_server_managed_fields_are_rejected(self, client_for, alice, make_item, payload):
        item = make_item(alice)

        response = client_for(alice).post(reverse('items.update'), {
            'itemId': str(item.pk),
            **payload,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        item.refresh_from_db()
        assert item.status == Item.AVAILABLE

    def test_missing_item_id(self, client_for, alice):
        response = client_for(alice).post(reverse('items.update'), {'title': 'X'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# ============================================================================
# items.remove
# ============================================================================

@pytest.mark.django_db
class TestRemoveItem:

    def test_owner_removes_item(self, client_for, api_client, alice, make_item):
        item = make_item(alice)

        response = client_for(alice).post(reverse('items.remove'), {'itemId': str(item.pk)}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['success'] is True
        item.refresh_from_db()
        assert item.status == Item.REMOVED
        assert api_client.get(reverse('items.list')).json()['count'] == 0

    def test_other_user_cannot_remove(self, client_for, alice, bob, make_item):
        item = make_item(alice)

        response = client_for(bob).post(reverse('items.remove'), {'itemId': str(item.pk)}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        item.refresh_from_db()
        assert item.status == Item.AVAILABLE

    def test_reserved_item_cannot_be_removed(self, client_for, alice, make_item):
        item = make_item(alice)
        Item.objects.filter(pk=item.pk).update(status=Item.PENDING_TRADE)

        response = client_for(alice).post(reverse('items.remove'), {'itemId': str(item.pk)}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        item.refresh_from_db()
        assert item.status == Item.PENDING_TRADE

    def test_removing_twice_is_not_found(self, client_for, alice, make_item):
        item = make_item(alice)
        client = client_for(alice)

        client.post(reverse('items.remove'), {'itemId': str(item.pk)}, format='json')
        response = client.post(reverse('items.remove'), {'itemId': str(item.pk)}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

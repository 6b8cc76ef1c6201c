"""
Tests for users.myItems, users.myTrades and users.myReviews.
"""

import pytest
from django.urls import reverse
from rest_framework import status

from marketplace import trades
from marketplace.models import Item, Review


@pytest.mark.django_db
class TestMyItems:

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('users.myItems'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_returns_only_own_items_newest_first(self, client_for, alice, bob, make_item):
        first = make_item(alice, title='Kettle', category='KITCHEN')
        second = make_item(alice, title='Monitor', category='ELECTRONICS')
        make_item(bob, title='Bike', category='SPORTS')

        response = client_for(alice).get(reverse('users.myItems'))

        assert response.status_code == status.HTTP_200_OK
        ids = [item['id'] for item in response.json()['items']]
        assert ids == [str(second.pk), str(first.pk)]

    def test_includes_every_status(self, client_for, alice, make_item):
        removed = make_item(alice, title='Old chair', category='FURNITURE')
        Item.objects.filter(pk=removed.pk).update(status=Item.REMOVED)
        make_item(alice)

        items = client_for(alice).get(reverse('users.myItems')).json()['items']

        assert {item['status'] for item in items} == {Item.AVAILABLE, Item.REMOVED}

    def test_empty_for_new_user(self, client_for, alice):
        response = client_for(alice).get(reverse('users.myItems'))

        assert response.json() == {'success': True, 'items': []}


@pytest.mark.django_db
class TestMyTrades:

    def test_includes_sent_and_received_trades(self, client_for, alice, bob, make_user, make_item):
        carol = make_user('carol@uni.edu')
        sent = trades.propose_trade(alice, bob.pk, [make_item(alice).pk], [])
        received = trades.propose_trade(bob, alice.pk, [make_item(bob).pk], [])
        trades.propose_trade(bob, carol.pk, [make_item(bob).pk], [])

        response = client_for(alice).get(reverse('users.myTrades'))

        assert response.status_code == status.HTTP_200_OK
        ids = [trade['id'] for trade in response.json()['trades']]
        assert ids == [str(received.pk), str(sent.pk)]

    def test_outsider_sees_nothing(self, client_for, alice, bob, make_user, make_item):
        carol = make_user('carol@uni.edu')
        trades.propose_trade(alice, bob.pk, [make_item(alice).pk], [])

        response = client_for(carol).get(reverse('users.myTrades'))

        assert response.json()['trades'] == []


@pytest.mark.django_db
class TestMyReviews:

    def test_includes_given_and_received_reviews(self, client_for, alice, bob, make_item):
        trade = trades.propose_trade(bob, alice.pk, [], [make_item(alice).pk])
        trades.accept_trade(alice, trade.pk)
        trades.confirm_trade(alice, trade.pk)
        trades.confirm_trade(bob, trade.pk)
        given = Review.objects.create(trade=trade, reviewer=alice, reviewee=bob, rating=4)
        received = Review.objects.create(trade=trade, reviewer=bob, reviewee=alice, rating=5, comment='Great')

        response = client_for(alice).get(reverse('users.myReviews'))

        assert response.status_code == status.HTTP_200_OK
        reviews = response.json()['reviews']
        assert [review['id'] for review in reviews] == [str(received.pk), str(given.pk)]
        assert reviews[0]['reviewerName'] == 'Bob'
        assert reviews[0]['comment'] == 'Great'

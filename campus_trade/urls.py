"""
URL configuration for campus_trade project.

Every remote procedure is served at /api/<procedure>/ and the URL name is
the procedure name, so reverse('trades.accept') gives /api/trades.accept/.
"""
from django.contrib import admin
from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView, TokenVerifyView

from marketplace import views


PROCEDURES = [
    # Users
    ('users.register', views.UserRegistrationView),
    ('users.login', views.LoginView),
    ('users.logout', views.LogoutView),
    ('users.me', views.MeView),
    ('users.updateMe', views.UpdateMeView),
    ('users.getById', views.UserDetailView),
    ('users.myItems', views.MyItemsView),
    ('users.myTrades', views.MyTradesView),
    ('users.myReviews', views.MyReviewsView),

    # Trades
    ('trades.propose', views.TradeProposeView),
    ('trades.accept', views.TradeAcceptView),
    ('trades.decline', views.TradeDeclineView),
    ('trades.confirm', views.TradeConfirmView),
    ('trades.cancel', views.TradeCancelView),
    ('trades.get', views.TradeDetailView),

    # Items
    ('items.create', views.ItemCreateView),
    ('items.list', views.ItemListView),
    ('items.get', views.ItemDetailView),
    ('items.update', views.ItemUpdateView),
    ('items.remove', views.ItemRemoveView),

    # Messages
    ('messages.send', views.MessageSendView),
    ('messages.inbox', views.InboxView),
    ('messages.conversation', views.ConversationView),
    ('messages.markRead', views.MessageMarkReadView),

    # Reviews
    ('reviews.create', views.ReviewCreateView),
    ('reviews.forUser', views.UserReviewsView),

    # Reports
    ('reports.create', views.ReportCreateView),
    ('reports.list', views.ReportListView),
    ('reports.resolve', views.ReportResolveView),

    # Universities
    ('universities.list', views.UniversityListView),
]


urlpatterns = [
    path('admin/', admin.site.urls),

    # Session tokens
    path('api/auth.refresh/', TokenRefreshView.as_view(), name='auth.refresh'),
    path('api/auth.verify/', TokenVerifyView.as_view(), name='auth.verify'),
] + [
    path(f'api/{name}/', view.as_view(), name=name)
    for name, view in PROCEDURES
]

"""
Authentication backend for email + password credentials accounts.
"""

from django.contrib.auth.backends import ModelBackend
from django.contrib.auth.hashers import make_password

from .models import Account


class CredentialsBackend(ModelBackend):
    """
    Authenticate a user by email against their 'credentials' Account.

    The password hash lives on the Account, not on the User row.
    """

    def authenticate(self, request, email=None, password=None, **kwargs):
        """
        Authenticate user using email and the credentials account password.

        Args:
            request: HTTP request object
            email: Email address
            password: User password
            **kwargs: Additional keyword arguments ('username' is accepted as email)

        Returns:
            User object if authentication successful, None otherwise
        """
        if email is None:
            email = kwargs.get('username')

        if email is None or password is None:
            return None

        account = (
            Account.objects
            .select_related('user')
            .filter(provider_id=Account.CREDENTIALS, user__email__iexact=email.strip())
            .first()
        )

        if account is None or not account.password:
            # Run the password hasher once to reduce the timing
            # difference between an existing and a nonexistent user
            make_password(password)
            return None

        if account.check_password(password) and self.user_can_authenticate(account.user):
            return account.user

        return None

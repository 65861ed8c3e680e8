"""
Sign-in backed by Firebase Authentication.

The browser signs in with the Firebase Web SDK and posts the resulting ID
token here. Once verified, the token's claims are kept in the Flask session
and exposed through Flask-Login's ``current_user``.
"""
import logging
from typing import Optional

from firebase_admin import auth as firebase_auth
from flask import current_app, session
from flask_login import LoginManager, UserMixin

from .firebase import get_firebase_app

logger = logging.getLogger(__name__)

SESSION_IDENTITY_KEY = 'identity'

login_manager = LoginManager()


class AuthError(Exception):
    pass


class User(UserMixin):
    def __init__(self, uid: str, email: str = None, name: str = None):
        self.uid = uid
        self.email = email
        self.name = name

    def get_id(self):
        return self.uid

    @property
    def display_name(self) -> str:
        return self.name or (self.email.split('@')[0] if self.email else self.uid)

    def to_dict(self):
        return {'uid': self.uid, 'email': self.email, 'name': self.name}


@login_manager.user_loader
def load_user(user_id: str) -> Optional[User]:
    identity = session.get(SESSION_IDENTITY_KEY)
    if not identity or identity.get('uid') != user_id:
        return None
    return User(**identity)


def verify_identity_token(id_token: str) -> User:
    """Verify a Firebase ID token and return the caller it identifies."""
    if not id_token:
        raise AuthError("Missing ID token")

    try:
        firebase_app = get_firebase_app(current_app.config['FIREBASE_CREDENTIALS'])
        claims = firebase_auth.verify_id_token(id_token, app=firebase_app)
    except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError) as e:
        logger.warning(f"Rejected ID token: {e}")
        raise AuthError("Invalid or expired ID token") from e

    return User(uid=claims['uid'], email=claims.get('email'), name=claims.get('name'))


def remember_identity(user: User):
    session[SESSION_IDENTITY_KEY] = user.to_dict()


def forget_identity():
    session.pop(SESSION_IDENTITY_KEY, None)

from flask import Blueprint, render_template, request, redirect, url_for, current_app, jsonify
from flask_login import login_user, logout_user

from pickup.auth import AuthError, verify_identity_token, remember_identity, forget_identity
from pickup.responses import plain_text

bp = Blueprint('auth', __name__)


def firebase_web_config():
    return {
        'apiKey': current_app.config['FIREBASE_API_KEY'],
        'authDomain': current_app.config['FIREBASE_AUTH_DOMAIN'],
        'projectId': current_app.config['FIREBASE_PROJECT_ID'],
    }


@bp.route('/signup')
def signup():
    return render_template('signup.html', firebase_config=firebase_web_config())


@bp.route('/login')
def login():
    return render_template('login.html', firebase_config=firebase_web_config())


@bp.route('/session', methods=['POST'])
def create_session():
    """Exchange a Firebase ID token for a signed-in session."""
    data = request.get_json(silent=True) or {}
    id_token = data.get('idToken') or request.form.get('idToken')

    try:
        user = verify_identity_token(id_token)
    except AuthError as e:
        return plain_text(str(e), 401)

    remember_identity(user)
    login_user(user)
    return jsonify({'message': 'Signed in', 'user': user.to_dict()})


@bp.route('/logout', methods=['POST'])
def logout():
    logout_user()
    forget_identity()
    return redirect(url_for('page_index'))

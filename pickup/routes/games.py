from flask import Blueprint, render_template, request, redirect, url_for, current_app, flash
from flask_login import current_user

from pickup.game_roster import JoinResult, GameValidationError
from pickup.responses import plain_text

bp = Blueprint('games', __name__)

JOIN_MESSAGES = {
    JoinResult.JOINED: "You're in! See you at the game.",
    JoinResult.ALREADY_JOINED: "You're already on the roster for that game.",
    JoinResult.FULL: "Sorry, that game is already full.",
}

SPORTS = ['Basketball', 'Soccer', 'Volleyball', 'Tennis', 'Pickleball', 'Ultimate']


def requester_email():
    if current_user.is_authenticated:
        return current_user.email
    return None


# --- Routes ---

@bp.route('/games/new')
def new_game():
    """Show the create game form."""
    return render_template('create_game.html', sports=SPORTS)


@bp.route('/games', methods=['POST'])
def create_game():
    """Create a game from the submitted form."""
    form = request.form

    if current_user.is_authenticated:
        created_by = current_user.display_name
        creator_email = current_user.email
    else:
        created_by = form.get('createdBy') or None
        creator_email = form.get('creatorEmail') or None

    try:
        current_app.roster.create_game(
            title=form.get('title', ''),
            sport=form.get('sport', ''),
            location=form.get('location', ''),
            date=form.get('date', ''),
            time=form.get('time', ''),
            players_needed=form.get('playersNeeded'),
            created_by=created_by,
            creator_email=creator_email,
            secret_code=form.get('secretCode') or None,
            creator_verified=current_user.is_authenticated
        )
    except GameValidationError as e:
        return plain_text(str(e), 400)

    return redirect(url_for('games.list_games'))


@bp.route('/games')
def list_games():
    """List games, filtered by sport button and search box."""
    sport = request.args.get('sport') or None
    search = request.args.get('search') or None

    games = current_app.catalog.list_games(sport=sport, search=search)

    return render_template('upcoming_games.html',
                           games=games,
                           sports=SPORTS,
                           current_sport=sport,
                           search=search or '',
                           is_searching=bool(search))


@bp.route('/games/delete/<game_id>', methods=['POST'])
def delete_game(game_id):
    code = request.args.get('code') or request.form.get('code')

    success, message = current_app.roster.delete_game(
        game_id,
        requester_email=requester_email(),
        code=code
    )
    if not success:
        return plain_text(message, 403)

    return redirect(url_for('games.list_games'))


@bp.route('/games/join/<game_id>', methods=['POST'])
def join_game(game_id):
    result = current_app.roster.attempt_join(
        game_id,
        name=request.form.get('name'),
        phone=request.form.get('phone')
    )

    if result == JoinResult.NOT_FOUND:
        return plain_text("Game not found")

    flash(JOIN_MESSAGES[result], result.value)
    return redirect(url_for('games.list_games'))

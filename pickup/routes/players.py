from flask import Blueprint, render_template, request, redirect, url_for, current_app

bp = Blueprint('players', __name__)


@bp.route('/players/new')
def new_player():
    """Show the create player card form."""
    return render_template('create_player.html')


@bp.route('/players', methods=['POST'])
def create_player():
    current_app.players.create_player(request.form.to_dict())
    return redirect(url_for('players.list_players'))


@bp.route('/players')
def list_players():
    """List every player card."""
    return render_template('find_players.html', players=current_app.players.list_players())

"""Routes for the tournament blueprint."""

from __future__ import annotations

from typing import Any

from flask import (
    flash,
    g,
    jsonify,
    redirect,
    render_template,
    request,
    url_for,
)

from foodcup.errors import ValidationError
from foodcup.storage import get_store

from . import bp
from .bracket import current_round, is_playable, progress_percent
from .forms import PickForm, TournamentForm
from .services import TournamentService


@bp.route("/", methods=["GET"])
def list_tournaments() -> Any:
    """Browse tournaments, optionally filtered by title or location tag."""
    query = request.args.get("q", "")
    tournaments = get_store().search(query)
    return render_template(
        "tournament/tournaments.html", tournaments=tournaments, query=query
    )


@bp.route("/create", methods=["GET", "POST"])
def create_tournament() -> Any:
    """Create a new tournament."""
    form = TournamentForm()
    if form.validate_on_submit():
        try:
            tournament = TournamentService.create_tournament(
                get_store(), form.data, creator=g.user
            )
            flash(f"Tournament '{tournament['title']}' created.", "success")
            return redirect(url_for(".list_tournaments"))
        except ValidationError as e:
            flash(e.message, "danger")

    return render_template("tournament/create_tournament.html", form=form)


@bp.route("/<string:tournament_id>", methods=["GET"])
def view_tournament(tournament_id: str) -> Any:
    """Play a tournament: show the current round and the bracket so far."""
    tournament = TournamentService.get_tournament(get_store(), tournament_id)
    return render_template(
        "tournament/play.html",
        tournament=tournament,
        current_round=current_round(tournament),
        progress=progress_percent(tournament),
        is_playable=is_playable,
        pick_form=PickForm(),
    )


@bp.route("/<string:tournament_id>/pick", methods=["POST"])
def pick_winner(tournament_id: str) -> Any:
    """Record the winner of one match in the current round."""
    form = PickForm()
    if form.validate_on_submit():
        outcome = TournamentService.pick_winner(
            get_store(),
            tournament_id,
            form.match_id.data,
            form.side.data,
            user=g.user,
        )
        if outcome["finished"] and outcome["reward"]:
            reward = outcome["reward"]
            message = f"Reward granted: {reward['reward']}"
            if reward.get("code"):
                message += f" (coupon code {reward['code']})"
            flash(message, "success")
    return redirect(url_for(".view_tournament", tournament_id=tournament_id))


@bp.route("/<string:tournament_id>/json", methods=["GET"])
def tournament_json(tournament_id: str) -> Any:
    """Return a tournament exactly as it is stored."""
    tournament = TournamentService.get_tournament(get_store(), tournament_id)
    return jsonify(tournament)

"""Forms for the tournament blueprint."""

from flask_wtf import FlaskForm
from wtforms import HiddenField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional, ValidationError

from foodcup.constants import DEFAULT_REWARDS, MIN_ENTRIES

from .bracket import normalize
from .services import parse_lines


class TournamentForm(FlaskForm):
    """Form for creating a tournament."""

    title = StringField("Title", validators=[DataRequired(), Length(max=120)])

    location_tag = StringField(
        "Location Tag", validators=[Optional(), Length(max=120)]
    )

    description = TextAreaField("Description", validators=[Optional()])

    reward_mode = SelectField(
        "Reward Mode",
        choices=[("random", "Random"), ("weighted", "Weighted")],
        validators=[DataRequired()],
        default="random",
    )

    entries = TextAreaField(
        "Entries (one per line, or comma separated)",
        validators=[DataRequired()],
    )

    rewards_pool = TextAreaField(
        "Rewards Pool (one per line)",
        validators=[Optional()],
        default="\n".join(DEFAULT_REWARDS),
    )

    def validate_entries(self, field):
        """Require enough entries to fill the smallest bracket."""
        if len(parse_lines(field.data)) < MIN_ENTRIES:
            raise ValidationError(f"Enter at least {MIN_ENTRIES} entries.")

    @property
    def entry_count(self):
        """Number of entries typed so far."""
        return len(parse_lines(self.entries.data))

    @property
    def bracket_size(self):
        """Bracket size the current entries would produce."""
        return normalize(self.entry_count)


class PickForm(FlaskForm):
    """Form posted when a winner is picked for a match."""

    match_id = HiddenField("Match", validators=[DataRequired()])
    side = HiddenField("Side", validators=[DataRequired()])

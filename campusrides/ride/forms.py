"""Forms for the ride blueprint."""

from flask_wtf import FlaskForm
from wtforms import IntegerField, SelectField, StringField
from wtforms.validators import DataRequired, NumberRange, Optional, ValidationError

from .utils import parse_start_date_time


class RideForm(FlaskForm):
    """Form for offering or editing a ride."""

    car_id = SelectField("Car", validators=[DataRequired("Please select a car.")])
    max_riders = IntegerField(
        "Seats",
        validators=[
            DataRequired("Please choose how many riders fit."),
            NumberRange(min=1, message="A ride needs at least one seat."),
        ],
    )
    vibe = StringField("Vibe", validators=[DataRequired("Please select a vibe.")])
    start_date_time = StringField("Departure Time", validators=[Optional()])

    def validate_start_date_time(self, field):
        if field.data and parse_start_date_time(field.data) is None:
            raise ValidationError("Departure time must be an ISO-8601 date.")

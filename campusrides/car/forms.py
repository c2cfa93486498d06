"""Forms for the car blueprint."""

from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField
from wtforms import IntegerField, StringField
from wtforms.validators import DataRequired, Length, NumberRange, Optional

from campusrides.core.constants import ALLOWED_IMAGE_EXTENSIONS, MAX_CAR_CAPACITY


class CarForm(FlaskForm):
    """Form for adding or editing a car."""

    car_name = StringField(
        "Car Name",
        validators=[DataRequired(message="Car name is required."), Length(max=100)],
    )
    model = StringField("Model", validators=[Optional(), Length(max=100)])
    car_number = StringField("Car Number", validators=[Optional(), Length(max=20)])
    max_capacity = IntegerField(
        "Max Capacity",
        validators=[
            DataRequired(message="Please enter a capacity."),
            NumberRange(
                min=1,
                max=MAX_CAR_CAPACITY,
                message=f"Capacity must be between 1 and {MAX_CAR_CAPACITY}.",
            ),
        ],
    )
    image = FileField(
        "Car Photo",
        validators=[FileAllowed(ALLOWED_IMAGE_EXTENSIONS, "Images only!"), Optional()],
    )

"""Forms for the user blueprint."""

from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from campusrides.core.constants import ALLOWED_IMAGE_EXTENSIONS


class ProfileForm(FlaskForm):
    """Form for filling in or updating a user profile."""

    full_name = StringField(
        "Full Name",
        validators=[DataRequired(message="Full name is required."), Length(max=100)],
    )
    email = StringField("Email", validators=[Optional(), Length(max=254)])
    university = StringField("University", validators=[Optional(), Length(max=200)])
    bio = TextAreaField("Bio", validators=[Optional(), Length(max=1000)])
    location = StringField("Location", validators=[Optional(), Length(max=200)])
    profile_picture = FileField(
        "Profile Picture",
        validators=[FileAllowed(ALLOWED_IMAGE_EXTENSIONS, "Images only!"), Optional()],
    )

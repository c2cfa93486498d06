"""Forms for the group blueprint."""

from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField
from wtforms import StringField, TextAreaField
from wtforms.validators import Length, Optional

from campusrides.core.constants import ALLOWED_IMAGE_EXTENSIONS


class GroupForm(FlaskForm):
    """Form for creating a new group.

    Required fields are checked by GroupService so the messages match the
    ones the app has always shown.
    """

    name = StringField("Group Name", validators=[Optional(), Length(max=100)])
    destination = StringField("Destination", validators=[Optional(), Length(max=200)])
    description = TextAreaField("Description", validators=[Optional(), Length(max=1000)])
    color = StringField("Color", validators=[Optional(), Length(max=20)])
    image = FileField(
        "Group Image",
        validators=[FileAllowed(ALLOWED_IMAGE_EXTENSIONS), Optional()],
    )

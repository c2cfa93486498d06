"""Forms for the marketplace blueprint."""

from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, MultipleFileField
from wtforms import FloatField, SelectField, StringField, TextAreaField
from wtforms.validators import (
    DataRequired,
    InputRequired,
    Length,
    NumberRange,
    Optional,
)

from campusrides.core.constants import (
    ALLOWED_IMAGE_EXTENSIONS,
    LISTING_CATEGORIES,
    LISTING_CONDITIONS,
)


class ListingForm(FlaskForm):
    """Form for putting an item up for sale, or editing it."""

    title = StringField(
        "Title",
        validators=[
            DataRequired(message="Please fill in all required fields"),
            Length(max=120),
        ],
    )
    description = TextAreaField(
        "Description", validators=[Optional(), Length(max=2000)]
    )
    price = FloatField(
        "Price",
        validators=[
            InputRequired(message="Please fill in all required fields"),
            NumberRange(min=0, message="Price must be zero or more."),
        ],
    )
    category = SelectField(
        "Category",
        choices=list(LISTING_CATEGORIES.items()),
        validators=[DataRequired(message="Please select a category.")],
    )
    condition = SelectField(
        "Condition",
        choices=list(LISTING_CONDITIONS.items()),
        validators=[DataRequired(message="Please select a condition.")],
    )
    location = StringField("Pickup Location", validators=[Optional(), Length(max=200)])
    images = MultipleFileField(
        "Photos",
        validators=[FileAllowed(ALLOWED_IMAGE_EXTENSIONS, "Images only!"), Optional()],
    )

    def listing_fields(self):
        """Return the submitted values keyed by their Firestore field names."""
        return {
            "title": self.title.data,
            "description": self.description.data or "",
            "price": self.price.data,
            "category": self.category.data,
            "condition": self.condition.data,
            "location": self.location.data or "",
        }

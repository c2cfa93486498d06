"""Forms for the blog blueprint."""

from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from campusrides.core.constants import ALLOWED_IMAGE_EXTENSIONS, BLOG_SLUG_MAX_LENGTH


class BlogForm(FlaskForm):
    """Form for publishing a blog post."""

    title = StringField("Title", validators=[DataRequired(), Length(max=200)])
    excerpt = TextAreaField("Excerpt", validators=[Optional(), Length(max=500)])
    content = TextAreaField("Content", validators=[DataRequired()])
    category = StringField("Category", validators=[DataRequired(), Length(max=50)])
    slug = StringField(
        "Slug", validators=[Optional(), Length(max=BLOG_SLUG_MAX_LENGTH)]
    )
    image = FileField(
        "Cover Image",
        validators=[FileAllowed(ALLOWED_IMAGE_EXTENSIONS), Optional()],
    )

"""Flask extensions shared by the campusrides blueprints."""

from flask_mail import Mail
from flask_wtf.csrf import CSRFProtect

# Outgoing ride and chat notifications
mail = Mail()
csrf = CSRFProtect()

# Users and auth
from quotedesk.models.users.user_models import User
from quotedesk.models.support.activity_models import UserActivity

# Quotes
from quotedesk.models.quotes.quote_models import Quote

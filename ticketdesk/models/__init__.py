from ticketdesk.models.models import *  # noqa: F401,F403
from ticketdesk.models.models import __all__  # noqa: F401

from app.models.base import Base  # noqa: F401

from app.models.api_key import ApiKey  # noqa: F401
from app.models.listing import Listing  # noqa: F401
from app.models.user_listing import UserListingEntry  # noqa: F401
from app.models.bookmark import Bookmark  # noqa: F401
from app.models.view_log import ViewLog  # noqa: F401
from app.models.report import ListingReport  # noqa: F401
from app.models.audit_log import AuditLog  # noqa: F401
from app.models.notification import Notification  # noqa: F401
from app.models.idempotency import IdempotencyKey  # noqa: F401

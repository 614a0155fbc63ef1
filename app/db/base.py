"""Centralized SQLModel imports to ensure metadata is populated."""

from app.backend.models import user as _user  # noqa: F401
from app.backend.models import session as _session  # noqa: F401
from app.backend.models import verification_code as _verification_code  # noqa: F401

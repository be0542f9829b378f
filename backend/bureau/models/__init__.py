from bureau.models.user import User
from bureau.models.profile import Profile
from bureau.models.access_request import AccessRequest
from bureau.models.inquiry import Inquiry
from bureau.models.payment_settings import PaymentSettings
from bureau.models.audit import AuditLog

__all__ = ["User", "Profile", "AccessRequest", "Inquiry", "PaymentSettings", "AuditLog"]

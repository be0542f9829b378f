from bureau.services.audit_service import AuditService
from bureau.services.profile_service import ProfileService
from bureau.services.access_ledger import AccessLedger
from bureau.services.account_service import AccountService
from bureau.services.inquiry_service import InquiryService

__all__ = ["AuditService", "ProfileService", "AccessLedger", "AccountService", "InquiryService"]

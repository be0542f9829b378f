"""
Payment Settings Routes — Where members pay the access fee (UPI id, QR code, amount).
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.orm import Session

from bureau.config import get_settings
from bureau.database import get_db
from bureau.errors import AssetStoreError, ValidationError
from bureau.models.payment_settings import PaymentSettings
from bureau.models.user import User
from bureau.schemas.schemas import PaymentSettingsOut, PaymentSettingsResponse
from bureau.security import require_admin
from bureau.services.asset_store import get_asset_store, store_upload
from bureau.services.audit_service import AuditService
from bureau.utils.validators import validate_upi_vpa

logger = logging.getLogger(__name__)
settings = get_settings()
router = APIRouter(prefix="/api/payment-settings", tags=["Payment Settings"])


def active_payment_settings(db: Session) -> PaymentSettings:
    """The active settings row, created from configured defaults on first use."""
    current = db.query(PaymentSettings).filter(PaymentSettings.is_active.is_(True)).first()
    if current:
        return current

    current = PaymentSettings(
        upi_id=settings.DEFAULT_UPI_ID,
        qr_code_url=settings.DEFAULT_QR_CODE_URL,
        access_fee=settings.DEFAULT_ACCESS_FEE,
        is_active=True,
    )
    db.add(current)
    db.commit()
    db.refresh(current)
    logger.info("Default payment settings created")
    return current


@router.get("", response_model=PaymentSettingsResponse)
def get_payment_settings(db: Session = Depends(get_db)):
    """Public: what to pay and where."""
    return PaymentSettingsResponse(settings=PaymentSettingsOut.model_validate(active_payment_settings(db)))


@router.put("", response_model=PaymentSettingsResponse)
def update_payment_settings(
    request: Request,
    upi_id: Optional[str] = Form(None),
    access_fee: Optional[float] = Form(None),
    qr_code: Optional[UploadFile] = File(None),
    admin: User = Depends(require_admin),
    store=Depends(get_asset_store),
    db: Session = Depends(get_db),
):
    """Update UPI id, fee and/or QR image (admin)."""
    if upi_id is not None and not validate_upi_vpa(upi_id):
        raise ValidationError("Invalid UPI ID format", code="invalid_upi_id")
    if access_fee is not None and access_fee <= 0:
        raise ValidationError("Access fee must be greater than zero", code="invalid_amount")

    current = active_payment_settings(db)
    asset = store_upload(store, qr_code, "qr-codes")

    old_key = None
    if upi_id is not None:
        current.upi_id = upi_id.strip()
    if access_fee is not None:
        current.access_fee = access_fee
    if asset:
        old_key = current.qr_code_key
        current.qr_code_url = asset.url
        current.qr_code_key = asset.key
    current.last_updated_by = admin.id
    db.commit()
    db.refresh(current)

    if old_key:
        try:
            store.delete(old_key)
        except AssetStoreError:
            logger.warning("Old QR code %s could not be deleted", old_key)

    AuditService.log(
        db, "payment_settings", current.id, "PAYMENT_SETTINGS_UPDATED",
        actor_id=admin.id,
        payload={"upi_id": current.upi_id, "access_fee": current.access_fee, "qr_code_url": current.qr_code_url},
        ip_address=request.client.host if request.client else None,
    )
    logger.info("Payment settings updated by admin %s", admin.id)

    return PaymentSettingsResponse(
        msg="Payment settings updated successfully",
        settings=PaymentSettingsOut.model_validate(current),
    )

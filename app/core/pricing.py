"""
Booking price breakdown and booking codes. All amounts are integer paise.
"""

import secrets
from typing import Dict, Optional

from fastapi import HTTPException

from app.config.settings import settings

_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def price_breakdown(original_price: int, discount_amount: int = 0, gst_rate_percent: Optional[int] = None) -> Dict[str, int]:
    """final = original - discount; GST is charged on final; total = final + GST"""
    if original_price < 0:
        raise HTTPException(status_code=422, detail="Price cannot be negative")
    if discount_amount < 0 or discount_amount > original_price:
        raise HTTPException(status_code=422, detail="Discount must be between 0 and the original price")
    rate = settings.gst_rate_percent if gst_rate_percent is None else gst_rate_percent
    final_price = original_price - discount_amount
    gst_amount = round(final_price * rate / 100)
    return {
        "price": final_price,
        "original_price": original_price,
        "discount_amount": discount_amount,
        "final_price": final_price,
        "gst_amount": gst_amount,
        "total_amount": final_price + gst_amount,
    }


def platform_fee(amount: int, fee_percent: Optional[int] = None) -> int:
    rate = settings.platform_fee_percent if fee_percent is None else fee_percent
    return round(amount * rate / 100)


def generate_booking_code(prefix: str) -> str:
    """e.g. CLS-7K2M9QX4; uniqueness is enforced by the booking_code column"""
    return f"{prefix}-" + "".join(secrets.choice(_CODE_ALPHABET) for _ in range(8))

"""
Shared marketplace enumerations, used as Literal types on request/response schemas.
"""

from typing import Literal

ClassLevel = Literal["beginner", "intermediate", "advanced", "all"]

DanceForm = Literal[
    "contemporary", "hip-hop", "ballet", "jazz", "kathak",
    "bharatanatyam", "bollywood", "salsa", "freestyle", "breaking",
    "urban", "classical", "folk", "tango", "bachata", "other",
]

ClassType = Literal["workshop", "regular", "bundle"]

BookingStatus = Literal["pending", "confirmed", "cancelled", "completed"]

GigStatus = Literal["open", "closed", "filled", "cancelled"]

ApplicationStatus = Literal["applied", "accepted", "rejected"]

ApprovalStatus = Literal["pending", "approved", "rejected"]

PaymentStatus = Literal["pending", "paid", "failed"]

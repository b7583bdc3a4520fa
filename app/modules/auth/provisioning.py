"""
Registration-time provisioning.

A new account is written in several steps: the Supabase Auth identity, the users
profile row, exactly one default role grant and, for artists and studio owners,
a companion extension row. Supabase offers no client-side transaction across the
auth API and table writes, so the steps run inside a ProvisioningUnit that keeps
a compensating undo per completed step and replays them in reverse on failure.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import HTTPException
from supabase import Client

from app.config.settings import settings
from app.modules.auth.schemas import RegisterRequest

logger = logging.getLogger(__name__)

PLACEHOLDER = "To be updated"

EXTENSION_TABLES = {
    "artist": "artists",
    "studio_owner": "studios",
}


class ProvisioningUnit:
    """Context manager collecting undo callbacks; undoes completed steps if the block raises."""

    def __init__(self, label: str):
        self.label = label
        self._undo: List[Tuple[str, Callable[[], Any]]] = []
        self.rolled_back = False

    def on_rollback(self, step: str, undo: Callable[[], Any]) -> None:
        self._undo.append((step, undo))

    @property
    def completed_steps(self) -> List[str]:
        return [step for step, _ in self._undo]

    def __enter__(self) -> "ProvisioningUnit":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self._undo.clear()
            return False
        logger.warning(f"Provisioning {self.label} failed after {self.completed_steps}: {exc}; rolling back")
        self.rollback()
        return False

    def rollback(self) -> None:
        while self._undo:
            step, undo = self._undo.pop()
            try:
                undo()
                logger.info(f"Rolled back {step} for {self.label}")
            except Exception as e:
                logger.error(f"Rollback of {step} for {self.label} failed: {e}")
        self.rolled_back = True


def extension_defaults(role_name: str, user_id: str, data: RegisterRequest) -> Optional[Dict[str, Any]]:
    """Placeholder values for the extension row's required columns the user has not supplied yet."""
    if role_name == "artist":
        return {
            "user_id": user_id,
            "bio": data.bio or PLACEHOLDER,
            "experience": 0,
            "specialization": PLACEHOLDER,
            "is_verified": False,
        }
    if role_name == "studio_owner":
        return {
            "user_id": user_id,
            "name": data.name,
            "address": PLACEHOLDER,
            "city": PLACEHOLDER,
            "area": PLACEHOLDER,
            "capacity": 0,
            "price_per_hour": 0,
            "rental_fee_per_class": settings.default_studio_rental_fee,
            "contact_phone": data.phone,
            "contact_email": data.email,
            "is_verified": False,
            "is_active": True,
        }
    return None


@dataclass
class ProvisionedAccount:
    auth_user: Any
    auth_session: Any
    profile: Dict[str, Any]
    grant: Dict[str, Any]
    extension: Optional[Dict[str, Any]] = None


class AccountProvisioner:
    def __init__(self, supabase: Client, admin_supabase: Client):
        self.supabase = supabase
        self.admin_supabase = admin_supabase

    def _delete_row(self, table: str, row_id: str) -> Callable[[], Any]:
        return lambda: self.supabase.table(table).delete().eq("id", row_id).execute()

    def _insert(self, unit: ProvisioningUnit, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        result = self.supabase.table(table).insert(values).execute()
        if not result.data:
            raise HTTPException(status_code=500, detail=f"Failed to create {table} row")
        row = result.data[0]
        unit.on_rollback(f"{table} row", self._delete_row(table, row["id"]))
        return row

    def provision(self, data: RegisterRequest, role: Dict[str, Any]) -> ProvisionedAccount:
        """Create identity, profile, default role grant and extension row, or none of them."""
        with ProvisioningUnit(data.email) as unit:
            auth_response = self.supabase.auth.sign_up({
                "email": data.email,
                "password": data.password,
                "options": {
                    "data": {"name": data.name, "phone": data.phone, "role": data.role}
                }
            })
            user = auth_response.user
            if not user:
                raise HTTPException(status_code=400, detail="Failed to register user")
            # With e-mail confirmation on, Supabase answers a repeated sign-up with an
            # identity-less user instead of an error
            if getattr(user, "identities", None) == []:
                raise HTTPException(status_code=409, detail="User already exists")
            unit.on_rollback(
                "auth identity",
                lambda: self.admin_supabase.auth.admin.delete_user(user.id)
            )

            now = datetime.now(timezone.utc).isoformat()
            profile = self._insert(unit, "users", {
                "id": user.id,
                "email": user.email or data.email,
                "name": data.name,
                "phone": data.phone,
                "profile_pic": data.profile_pic or None,
                "gender": data.gender,
                "instagram": data.instagram,
                "height": data.height,
                "bio": data.bio,
                "is_active": True,
                "email_verified": bool(getattr(user, "email_confirmed_at", None)),
                "created_at": now,
                "updated_at": now,
            })

            grant = self._insert(unit, "user_roles", {
                "user_id": user.id,
                "role_id": role["id"],
                "assigned_by": None,
                "assigned_at": now,
                "is_active": True,
                "notes": "Default role assigned at registration",
            })

            extension = None
            defaults = extension_defaults(role["name"], user.id, data)
            if defaults is not None:
                extension = self._insert(unit, EXTENSION_TABLES[role["name"]], defaults)

        logger.info(f"Provisioned {data.email} as {role['name']}")
        return ProvisionedAccount(
            auth_user=user,
            auth_session=auth_response.session,
            profile=profile,
            grant=grant,
            extension=extension,
        )

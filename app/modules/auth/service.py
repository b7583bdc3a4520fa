import logging
from typing import Dict, Any, Optional

from supabase import Client
from fastapi import HTTPException

from app.config.settings import settings
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, AuthResponse, EnrichedUser, SessionInfo,
    PasswordChangeRequest, PasswordResetConfirm, MessageResponse
)
from app.modules.auth.provisioning import AccountProvisioner
from app.modules.auth.hooks import after_sign_in, enrich_session
from app.modules.audit.service import AuditService

logger = logging.getLogger(__name__)


def _is_duplicate_error(message: str) -> bool:
    message = message.lower()
    return "already registered" in message or "already exists" in message


def _session_info(session: Any) -> Optional[SessionInfo]:
    if not session:
        return None
    return SessionInfo(
        access_token=session.access_token,
        refresh_token=getattr(session, "refresh_token", None),
        token_type="bearer",
        expires_at=getattr(session, "expires_at", None),
    )


def _provider_user(user: Any) -> Dict[str, Any]:
    """Map a Supabase Auth user onto the users row shape"""
    metadata = getattr(user, "user_metadata", None) or {}
    return {
        "id": user.id,
        "email": user.email,
        "name": metadata.get("name"),
        "phone": metadata.get("phone"),
        "email_verified": bool(getattr(user, "email_confirmed_at", None)),
    }


class AuthService:
    def __init__(self, supabase: Client, admin_supabase: Optional[Client] = None):
        self.supabase = supabase
        self.admin_supabase = admin_supabase or supabase
        self.audit = AuditService(supabase)

    def _profile_row(self, user_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("users")\
            .select("*")\
            .eq("id", user_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _default_role(self, role_name: str) -> Dict[str, Any]:
        result = self.supabase.table("roles")\
            .select("*")\
            .eq("name", role_name)\
            .limit(1)\
            .execute()
        if not result.data or not result.data[0].get("is_active", True):
            logger.warning(f"Registration refused: role {role_name} is not seeded")
            raise HTTPException(
                status_code=404,
                detail=f"Role '{role_name}' not found. Run the role seed script first."
            )
        return result.data[0]

    def _auth_response(self, user_row: Dict[str, Any], session: Any) -> AuthResponse:
        payload = enrich_session(self.supabase, user_row, session)
        return AuthResponse(user=EnrichedUser(**payload["user"]), session=_session_info(session))

    def register(
        self,
        register_data: RegisterRequest,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> AuthResponse:
        """Register a new user: identity, profile, default role and extension row"""
        try:
            role = self._default_role(register_data.role)
            account = AccountProvisioner(self.supabase, self.admin_supabase).provision(register_data, role)
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if _is_duplicate_error(error_message):
                raise HTTPException(status_code=409, detail="User already exists")
            logger.error(f"Registration failed for {register_data.email}: {error_message}")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

        user_id = account.profile["id"]
        self.audit.record(
            action="user_registered",
            entity_type="user",
            entity_id=user_id,
            actor_id=user_id,
            target_user_id=user_id,
            new_values={"email": account.profile["email"], "role": role["name"]},
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self.audit.record(
            action="role_granted",
            entity_type="user_role",
            entity_id=account.grant["id"],
            target_user_id=user_id,
            new_values={"role": role["name"], "is_active": True},
            metadata={"source": "registration"},
            ip_address=ip_address,
            user_agent=user_agent,
        )
        return self._auth_response(account.profile, account.auth_session)

    def login(self, login_data: LoginRequest) -> AuthResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            user = auth_response.user
            user_row = self._profile_row(user.id) or _provider_user(user)
            if user_row.get("is_active") is False:
                self.logout(auth_response.session.access_token)
                logger.warning(f"Sign-in refused for deactivated user {user.id}")
                raise HTTPException(status_code=403, detail="Account is deactivated")
            after_sign_in(self.supabase, user.id)
            return self._auth_response(user_row, auth_response.session)
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from a Supabase Auth token"""
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            profile = self._profile_row(user.id)
            if profile and profile.get("is_active") is False:
                raise HTTPException(status_code=403, detail="Account is deactivated")
            return {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
                "created_at": user.created_at,
                "updated_at": user.updated_at
            }
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def get_me(self, user_data: Dict[str, Any]) -> EnrichedUser:
        """Current user's profile with roles, permissions and extension rows"""
        user_row = self._profile_row(user_data["id"]) or {
            "id": user_data["id"],
            "email": user_data["email"],
            "name": (user_data.get("user_metadata") or {}).get("name"),
        }
        payload = enrich_session(self.supabase, user_row)
        return EnrichedUser(**payload["user"])

    def logout(self, token: str) -> bool:
        """Invalidate the caller's current session"""
        try:
            self.admin_supabase.auth.admin.sign_out(token, "local")
            return True
        except Exception as e:
            logger.warning(f"Logout failed: {e}")
            return False

    def revoke_all_sessions(self, token: str, user_id: str) -> MessageResponse:
        """Sign the user out of every device"""
        try:
            self.admin_supabase.auth.admin.sign_out(token, "global")
            self.audit.record(
                action="sessions_revoked",
                entity_type="user",
                entity_id=user_id,
                actor_id=user_id,
                target_user_id=user_id,
            )
            return MessageResponse(message="All sessions revoked")
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to revoke sessions: {str(e)}")

    def change_password(self, user_data: Dict[str, Any], change: PasswordChangeRequest) -> MessageResponse:
        """Verify the current password, then set the new one through the admin API"""
        try:
            try:
                self.supabase.auth.sign_in_with_password({
                    "email": user_data["email"],
                    "password": change.current_password
                })
            except Exception:
                raise HTTPException(status_code=401, detail="Current password is incorrect")

            self.admin_supabase.auth.admin.update_user_by_id(
                user_data["id"],
                {"password": change.new_password}
            )
            self.audit.record(
                action="password_changed",
                entity_type="user",
                entity_id=user_data["id"],
                actor_id=user_data["id"],
                target_user_id=user_data["id"],
            )
            return MessageResponse(message="Password updated successfully")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to change password: {str(e)}")

    def request_password_reset(self, email: str) -> MessageResponse:
        """Send a reset e-mail. The answer is the same whether or not the address is known."""
        try:
            self.supabase.auth.reset_password_for_email(
                email,
                {"redirect_to": f"{settings.site_url}/reset-password"}
            )
        except Exception as e:
            logger.warning(f"Password reset request for {email} failed: {e}")
        return MessageResponse(message="If the account exists, a reset link has been sent")

    def confirm_password_reset(self, confirm: PasswordResetConfirm) -> MessageResponse:
        """Exchange a recovery token for a new password"""
        try:
            try:
                verified = self.supabase.auth.verify_otp({"token_hash": confirm.token, "type": "recovery"})
            except Exception:
                raise HTTPException(status_code=400, detail="Invalid or expired token")
            if not verified or not verified.user:
                raise HTTPException(status_code=400, detail="Invalid or expired token")

            self.admin_supabase.auth.admin.update_user_by_id(
                verified.user.id,
                {"password": confirm.password}
            )
            self.audit.record(
                action="password_reset",
                entity_type="user",
                entity_id=verified.user.id,
                actor_id=verified.user.id,
                target_user_id=verified.user.id,
            )
            return MessageResponse(message="Password has been reset")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Password reset failed: {str(e)}")

    def verify_email(self, token: str) -> MessageResponse:
        """Confirm an e-mail address and mirror the flag onto the profile row"""
        try:
            try:
                verified = self.supabase.auth.verify_otp({"token_hash": token, "type": "email"})
            except Exception:
                raise HTTPException(status_code=400, detail="Invalid or expired token")
            if not verified or not verified.user:
                raise HTTPException(status_code=400, detail="Invalid or expired token")

            self.supabase.table("users")\
                .update({"email_verified": True})\
                .eq("id", verified.user.id)\
                .execute()
            return MessageResponse(message="Email verified")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Email verification failed: {str(e)}")

    def resend_verification(self, email: str) -> MessageResponse:
        try:
            self.supabase.auth.resend({
                "type": "signup",
                "email": email,
                "options": {"email_redirect_to": settings.site_url}
            })
        except Exception as e:
            logger.warning(f"Resending verification to {email} failed: {e}")
        return MessageResponse(message="If the account exists, a verification e-mail has been sent")

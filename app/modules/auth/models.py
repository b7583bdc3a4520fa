# Supabase Auth + users profile table
# Identity, credentials, sessions and e-mail tokens live in Supabase Auth (auth.users,
# auth.sessions). This backend keeps its own profile row per identity and maps it to
# the provider's user shape; see service.py and hooks.py.

"""
Supabase Auth provides:
- auth.sign_up() - Register new identities
- auth.sign_in_with_password() - Authenticate users, issue sessions
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users
- auth.reset_password_for_email() / auth.verify_otp() - password and e-mail token flows
- auth.resend() - resend the sign-up confirmation e-mail
- auth.admin.* - service-role operations (delete identity, update password, global sign-out)

Expected Supabase table structure:

users:
- id: uuid (primary key, references auth.users.id)
- email: text (unique, not null) - synced from auth.users
- name: text (not null)
- phone: text (nullable)
- profile_pic: text (nullable)
- gender: text (nullable)
- instagram: text (nullable)
- height: text (nullable)
- bio: text (nullable)
- is_active: boolean (not null, default: true) - soft delete flag
- email_verified: boolean (not null, default: false)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Provider user -> users row mapping:
- user.id               -> id
- user.email            -> email
- user_metadata.name    -> name
- email_confirmed_at    -> email_verified
"""

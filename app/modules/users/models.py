# Supabase table: users (profile row per Supabase Auth identity)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Column list for users lives in app/modules/auth/models.py, since registration creates the row

"""
users is the join anchor for every other entity:
- user_roles.user_id / user_roles.assigned_by
- artists.user_id, studios.user_id, students.user_id (at most one row each)
- class_bookings.user_id, studio_bookings.user_id, gig_applications.user_id, gigs.host_id
- audit_log.user_id (actor) and audit_log.target_user_id

Rows are never physically deleted; deactivation sets is_active = false.
"""

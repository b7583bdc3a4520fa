# Supabase table: audit_log
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

audit_log:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, nullable) - actor who performed the action
- target_user_id: uuid (foreign key to users.id, nullable) - user affected by the action
- action: text (not null) - e.g. "user_registered", "role_granted", "role_revoked", "permission_granted"
- entity_type: text (not null) - e.g. "user", "user_role", "role_permission"
- entity_id: text (nullable) - id of the affected row
- old_values: jsonb (nullable)
- new_values: jsonb (nullable)
- metadata: jsonb (nullable)
- ip_address: text (nullable)
- user_agent: text (nullable)
- created_at: timestamp (default: now())

Rows are append-only: no update or delete is ever issued against this table.
"""

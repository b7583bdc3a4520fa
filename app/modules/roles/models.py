# Supabase tables: roles, actions, user_roles, role_permissions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

roles:
- id: uuid (primary key)
- name: text (not null, unique) - e.g., "student", "artist", "studio_owner", "admin"
- description: text (nullable)
- is_active: boolean (not null, default: true)
- is_wildcard: boolean (not null, default: false) - role defined as "every action"
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

actions:
- id: uuid (primary key)
- name: text (not null, unique) - "<operation>_<entity>", e.g., "create_class"
- description: text (nullable)
- category: text (not null) - e.g., "classes", "class_bookings", "users", "system"
- table_name: text (nullable) - table the action relates to
- operation: text (not null) - create | read | update | delete | manage
- is_active: boolean (not null, default: true)
- created_at: timestamp (default: now())

user_roles:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null) - subject
- role_id: uuid (foreign key to roles.id, not null)
- assigned_by: uuid (foreign key to users.id, nullable) - grantor
- assigned_at: timestamp (default: now())
- is_active: boolean (not null, default: true) - revocation flips this to false
- notes: text (nullable)

role_permissions:
- id: uuid (primary key)
- role_id: uuid (foreign key to roles.id, not null)
- action_id: uuid (foreign key to actions.id, not null)
- is_active: boolean (not null, default: true)
- created_at: timestamp (default: now())

Grant rows are never deleted; revocation is a soft flag flip so the audit
history stays intact. A user may hold several active role grants at once.
"""

# Supabase tables: gigs, gig_applications
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
gigs (performance opportunities):
- id: serial (primary key)
- host_id: uuid (not null, references users.id) - who created the gig
- title, description, requirements, location, city: text (not null)
- address, area: text (nullable)
- date: date (not null)
- start_time, end_time: time (nullable)
- payment: integer (nullable) - paise
- spots: integer (not null)
- filled_spots: integer (default: 0)
- status: text (not null) - open, closed, filled, cancelled
- gig_type, dance_form, skill_level, age_group: text (nullable)
- equipment, additional_info, contact_info: jsonb (nullable)
- is_active: boolean (not null, default: true)
- created_at: timestamp (default: now())

gig_applications:
- id: serial (primary key)
- gig_id: integer (not null, references gigs.id)
- user_id: uuid (not null, references users.id) - applicant
- status: text (not null) - applied, accepted, rejected
- applied_at: timestamp (default: now())
- message, portfolio, experience: text (nullable)
- availability, additional_info: jsonb (nullable)
- expected_payment: integer (nullable) - paise
- reviewed_at: timestamp (nullable)
- reviewed_by: uuid (nullable, references users.id)
- review_notes: text (nullable)
"""

# Supabase tables: artists, studios, students
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Each table extends users with role-specific details. A user owns at most one
row per table (user_id is unique). artists and studios rows are created at
registration with placeholder values; the students row is created on first update.

artists:
- id: serial (primary key)
- user_id: uuid (not null, unique, references users.id)
- bio: text (not null)
- experience: integer (not null) - years
- specialization: text (not null) - dance form
- portfolio: text (nullable)
- rate_per_hour: integer (nullable) - paise
- rate_per_class: integer (nullable) - paise
- availability, social_links, achievements, languages: jsonb (nullable)
- teaching_style: text (nullable)
- is_verified: boolean (not null, default: false)
- rating: real (default: 0)
- total_ratings: integer (default: 0)

studios:
- id: serial (primary key)
- user_id: uuid (not null, unique, references users.id) - owner
- name, address, city, area: text (not null)
- pincode: text (nullable)
- capacity: integer (not null)
- price_per_hour: integer (not null) - paise
- rental_fee_per_class: integer (default: 20000) - paise, charged per class hosted
- amenities, images, operating_hours, rules, equipment: jsonb (nullable)
- description: text (nullable)
- contact_phone, contact_email: text (not null)
- latitude, longitude: real (nullable)
- rating: real (default: 0)
- total_ratings: integer (default: 0)
- is_verified: boolean (not null, default: false)
- is_active: boolean (not null, default: true)

students:
- id: serial (primary key)
- user_id: uuid (not null, unique, references users.id)
- dance_experience: text (nullable)
- preferred_dance_forms: jsonb (nullable) - list of dance forms
- skill_level: text (nullable)
- goals: text (nullable)
- medical_conditions: text (nullable)
- emergency_contact: jsonb (nullable)
- is_active: boolean (not null, default: true)
"""

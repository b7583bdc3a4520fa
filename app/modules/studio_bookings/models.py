# Supabase tables: studio_bookings, studio_rental_transactions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
studio_bookings:
- id: serial (primary key)
- user_id: uuid (not null, references users.id) - renter
- studio_id: integer (not null, references studios.id)
- booking_date: date (not null)
- start_time, end_time: time (not null)
- price, original_price, final_price, gst_amount, total_amount: integer (not null) - paise
- discount_amount: integer (default: 0) - always 0, no rental discounts yet
- status: text (not null) - pending, confirmed, cancelled, completed
- booking_code: text (not null, unique)
- additional_services, equipment_needed: jsonb (nullable)
- payment_method, notes, purpose: text (nullable)
- created_at: timestamp (default: now())

studio_rental_transactions (payouts to studio owners):
- id: serial (primary key)
- studio_booking_id: integer (not null, references studio_bookings.id)
- studio_id: integer (not null, references studios.id)
- renter_id: uuid (not null, references users.id)
- rental_fee: integer (not null) - paise owed to the studio
- platform_fee: integer (not null) - paise kept as commission
- total_amount: integer (not null) - paise charged to the renter
- status: text (default: 'pending') - pending, paid, failed
- payment_date: timestamp (nullable)
- transaction_id: text (nullable) - payment gateway reference
- notes: text (nullable)
- created_at: timestamp (default: now())
"""

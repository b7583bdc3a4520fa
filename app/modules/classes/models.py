# Supabase tables: classes, class_bookings
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
classes:
- id: serial (primary key)
- title: text (not null)
- type: text (not null) - workshop, regular, bundle
- style: text (not null) - dance form
- level: text (not null) - beginner, intermediate, advanced, all
- artist_id: integer (not null, references artists.id)
- studio_id: integer (not null, references studios.id)
- date: date (not null)
- start_time, end_time: time (not null)
- early_bird_price, group_price: integer (nullable) - paise
- regular_price: integer (not null) - paise
- max_participants: integer (not null)
- current_participants: integer (not null, default: 0)
- description: text (not null)
- requirements: jsonb (nullable) - what students need to bring
- image, song_name, choreography_video_url: text (nullable)
- is_active: boolean (not null, default: true)
- studio_approval_status: text (default: 'pending') - pending, approved, rejected
- studio_rental_fee: integer (default: 0) - paise, copied from studios.rental_fee_per_class
- studio_approved_at, studio_rejected_at: timestamp (nullable)
- studio_rejection_reason: text (nullable)
- class_completed_at: timestamp (nullable)
- rental_payment_status: text (default: 'pending') - pending, paid, failed
- rental_paid_at: timestamp (nullable)
- latitude, longitude: real (nullable) - copied from the studio
- created_at: timestamp (default: now())

class_bookings:
- id: serial (primary key)
- user_id: uuid (not null, references users.id) - student
- class_id: integer (not null, references classes.id)
- booking_date: timestamp (default: now())
- price: integer (not null) - paise paid before tax
- original_price: integer (not null)
- discount_amount: integer (default: 0) - regular_price minus the booked tier price
- final_price: integer (not null) - original_price - discount_amount
- gst_amount: integer (not null) - GST on final_price
- total_amount: integer (not null) - final_price + gst_amount
- status: text (not null) - pending, confirmed, cancelled, completed
- booking_code: text (not null, unique)
- payment_method, notes: text (nullable)
- attended: boolean (default: false)
- created_at: timestamp (default: now())
"""

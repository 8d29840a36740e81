# Supabase tables: signup_windows, beds
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

signup_windows
- id: uuid (primary key)
- house_id: uuid (foreign key to houses.id, on delete cascade)
- target_weekend_start: date (not null) - Friday of the weekend being signed up for
- target_weekend_end: date (not null) - Sunday of that weekend
- opens_at: timestamp (not null) - when the window flips from scheduled to open
- status: text (not null, default: 'scheduled') - values: scheduled, open, closed
- closed_at: timestamp (nullable)
- created_at: timestamp (default: now())

beds (only counted here)
- id: uuid (primary key)
- room_id: uuid (foreign key to rooms.id)
- house_id: uuid (foreign key to houses.id)
"""

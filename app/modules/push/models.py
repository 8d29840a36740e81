# Supabase table: push_tokens
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, not null, on delete cascade)
- token: text (not null) - Expo push token, e.g. ExponentPushToken[xxxxxxxx]
- platform: text (not null) - values: ios, android, web
- device_id: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now(), maintained by trigger)
- UNIQUE (user_id, token)
"""

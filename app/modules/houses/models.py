# Supabase tables: houses, house_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

houses
- id: uuid (primary key)
- name: text (not null)
- settings: jsonb (nullable) - HouseSettings:
    features: {<feature_id>: {enabled?: bool, label?: str}}
    bedSignupEnabled: bool - weekly bed sign-up windows
    autoScheduleWindows: bool - cron creates windows automatically (default true)
    guestNightlyRate: number - guest fee per guest per night (default 50)
    guestFeeRecipient: uuid - member who collects guest fees (default first admin)
- created_at: timestamp (default: now())

house_members
- id: uuid (primary key)
- house_id: uuid (foreign key to houses.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id, nullable while invite is pending)
- role: text - values: admin, member
- invite_status: text - values: pending, accepted
- joined_at: timestamp (nullable)
"""

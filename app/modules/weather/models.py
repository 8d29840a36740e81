# Supabase table: resorts
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: text (primary key) - slug, e.g. "alta"
- name: text (not null)
- latitude: double precision (not null)
- longitude: double precision (not null)
- elevation: integer (nullable) - summit/base elevation in feet
"""

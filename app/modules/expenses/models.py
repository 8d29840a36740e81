# Supabase tables: expenses, expense_splits
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

expenses
- id: uuid (primary key)
- house_id: uuid (foreign key to houses.id, on delete cascade)
- paid_by: uuid (foreign key to profiles.id) - who fronted the money
- created_by: uuid (foreign key to profiles.id)
- title: text (not null)
- amount: numeric (not null)
- description: text (default: '')
- category: text - values: groceries, utilities, supplies, rent, entertainment,
  transportation, guest_fees, other
- date: date (not null)
- created_at: timestamp (default: now())

expense_splits
- id: uuid (primary key)
- expense_id: uuid (foreign key to expenses.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id) - who owes this share
- amount: numeric (not null)
- settled: boolean (default: false)
- settled_at: timestamp (nullable)

Split amounts of an expense add up to its amount (within one cent).
"""

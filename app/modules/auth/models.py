# Supabase Auth
# This module uses Supabase's built-in authentication system.
# Sign-up, login and password reset happen in the mobile client; the backend
# only verifies access tokens.

"""
Supabase Auth calls used here:
- auth.get_user(jwt=...) - resolve the user behind a bearer token
- auth.admin.delete_user(id) - remove the user (accounts module, service role)

Deleting the auth user cascades to profiles and every table keyed on it
(house_members, push_tokens, expense_splits, ...).
"""

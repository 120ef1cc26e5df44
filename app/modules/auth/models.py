# Supabase Auth
# This module uses Supabase's built-in authentication system
# Supabase Auth handles:
# - User registration (auth.users table)
# - User login and session management
# - JWT token generation and validation
# - Password reset emails

"""
Supabase Auth calls consumed here:
- auth.sign_up() - Register new users (full_name goes into user_metadata)
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users
- auth.reset_password_for_email() - Send password reset link

Registration also upserts the matching row in the public `profiles` table
(see app/modules/profiles/models.py).
"""

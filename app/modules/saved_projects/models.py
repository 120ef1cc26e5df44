# Supabase table: saved_projects
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, default: gen_random_uuid())
- user_id: uuid (foreign key to auth.users.id, not null)
- project_id: uuid (foreign key to projects.id, not null, on delete cascade)
- saved_at: timestamp (default: now())

unique (user_id, project_id)
"""

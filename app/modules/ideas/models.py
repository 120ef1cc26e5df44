# Supabase table: project_ideas
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, default: gen_random_uuid())
- user_id: uuid (foreign key to auth.users.id, not null)
- title: text (not null)
- description: text (not null)
- difficulty_level: text (not null) - values: beginner, intermediate, advanced
- domain: text (not null)
- technologies: text[] (not null, default: '{}')
- features: text[] (not null, default: '{}')
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Generated ideas are not stored until the user saves one; the API field
`difficulty` is stored as `difficulty_level`.
"""

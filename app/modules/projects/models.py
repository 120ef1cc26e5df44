# Supabase table: projects
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, default: gen_random_uuid())
- user_id: uuid (foreign key to auth.users.id, not null)
- title: text (not null)
- description: text (not null)
- project_type: text (nullable) - values: web, mobile, desktop, ml, game
- domain: text[] (not null)
- complexity: text (nullable) - Very Simple, Simple, Moderate, Complex, Very Complex
- skill_level: text (nullable) - beginner, intermediate, advanced
- technologies: text[] (not null, default: '{}')
- overview: text (nullable) - JSON string: {"keyFeatures": [...], "estimatedTime": "...", "purpose": "..."}
- roadmap: jsonb (nullable)
- project_structure: jsonb (nullable)
- pseudo_code: text (nullable)
- resource_links: jsonb (nullable)
- created_at: timestamp (default: now())
"""

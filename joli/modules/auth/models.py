# Supabase Auth + users table
# Credentials, sessions and JWTs are handled by Supabase Auth (auth.users).
# Application profile data lives in the public users table.

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, same as auth.users.id)
- email: text (not null)
- first_name: text (nullable)
- last_name: text (nullable)
- role: text (not null, default: 'participant') - values: organizer, participant
- is_active: boolean (not null, default: true)
- last_login_at: timestamp (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

When no users row exists yet, role and names fall back to auth user_metadata.
"""

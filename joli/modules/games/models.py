# Supabase table: games
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- title: text (not null)
- description: text (nullable)
- image: text (nullable) - http(s) URL or data:image/...;base64 URL
- type: text (not null) - values: scavenger_hunt, dj_song_voting, guess_the_song, trivia,
  hangman, word_scramble, creative_challenge, truth_or_dare
- organizer_id: uuid (foreign key to users.id, not null)
- rules: jsonb (nullable)
- max_participants: integer (nullable)
- start_time: timestamp (nullable)
- end_time: timestamp (nullable)
- status: text (not null, default: 'draft') - values: draft, active, paused, completed, cancelled
- join_code: varchar(10) (nullable, unique) - see join_codes/models.py
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""

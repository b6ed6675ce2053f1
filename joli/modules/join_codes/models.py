# Supabase table: games (join_code column)
# This file documents the expected database schema for join codes
# Actual operations are handled via Supabase SDK in service.py
#
# Migration: ALTER TABLE games ADD COLUMN IF NOT EXISTS join_code VARCHAR(10) UNIQUE;
#            CREATE INDEX IF NOT EXISTS idx_games_join_code ON games(join_code) WHERE join_code IS NOT NULL;

"""
Expected Supabase column on games:
- join_code: varchar(10) (nullable, unique among non-null values)

A join code is 6 characters from ABCDEFGHJKMNPQRSTUVWXYZ23456789 and only
resolves while games.status = 'active'. Writing a code held by another row
fails with Postgres error 23505 (unique_violation).
"""

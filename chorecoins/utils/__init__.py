"""Shared helpers for errors, money, time and the Supabase client."""

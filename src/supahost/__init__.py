"""supahost: provision self-hosted Supabase instances over SSH."""

__version__ = "0.1.0"

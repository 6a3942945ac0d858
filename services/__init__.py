"""Service layer: refresh token persistence and session orchestration."""

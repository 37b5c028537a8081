"""Imagia API gateway: phone-verified users, per-plan quotas and an Ollama relay."""

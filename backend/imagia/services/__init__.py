"""
Services Module

Business logic and clients for external services:
- quota: Quota/plan engine (registration, consumption, plan changes)
- auth: Phone verification, admin login and token checks
- ollama: Inference relay to the Ollama generation server
- sms: SMS gateway client for verification codes
- log_reader: Admin view over recent operational logs
"""
from .ollama import OllamaClient, ollama_client
from .sms import SmsClient, sms_client

__all__ = [
    "OllamaClient",
    "ollama_client",
    "SmsClient",
    "sms_client",
]

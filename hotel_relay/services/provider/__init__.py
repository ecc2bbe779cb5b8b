"""Transcription/translation providers.

Concrete providers are NOT eagerly imported here. Use explicit imports:
    from hotel_relay.services.provider.sarvam import SarvamProvider
"""

"""Message relay: membership, presence and the transcribe → translate pipeline."""

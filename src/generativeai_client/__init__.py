"""
Generative AI client package.

Provides:
- Response model for the generation endpoint (decode raw replies into
  GenerationReply / TokenCountReply / ErrorReply)
- Thin httpx client plus a FastAPI proxy and CLI on top of it
"""

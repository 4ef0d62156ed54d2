"""
HITH - Telegram companion bot backed by a hosted language model.

Subpackages:
- core     : configuration, logging, errors, rate limiting, languages
- database : async SQLAlchemy engine and models
- memory   : user directory and message store
- llm      : completion client and prompts
- services : conversation pipeline and reply dispatch
- api      : FastAPI webhook application
"""
__version__ = "0.1.0"

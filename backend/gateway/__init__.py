"""GenAI Gateway backend.

REST gateway that forwards text and file prompts to a generative-AI
upstream, validates and sanitizes input, enforces per-client rate limits
and wraps every reply in a uniform JSON envelope.

Modules:
    - config: YAML + environment configuration
    - files: file-type registry and upload validation
    - ai_provider: upstream provider abstraction (Gemini, Claude, OpenAI)
    - genai: generation controller and HTTP routes
"""

__version__ = "1.0.0"

"""
Shared infrastructure for SharpSuite.

- database: motor connection manager with Beanie initialisation
- auth: token providers and the FastAPI auth dependency
- ai: Claude and OpenAI completion providers
- utils: response envelopes, HTTP exceptions, password rules
- config: pydantic-settings base class
"""

"""
ResumeForge - deterministic résumé rendering engine

Turns one normalized résumé record into LaTeX source, a paginated document
tree, PDF bytes and an on-screen HTML preview across several visual templates.

Architecture:
- Templating Context: Data model, grouping, escaping and per-format renderers
- Rendering Context: Output delivery (PDF bytes, preview, exports, compilation)
- Targeting Context: Keyword-frequency tailoring to a job description
"""

__version__ = "0.1.0"

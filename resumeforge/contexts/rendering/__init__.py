"""
Rendering Context

Responsibilities:
- Serializes document trees to PDF bytes
- Renders the on-screen HTML preview
- Packages LaTeX and PDF exports (filenames, MIME types, clipboard text)
- Compiles LaTeX to PDF locally or through remote compilation providers

Owns: Output delivery, file writes, subprocess and HTTP compilation
Never: Decides section content, order or grouping
"""

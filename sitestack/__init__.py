"""
Static site builder with hierarchical, directory-scoped metadata.

A first pass gathers JSON/YAML metadata files and per-file front matter into a
MetadataStore; a second pass renders Markdown and HTML pages with the merged
metadata and copies every other file as-is.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"

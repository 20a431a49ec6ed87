"""Library Catalog - CLI helpers

- Text validation for catalog fields (validators.py)
- Output rendering for the interactive shell (ui_helpers.py)
"""

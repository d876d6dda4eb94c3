"""
Utility modules.

- Best-effort JSON extraction from language model output
"""

from proofpatch.utils.json_extract import extract_first_json_value

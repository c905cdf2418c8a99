"""sheet2word: Excel sheets -> Word documents.

Pipeline: decode -> normalize -> (transpose) -> (split into column pairs)
-> render .docx -> deliver one by one or as a single zip archive.
"""

__version__ = "0.1.0"

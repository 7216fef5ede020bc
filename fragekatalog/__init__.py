"""
Fragenkatalog Parser
====================
Converts the linearized text of the Bavarian hunting exam question catalog
(one PDF per Sachgebiet) into a structured catalog of questions, answer
options and correctness flags.

Architecture:
    - Text Source: Runs pdftotext and returns the document as lines
    - Classifier: Ordered rule pipeline applied to every line
    - Accumulator: Joins multi-line question/option text with bounded lookahead
    - State Machine: Builds per-question drafts and finalizes the catalog
    - Validator: Reports statistics and gaps in a finished catalog

Version: 1.0.0
"""

__version__ = "1.0.0"

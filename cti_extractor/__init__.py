"""
CTI Extractor

Turns unstructured threat-intelligence reports into structured intelligence
(actors, victims, malware, techniques, indicators and relationships) using a
large language model, with validation and defanging of the extracted IoCs.
"""

__version__ = "1.0.0"

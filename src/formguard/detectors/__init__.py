"""
Detectors package for the form spam classifier.

Contains the independent spam heuristics:
- fields: Field lookup and message extraction
- honeypot: Hidden honeypot field check
- timing: Render-to-submit timing check
- content: Message content heuristics

Each detector returns a DetectionResult and never mutates its inputs.
The classifier decides which ones run and in what order.
"""
